"""Shared fixtures for note store tests."""

import pytest

from enml_notes.core.note_store import LocalNoteStore
from enml_notes.data_models import StoreMetadata


@pytest.fixture
def store_metadata(tmp_path):
    root = tmp_path / "store"
    root.mkdir()
    return StoreMetadata(
        name="test",
        path=root,
        description="test store",
        default_notebook="Inbox",
        exists=True,
    )


@pytest.fixture
def store(store_metadata):
    return LocalNoteStore(store_metadata)
