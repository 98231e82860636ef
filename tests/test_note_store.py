"""Tests for the filesystem-backed note store."""

import asyncio

import pytest

from enml_notes.core.markup import wrap_body
from enml_notes.core.resources import build_resource
from enml_notes.data_models import BinaryPayload, NoteFields
from enml_notes.errors import RemoteServiceError, ValidationError


def run(coro):
    return asyncio.run(coro)


def _create(store, title="Note", body="<div>hello</div>", **kwargs):
    return run(store.create_note(NoteFields(title=title, content=wrap_body(body), **kwargs)))


def test_create_and_fetch_round_trip(store, store_metadata):
    created = _create(store, tag_names=["a"], attributes={"author": "Ada"})
    assert created.notebook == "Inbox"
    assert created.content is None
    assert (store_metadata.path / "Inbox" / f"{created.guid}.enml").is_file()

    fetched = run(store.fetch_note(created.guid))
    assert fetched.title == "Note"
    assert fetched.content == wrap_body("<div>hello</div>")
    assert fetched.tag_names == ["a"]
    assert fetched.attributes == {"author": "Ada"}
    assert fetched.content_length == len(fetched.content.encode("utf-8"))


def test_create_requires_title(store):
    with pytest.raises(RemoteServiceError) as excinfo:
        run(store.create_note(NoteFields(title=" ", content=wrap_body(""))))
    assert excinfo.value.code == "BAD_DATA_FORMAT"


def test_resources_are_stored_by_hash(store, store_metadata):
    resource = build_resource("data", BinaryPayload(b"hello", "text/plain"))
    created = _create(store, resources=[resource])
    assert (store_metadata.path / ".resources" / resource.hash_hex).read_bytes() == b"hello"

    fetched = run(store.fetch_note(created.guid, with_resource_data=True))
    assert fetched.resources[0].data == b"hello"
    assert fetched.resources[0].body_hash == resource.body_hash


def test_fetch_unknown_note_is_not_found(store):
    with pytest.raises(RemoteServiceError) as excinfo:
        run(store.fetch_note("missing"))
    assert excinfo.value.code == RemoteServiceError.NOT_FOUND


def test_update_only_touches_set_fields(store):
    created = _create(store, tag_names=["keep"])
    run(store.update_note(created.guid, NoteFields(title="Renamed")))
    fetched = run(store.fetch_note(created.guid))
    assert fetched.title == "Renamed"
    assert fetched.tag_names == ["keep"]
    assert fetched.content == wrap_body("<div>hello</div>")


def test_update_moves_note_between_notebooks(store, store_metadata):
    created = _create(store)
    moved = run(store.update_note(created.guid, NoteFields(notebook="Archive")))
    assert moved.notebook == "Archive"
    assert not (store_metadata.path / "Inbox" / f"{created.guid}.enml").exists()
    assert (store_metadata.path / "Archive" / f"{created.guid}.enml").is_file()


def test_invalid_notebook_is_rejected(store):
    with pytest.raises(ValidationError):
        _create(store, notebook="../outside")


def test_locked_note_cannot_be_updated_or_deleted(store, store_metadata):
    created = _create(store)
    (store_metadata.path / "Inbox" / f"{created.guid}.lock").touch()

    with pytest.raises(RemoteServiceError) as excinfo:
        run(store.update_note(created.guid, NoteFields(title="x")))
    assert excinfo.value.code == RemoteServiceError.NOTE_LOCKED

    with pytest.raises(RemoteServiceError):
        run(store.delete_note(created.guid))


def test_delete_removes_note(store):
    created = _create(store)
    run(store.delete_note(created.guid))
    with pytest.raises(RemoteServiceError):
        run(store.fetch_note(created.guid))


def test_search_matches_title_body_tags_and_notebook(store):
    groceries = _create(store, title="Groceries", body="<div>milk and eggs</div>", tag_names=["home"])
    _create(store, title="Report", body="<div>quarterly numbers</div>", tag_names=["work"], notebook="Work")

    assert [n.guid for n in run(store.search_notes("MILK", None, 10))] == [groceries.guid]
    assert [n.guid for n in run(store.search_notes("tag:home", None, 10))] == [groceries.guid]
    assert [n.title for n in run(store.search_notes("notebook:work", None, 10))] == ["Report"]
    assert [n.title for n in run(store.search_notes("", "Work", 10))] == ["Report"]
    assert run(store.search_notes("nothing-matches", None, 10)) == []
    assert len(run(store.search_notes("", None, 1))) == 1


def test_search_results_omit_content(store):
    _create(store, title="Groceries")
    assert all(note.content is None for note in run(store.search_notes("", None, 10)))


def test_list_notebooks_and_tags(store):
    _create(store, tag_names=["a", "b"])
    _create(store, tag_names=["a"], notebook="Work")

    assert run(store.list_notebooks()) == [
        {"name": "Inbox", "note_count": 1, "default": True},
        {"name": "Work", "note_count": 1, "default": False},
    ]
    assert run(store.list_tags()) == [
        {"name": "a", "note_count": 2},
        {"name": "b", "note_count": 1},
    ]


def test_filesystem_failure_is_an_internal_store_error(store, store_metadata):
    (store_metadata.path / "Work").write_text("not a folder", encoding="utf-8")
    with pytest.raises(RemoteServiceError) as excinfo:
        _create(store, notebook="Work")
    assert excinfo.value.code == "INTERNAL_ERROR"
    assert isinstance(excinfo.value.__cause__, OSError)
