"""Tests for tag reconciliation."""

import pytest

from enml_notes.core.tags import (
    TagMode,
    normalize_tags,
    reconcile_tags,
    requires_existing_tags,
    split_tags,
)


def test_replace_uses_requested_tags():
    assert reconcile_tags(TagMode.REPLACE, ["b", "a"], ["x"]) == ["b", "a"]


def test_replace_with_no_tags_clears():
    assert reconcile_tags(TagMode.REPLACE, [], ["x"]) == []


def test_add_keeps_existing_first_without_duplicates():
    assert reconcile_tags(TagMode.ADD, ["b", "c"], ["a", "b"]) == ["a", "b", "c"]


def test_remove_filters_existing():
    assert reconcile_tags(TagMode.REMOVE, ["b", "zzz"], ["a", "b", "c"]) == ["a", "c"]


def test_ignore_returns_none():
    assert reconcile_tags(TagMode.IGNORE, ["a"], ["b"]) is None


def test_add_against_missing_existing_set():
    assert reconcile_tags(TagMode.ADD, ["a"], None) == ["a"]
    assert reconcile_tags(TagMode.REMOVE, ["a"], None) == []


def test_mode_accepts_string_values():
    assert reconcile_tags("add", ["b"], ["a"]) == ["a", "b"]


def test_normalize_trims_and_dedupes():
    assert normalize_tags([" a ", "b", "a", "", "  "]) == ["a", "b"]


def test_split_tags():
    assert split_tags("work, urgent ,, home") == ["work", "urgent", "home"]
    assert split_tags(None) == []


@pytest.mark.parametrize(
    "mode, expected",
    [(TagMode.REPLACE, False), (TagMode.ADD, True), (TagMode.REMOVE, True), (TagMode.IGNORE, False)],
)
def test_requires_existing_tags(mode, expected):
    assert requires_existing_tags(mode) is expected
