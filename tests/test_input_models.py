"""Tests for Pydantic input models.

This test suite validates the input validation logic for MCP tools,
ensuring that:
- Valid inputs are accepted and normalized correctly
- Invalid inputs raise ValidationError with descriptive messages
- Edit modes are selected through the ``mode`` discriminator
"""

import base64

import pytest
from pydantic import ValidationError

from enml_notes.core.content_edit import AppendContent, KeepContent, ReplaceContent, SearchReplaceContent
from enml_notes.core.tags import TagMode
from enml_notes.errors import InputError
from enml_notes.models import (
    AttachmentInput,
    BaseNoteInput,
    CreateNoteInput,
    ReadNoteInput,
    RunBatchInput,
    SearchNotesInput,
    SetActiveStoreInput,
    UpdateNoteInput,
)

GUID = "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10"
HELLO_B64 = base64.b64encode(b"hello").decode()


class TestBaseNoteInput:
    """Test suite for BaseNoteInput model validation."""

    def test_valid_guid(self):
        model = BaseNoteInput(guid=GUID)
        assert model.guid == GUID
        assert model.store is None

    def test_guid_is_stripped(self):
        assert BaseNoteInput(guid=f"  {GUID} ").guid == GUID

    @pytest.mark.parametrize("guid", ["", "   ", "../etc", "a/b", ".hidden"])
    def test_invalid_guid_is_rejected(self, guid):
        with pytest.raises(ValidationError):
            BaseNoteInput(guid=guid)

    def test_empty_store_is_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            BaseNoteInput(guid=GUID, store="  ")
        assert "Store name cannot be empty" in str(excinfo.value)

    def test_store_is_stripped(self):
        assert BaseNoteInput(guid=GUID, store=" work ").store == "work"


class TestCreateNoteInput:
    def test_defaults(self):
        model = CreateNoteInput(title=" Groceries ")
        assert model.title == "Groceries"
        assert model.content == ""
        assert model.content_format == "plain_text"
        assert model.resolved_tag_mode() is TagMode.IGNORE

    def test_empty_title_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateNoteInput(title="   ")

    def test_tags_accept_comma_string(self):
        model = CreateNoteInput(title="x", tags="work, urgent")
        assert model.tags == ["work", "urgent"]
        assert model.resolved_tag_mode() is TagMode.REPLACE

    def test_notebook_with_separator_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateNoteInput(title="x", notebook="a/b")

    def test_blank_notebook_means_default(self):
        assert CreateNoteInput(title="x", notebook="  ").notebook is None

    def test_attributes_are_validated(self):
        with pytest.raises(ValidationError):
            CreateNoteInput(title="x", attributes={"latitude": 120})
        model = CreateNoteInput(title="x", attributes={"author": "Ada"})
        assert model.attribute_fields() == {"author": "Ada"}

    def test_build_attachments_uses_all_attachments_by_default(self):
        model = CreateNoteInput(
            title="x",
            attachments=[
                {"name": "a", "data": HELLO_B64, "mime_type": "text/plain"},
                {"name": "b", "data": HELLO_B64},
            ],
        )
        result = model.build_attachments()
        assert [resource.file_name for resource in result.resources] == ["a", "b"]
        assert result.resources[0].hash_hex == "5d41402abc4b2a76b9719d911017c592"

    def test_build_attachments_respects_property_names(self):
        model = CreateNoteInput(
            title="x",
            attachments=[{"name": "a", "data": HELLO_B64}, {"name": "b", "data": HELLO_B64}],
            binary_property_names="b",
        )
        assert [resource.file_name for resource in model.build_attachments().resources] == ["b"]

    def test_missing_property_name_raises_input_error(self):
        model = CreateNoteInput(title="x", binary_property_names="photo")
        with pytest.raises(InputError):
            model.build_attachments()


class TestAttachmentInput:
    def test_invalid_base64_is_rejected(self):
        with pytest.raises(ValidationError):
            AttachmentInput(name="a", data="not base64!")

    def test_payload_is_decoded(self):
        payload = AttachmentInput(name="a", data=HELLO_B64, file_name="h.txt").to_payload()
        assert payload.data == b"hello"
        assert payload.file_name == "h.txt"
        assert payload.mime_type is None


class TestUpdateNoteInput:
    def test_default_edit_is_keep(self):
        model = UpdateNoteInput(guid=GUID)
        assert isinstance(model.edit.to_edit(), KeepContent)
        assert model.resolved_tag_mode() is TagMode.IGNORE

    def test_blank_title_means_unchanged(self):
        assert UpdateNoteInput(guid=GUID, title="  ").title is None

    @pytest.mark.parametrize(
        "edit, expected",
        [
            ({"mode": "replace", "content": "x"}, ReplaceContent),
            ({"mode": "append", "content": "x"}, AppendContent),
            ({"mode": "keep"}, KeepContent),
            ({"mode": "search_replace", "search": "a", "replacement": "b"}, SearchReplaceContent),
        ],
    )
    def test_edit_mode_discriminator(self, edit, expected):
        assert isinstance(UpdateNoteInput(guid=GUID, edit=edit).edit.to_edit(), expected)

    def test_search_replace_options_are_carried(self):
        model = UpdateNoteInput(
            guid=GUID,
            edit={"mode": "search_replace", "search": r"\d+", "use_regex": True, "case_sensitive": True},
        )
        edit = model.edit.to_edit()
        assert edit == SearchReplaceContent(r"\d+", "", use_regex=True, case_sensitive=True)

    def test_empty_search_is_rejected(self):
        with pytest.raises(ValidationError):
            UpdateNoteInput(guid=GUID, edit={"mode": "search_replace", "search": ""})

    def test_unknown_mode_is_rejected(self):
        with pytest.raises(ValidationError):
            UpdateNoteInput(guid=GUID, edit={"mode": "prepend", "content": "x"})

    def test_explicit_tag_mode_wins(self):
        model = UpdateNoteInput(guid=GUID, tags=["a"], tag_mode="add")
        assert model.resolved_tag_mode() is TagMode.ADD


class TestOtherInputs:
    def test_read_note_view(self):
        assert ReadNoteInput(guid=GUID).return_content == "enml"
        with pytest.raises(ValidationError):
            ReadNoteInput(guid=GUID, return_content="pdf")

    @pytest.mark.parametrize("limit", [0, 501])
    def test_search_limit_bounds(self, limit):
        with pytest.raises(ValidationError):
            SearchNotesInput(query="x", limit=limit)

    def test_search_defaults(self):
        model = SearchNotesInput()
        assert model.query == ""
        assert model.limit is None
        assert model.return_mode == "metadata"

    def test_set_active_store_requires_name(self):
        with pytest.raises(ValidationError):
            SetActiveStoreInput(store="   ")

    def test_batch_requires_items(self):
        with pytest.raises(ValidationError):
            RunBatchInput(items=[])

    def test_batch_item_becomes_work_item(self):
        model = RunBatchInput(
            items=[
                {
                    "operation": "create",
                    "parameters": {"title": "x"},
                    "binary": [{"name": "data", "data": HELLO_B64}],
                }
            ]
        )
        item = model.items[0].to_work_item()
        assert item.json == {"operation": "create", "title": "x"}
        assert item.binary["data"].data == b"hello"
