"""Pydantic input models for note operations.

This module defines input models for note management:
- Create notes from plain text or HTML
- Read notes as ENML, display HTML, or metadata only
- Update notes with one of the content edit modes
- Delete notes

It also defines the shared pieces those models are built from: attachments,
structured note attributes and the edit mode union.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Sequence
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from enml_notes.core.content_edit import (
    AppendContent,
    EditRequest,
    KeepContent,
    ReplaceContent,
    SearchReplaceContent,
)
from enml_notes.core.markup import ContentFormat
from enml_notes.core.note_operations import ContentView
from enml_notes.core.resources import (
    ResourceBuildResult,
    build_resources_for_item,
    parse_binary_property_names,
)
from enml_notes.core.tags import TagMode, split_tags
from enml_notes.data_models import BinaryPayload, WorkItem

from .base import BaseNoteInput, BaseStoreInput


# ==============================================================================
# SHARED FIELDS
# ==============================================================================


class AttachmentInput(BaseModel):
    """One binary attachment supplied inline as base64."""

    name: str = Field(
        min_length=1,
        description="Logical property name of the attachment (used as file name fallback).",
        examples=["data", "receipt"]
    )

    data: str = Field(
        description="Base64 encoded attachment bytes."
    )

    mime_type: Optional[str] = Field(
        None,
        description="Declared MIME type. Defaults to application/octet-stream.",
        examples=["image/png", "application/pdf"]
    )

    file_name: Optional[str] = Field(
        None,
        description="Display file name. Defaults to the attachment name."
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Attachment name cannot be empty.")
        return cleaned

    @field_validator('data')
    @classmethod
    def validate_data(cls, v: str) -> str:
        """Ensure the payload is valid base64 before any processing occurs."""
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Attachment data must be valid base64: {exc}") from exc
        return v

    def to_payload(self) -> BinaryPayload:
        return BinaryPayload(
            data=base64.b64decode(self.data),
            mime_type=self.mime_type or None,
            file_name=self.file_name or None,
        )


class NoteAttributesInput(BaseModel):
    """Structured note attributes. Values here win over ``attributes_json``."""

    author: Optional[str] = None
    source: Optional[str] = None
    source_url: Optional[str] = None
    source_application: Optional[str] = None
    place_name: Optional[str] = None
    content_class: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    altitude: Optional[float] = None
    subject_date: Optional[int] = Field(None, description="Milliseconds since the epoch.")
    reminder_order: Optional[int] = None
    reminder_time: Optional[int] = Field(None, description="Milliseconds since the epoch.")
    reminder_done_time: Optional[int] = Field(None, description="Milliseconds since the epoch.")

    def as_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class NoteDetailsInput(BaseStoreInput):
    """Fields shared by create and update: tags, attributes and attachments."""

    tags: list[str] = Field(
        default_factory=list,
        description="Tag names. A comma separated string is accepted as well.",
        examples=[["work", "receipts"], "work, receipts"]
    )

    tag_mode: Optional[TagMode] = Field(
        None,
        description=(
            "How tags combine with the note's tags: 'replace', 'add', 'remove' or "
            "'ignore'. Default: 'replace' when tags are given, otherwise 'ignore'."
        )
    )

    attributes_json: Optional[str] = Field(
        None,
        description=(
            "JSON object of note attributes, e.g. "
            "'{\"author\": \"Ada\", \"sourceURL\": \"https://example.com\"}'."
        )
    )

    attributes: Optional[NoteAttributesInput] = Field(
        None,
        description="Structured note attributes; override keys from attributes_json."
    )

    notebook: Optional[str] = Field(
        None,
        description="Notebook to place the note in (omit to use the store default)."
    )

    attachments: list[AttachmentInput] = Field(
        default_factory=list,
        description="Binary attachments, each referenced from the note by an <en-media> tag."
    )

    binary_property_names: Optional[str] = Field(
        None,
        description=(
            "Comma separated attachment names to attach, in order. "
            "Omit to attach every supplied attachment."
        )
    )

    @field_validator('tags', mode='before')
    @classmethod
    def split_tag_string(cls, v: Any) -> Any:
        """Accept ``"a, b"`` as well as ``["a", "b"]``."""
        if isinstance(v, str):
            return split_tags(v)
        return v

    @field_validator('notebook')
    @classmethod
    def validate_notebook(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        cleaned = v.strip()
        if "/" in cleaned or "\\" in cleaned or cleaned.startswith("."):
            raise ValueError(
                "Notebook name cannot contain path separators or start with '.'. "
                f"Invalid notebook: '{cleaned}'"
            )
        return cleaned

    def resolved_tag_mode(self) -> TagMode:
        if self.tag_mode is not None:
            return self.tag_mode
        return TagMode.REPLACE if self.tags else TagMode.IGNORE

    def attribute_fields(self) -> Optional[dict[str, Any]]:
        return self.attributes.as_fields() if self.attributes is not None else None

    def work_item(self) -> WorkItem:
        """Package the parameters and attachments as a batch work item."""
        return WorkItem(
            json=self.model_dump(exclude={"attachments"}, mode="json"),
            binary={attachment.name: attachment.to_payload() for attachment in self.attachments},
        )

    def property_names(self, available: Sequence[str]) -> list[str]:
        """Binary properties to attach: the explicit list, else everything available."""
        if self.binary_property_names is not None:
            return parse_binary_property_names(self.binary_property_names)
        return list(available)

    def build_attachments(self, item: Optional[WorkItem] = None) -> ResourceBuildResult:
        """Build resources for this request from ``item`` (default: own attachments).

        Raises:
            InputError: If a named binary property is not on the item.
        """
        item = item if item is not None else self.work_item()
        return build_resources_for_item(item, self.property_names(list(item.binary)))


# ==============================================================================
# EDIT MODES
# ==============================================================================


class ReplaceEditInput(BaseModel):
    """Replace the note body with new content."""

    mode: Literal["replace"] = "replace"
    content: str = Field("", description="New content (plain text or HTML).")
    content_format: ContentFormat = ContentFormat.PLAIN_TEXT

    def to_edit(self) -> EditRequest:
        return ReplaceContent(content=self.content, content_format=self.content_format)


class AppendEditInput(BaseModel):
    """Append new content after the existing body."""

    mode: Literal["append"] = "append"
    content: str = Field(min_length=1, description="Content to append (plain text or HTML).")
    content_format: ContentFormat = ContentFormat.PLAIN_TEXT

    def to_edit(self) -> EditRequest:
        return AppendContent(content=self.content, content_format=self.content_format)


class KeepEditInput(BaseModel):
    """Keep the existing body (title, tags, attributes or attachments change only)."""

    mode: Literal["keep"] = "keep"

    def to_edit(self) -> EditRequest:
        return KeepContent()


class SearchReplaceEditInput(BaseModel):
    """Replace every occurrence of a value in the existing body."""

    mode: Literal["search_replace"] = "search_replace"
    search: str = Field(min_length=1, description="Value to search for. Must not be empty.")
    replacement: str = Field("", description="Literal replacement text.")
    use_regex: bool = Field(False, description="Treat the search value as a regular expression.")
    case_sensitive: bool = Field(False, description="Match case exactly (default: case-insensitive).")

    def to_edit(self) -> EditRequest:
        return SearchReplaceContent(
            search=self.search,
            replacement=self.replacement,
            use_regex=self.use_regex,
            case_sensitive=self.case_sensitive,
        )


EditInput = Annotated[
    Union[ReplaceEditInput, AppendEditInput, KeepEditInput, SearchReplaceEditInput],
    Field(discriminator="mode"),
]


# ==============================================================================
# NOTE OPERATIONS
# ==============================================================================


class CreateNoteInput(NoteDetailsInput):
    """Input model for create_enml_note tool.

    Creates a note from plain text or HTML. HTML is sanitized into ENML.

    Examples:
        >>> CreateNoteInput(title="Groceries", content="Milk\\nEggs")
        >>> CreateNoteInput(title="Report", content="<p><b>Done</b></p>", content_format="html")
    """

    title: str = Field(
        min_length=1,
        description="Title of the note.",
        examples=["Groceries", "Meeting notes 2025-10-27"]
    )

    content: str = Field(
        "",
        description="Note content. Plain text or HTML depending on content_format."
    )

    content_format: ContentFormat = Field(
        ContentFormat.PLAIN_TEXT,
        description="'plain_text' (escaped, line breaks kept) or 'html' (sanitized)."
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError(
                "Note title cannot be empty. "
                "Provide a title such as 'Meeting notes'."
            )
        return cleaned

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {
                    "title": "Groceries",
                    "content": "Milk\nEggs",
                    "content_format": "plain_text",
                    "tags": ["home"],
                    "store": None
                },
                {
                    "title": "Trip report",
                    "content": "<h1>Trip</h1><p>Great <b>views</b></p>",
                    "content_format": "html",
                    "attributes": {"place_name": "Lisbon"},
                    "store": "personal"
                }
            ]
        }


class ReadNoteInput(BaseNoteInput):
    """Input model for read_enml_note tool.

    Examples:
        >>> ReadNoteInput(guid="2f1c5a34-...", return_content="html")
    """

    return_content: ContentView = Field(
        ContentView.ENML,
        description="'enml' (stored markup), 'html' (adds content_html) or 'none' (metadata only)."
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"guid": "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10", "return_content": "enml"},
                {"guid": "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10", "return_content": "html"}
            ]
        }


class UpdateNoteInput(NoteDetailsInput, BaseNoteInput):
    """Input model for update_enml_note tool.

    Examples:
        >>> UpdateNoteInput(guid="...", edit={"mode": "append", "content": "One more line"})
        >>> UpdateNoteInput(guid="...", edit={"mode": "search_replace", "search": "TODO", "replacement": "DONE"})
    """

    edit: EditInput = Field(
        default_factory=KeepEditInput,
        description=(
            "Content edit: {'mode': 'replace'|'append', 'content', 'content_format'}, "
            "{'mode': 'keep'} or {'mode': 'search_replace', 'search', 'replacement', "
            "'use_regex', 'case_sensitive'}. Default: keep."
        )
    )

    title: Optional[str] = Field(
        None,
        description="New title (omit to keep the current one)."
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {
                    "guid": "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10",
                    "edit": {"mode": "append", "content": "Follow-up: call back"},
                    "tags": ["followup"],
                    "tag_mode": "add"
                },
                {
                    "guid": "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10",
                    "edit": {"mode": "search_replace", "search": "\\d{4}", "replacement": "####", "use_regex": True}
                }
            ]
        }


class DeleteNoteInput(BaseNoteInput):
    """Input model for delete_enml_note tool.

    Examples:
        >>> DeleteNoteInput(guid="2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"guid": "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10", "store": None}
            ]
        }
