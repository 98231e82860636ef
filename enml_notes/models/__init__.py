"""Pydantic input models for MCP tool validation.

This package defines Pydantic models that provide automatic input validation
for all MCP tools. Each model represents the input schema for one tool, with
field-level validation, type checking, and descriptive error messages.

Architecture:
- base: Base models (BaseStoreInput, BaseNoteInput) for common validation
- note_models: Input models for note create/read/update/delete, edit modes,
  attachments and attributes
- search_models: Input models for search and discovery operations
- store_models: Input models for store management operations
- batch_models: Input models for batch processing

Usage:
    from enml_notes.models import CreateNoteInput, UpdateNoteInput
    from enml_notes.models import SearchNotesInput, RunBatchInput
"""

from .base import BaseStoreInput, BaseNoteInput
from .note_models import (
    AttachmentInput,
    NoteAttributesInput,
    ReplaceEditInput,
    AppendEditInput,
    KeepEditInput,
    SearchReplaceEditInput,
    CreateNoteInput,
    ReadNoteInput,
    UpdateNoteInput,
    DeleteNoteInput,
)
from .search_models import SearchNotesInput, ListNotebooksInput, ListTagsInput
from .store_models import ListStoresInput, SetActiveStoreInput
from .batch_models import BatchItemInput, RunBatchInput

__all__ = [
    # Base models
    "BaseStoreInput",
    "BaseNoteInput",
    # Note models
    "AttachmentInput",
    "NoteAttributesInput",
    "ReplaceEditInput",
    "AppendEditInput",
    "KeepEditInput",
    "SearchReplaceEditInput",
    "CreateNoteInput",
    "ReadNoteInput",
    "UpdateNoteInput",
    "DeleteNoteInput",
    # Search models
    "SearchNotesInput",
    "ListNotebooksInput",
    "ListTagsInput",
    # Store models
    "ListStoresInput",
    "SetActiveStoreInput",
    # Batch models
    "BatchItemInput",
    "RunBatchInput",
]
