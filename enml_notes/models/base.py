"""Base Pydantic models for MCP tool input validation.

This module defines base models that provide common validation patterns
for note operations. Other input models inherit from these bases.

Base Models:
- BaseStoreInput: Optional note store selection shared by every tool
- BaseNoteInput: Adds GUID validation for operations on an existing note
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BaseStoreInput(BaseModel):
    """Base model for tools that operate on a note store."""

    store: Optional[str] = Field(
        None,
        description=(
            "Note store name (omit to use the active store). "
            "Use list_note_stores() to discover available stores."
        )
    )

    @field_validator('store')
    @classmethod
    def validate_store(cls, v: Optional[str]) -> Optional[str]:
        """Validate store name format.

        Raises:
            ValueError: If store name is an empty or whitespace-only string
        """
        if v is not None and not v.strip():
            raise ValueError(
                "Store name cannot be empty. "
                "Either omit the store parameter to use the active store, "
                "or provide a valid store name from list_note_stores()."
            )

        return v.strip() if v else None


class BaseNoteInput(BaseStoreInput):
    """Base model for operations on an existing note.

    Provides GUID validation. All note-specific input models inherit from
    this class.
    """

    guid: str = Field(
        min_length=1,
        description=(
            "GUID of the note, as returned by create_enml_note() or "
            "search_enml_notes()."
        ),
        examples=["2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10"]
    )

    @field_validator('guid')
    @classmethod
    def validate_guid(cls, v: str) -> str:
        """Validate the note GUID.

        Enforces:
        - Non-empty GUID
        - No path separators or leading dots

        Raises:
            ValueError: If the GUID is empty or malformed
        """
        cleaned = v.strip()

        if not cleaned:
            raise ValueError(
                "Note GUID cannot be empty. "
                "Use search_enml_notes() to find the GUID of a note."
            )

        if "/" in cleaned or "\\" in cleaned or cleaned.startswith("."):
            raise ValueError(
                "Note GUID cannot contain path separators or start with '.'. "
                f"Invalid GUID: '{cleaned}'"
            )

        return cleaned
