"""Pydantic input models for note store management operations.

This module defines input models for store management tools:
- List configured note stores
- Set active store for session
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ListStoresInput(BaseModel):
    """Input model for list_note_stores tool.

    Lists all configured stores and session state. Takes no parameters,
    but using a model keeps every tool consistent.

    Examples:
        >>> ListStoresInput()
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}]
        }


class SetActiveStoreInput(BaseModel):
    """Input model for set_active_note_store tool.

    Sets the active store for the conversation session. All subsequent tool
    calls that omit the store parameter will use this store.

    Examples:
        >>> SetActiveStoreInput(store="personal")
    """

    store: str = Field(
        min_length=1,
        description=(
            "Store name from stores.yaml configuration. "
            "Use list_note_stores() to discover valid names."
        ),
        examples=["personal", "work"]
    )

    @field_validator('store')
    @classmethod
    def validate_store(cls, v: str) -> str:
        """Validate store name format.

        Raises:
            ValueError: If store name is empty or only whitespace
        """
        cleaned = v.strip()

        if not cleaned:
            raise ValueError(
                "Store name cannot be empty. "
                "Use list_note_stores() to see available stores."
            )

        return cleaned

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"store": "personal"},
                {"store": "work"}
            ]
        }
