"""Pydantic input models for search and discovery operations.

This module defines input models for search and discovery tools:
- Search notes by query, tag or notebook
- List notebooks
- List tags
"""

from __future__ import annotations

from typing import Optional
from pydantic import Field, field_validator

from enml_notes.constants import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT
from enml_notes.core.note_operations import SearchReturnMode

from .base import BaseStoreInput


class SearchNotesInput(BaseStoreInput):
    """Input model for search_enml_notes tool.

    The query matches note titles and body text case-insensitively. Terms of
    the form ``tag:<name>`` and ``notebook:<name>`` filter instead of matching
    text.

    Examples:
        >>> SearchNotesInput(query="invoice")
        >>> SearchNotesInput(query="tag:work budget", limit=10, return_mode="full")
    """

    query: str = Field(
        "",
        description=(
            "Search text. Supports 'tag:<name>' and 'notebook:<name>' terms. "
            "Empty query matches every note."
        ),
        examples=["invoice", "tag:work budget", "notebook:Inbox"]
    )

    notebook: Optional[str] = Field(
        None,
        description="Restrict the search to one notebook."
    )

    limit: Optional[int] = Field(
        None,
        ge=1,
        le=MAX_SEARCH_LIMIT,
        description=(
            f"Maximum number of notes returned (1-{MAX_SEARCH_LIMIT}). "
            f"Default comes from stores.yaml settings ({DEFAULT_SEARCH_LIMIT} if unset)."
        )
    )

    return_mode: SearchReturnMode = Field(
        SearchReturnMode.METADATA,
        description="'metadata' (no content) or 'full' (each match with its ENML content)."
    )

    @field_validator('query')
    @classmethod
    def validate_query(cls, v: str) -> str:
        return v.strip()

    @field_validator('notebook')
    @classmethod
    def validate_notebook(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"query": "invoice", "limit": 20},
                {"query": "tag:work", "notebook": "Projects", "return_mode": "full"}
            ]
        }


class ListNotebooksInput(BaseStoreInput):
    """Input model for list_enml_notebooks tool.

    Examples:
        >>> ListNotebooksInput(store="personal")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}, {"store": "personal"}]
        }


class ListTagsInput(BaseStoreInput):
    """Input model for list_enml_tags tool."""

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}, {"store": "work"}]
        }
