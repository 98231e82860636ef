"""Data models for store configuration, notes, resources and work items."""

from __future__ import annotations

from dataclasses import dataclass, field, fields as dataclass_fields
from pathlib import Path
from typing import Any, Optional

from enml_notes.errors import InputError


@dataclass(frozen=True)
class StoreMetadata:
    """Normalized metadata describing a local note store."""

    name: str
    path: Path
    description: str
    default_notebook: str
    exists: bool

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "description": self.description,
            "default_notebook": self.default_notebook,
            "exists": self.path.is_dir(),
        }


@dataclass(frozen=True)
class EngineSettings:
    """Batch and search defaults read from the ``settings`` section."""

    continue_on_fail: bool = False
    search_limit: int = 50


class StoreConfiguration:
    """Holds store metadata and default resolution helpers.

    Loaded once at module initialization from stores.yaml.
    Provides store lookup by name and payload serialization for MCP responses.
    """

    def __init__(
        self,
        default_store: str,
        stores: dict[str, StoreMetadata],
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.default_store = default_store
        self.stores = stores
        self.settings = settings or EngineSettings()

    def get(self, name: str) -> StoreMetadata:
        """Get store metadata by name.

        Raises:
            ValueError: If the store name is not found in configuration.
        """
        try:
            return self.stores[name]
        except KeyError as exc:
            raise ValueError(f"Unknown note store '{name}'") from exc

    def as_payload(self) -> dict[str, Any]:
        return {
            "default": self.default_store,
            "stores": [store.as_payload() for store in self.stores.values()],
        }


@dataclass(frozen=True)
class BinaryPayload:
    """Raw bytes supplied for one logical binary property of a work item."""

    data: bytes
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


@dataclass
class WorkItem:
    """One unit of batch input: a JSON parameter mapping plus named binary payloads."""

    json: dict[str, Any] = field(default_factory=dict)
    binary: dict[str, BinaryPayload] = field(default_factory=dict)

    def get_binary_payload(self, property_name: str) -> BinaryPayload:
        """Return the payload registered under ``property_name``.

        Raises:
            InputError: If the item carries no payload with that name.
        """
        try:
            return self.binary[property_name]
        except KeyError as exc:
            raise InputError(property_name, list(self.binary)) from exc


@dataclass(frozen=True)
class Resource:
    """A binary attachment descriptor.

    ``body_hash`` is the raw MD5 digest of ``data``; the inline ``<en-media>``
    reference carries the same digest hex-encoded.
    """

    data: bytes
    size: int
    body_hash: bytes
    mime: str
    file_name: str

    @property
    def hash_hex(self) -> str:
        return self.body_hash.hex()

    def as_payload(self, include_data: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "hash": self.hash_hex,
            "mime": self.mime,
            "file_name": self.file_name,
            "size": self.size,
        }
        if include_data:
            payload["data"] = self.data
        return payload


@dataclass
class Note:
    """A note as returned by the storage collaborator."""

    guid: str
    title: str
    notebook: str
    content: Optional[str] = None
    content_hash: Optional[bytes] = None
    content_length: Optional[int] = None
    tag_names: list[str] = field(default_factory=list)
    attributes: dict[str, Any] = field(default_factory=dict)
    resources: list[Resource] = field(default_factory=list)
    created: Optional[str] = None
    updated: Optional[str] = None

    def as_payload(self) -> dict[str, Any]:
        """Return a JSON-friendly payload; the content hash is exposed as hex."""
        payload: dict[str, Any] = {
            "guid": self.guid,
            "title": self.title,
            "notebook": self.notebook,
            "tags": list(self.tag_names),
            "attributes": dict(self.attributes),
            "resources": [resource.as_payload() for resource in self.resources],
            "created": self.created,
            "updated": self.updated,
        }
        if self.content is not None:
            payload["content"] = self.content
        if self.content_hash is not None:
            payload["content_hash"] = self.content_hash.hex()
        if self.content_length is not None:
            payload["content_length"] = self.content_length
        return payload


@dataclass
class NoteFields:
    """Optional-field structure handed to the storage collaborator.

    ``None`` means the field is unset and must be left untouched by the store.
    An empty list or mapping is an explicit value ("clear the tags").
    """

    title: Optional[str] = None
    content: Optional[str] = None
    notebook: Optional[str] = None
    tag_names: Optional[list[str]] = None
    resources: Optional[list[Resource]] = None
    attributes: Optional[dict[str, Any]] = None

    def fields_set(self) -> list[str]:
        return [f.name for f in dataclass_fields(self) if getattr(self, f.name) is not None]

    def as_payload(self) -> dict[str, Any]:
        """Return only the fields that were explicitly set."""
        return {name: getattr(self, name) for name in self.fields_set()}
