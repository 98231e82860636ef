"""Note-storage collaborator contract and a local filesystem implementation.

The engine talks to storage only through :class:`NoteStore`. Any remote client
(for example an Evernote NoteStore wrapper) can satisfy the protocol; the
:class:`LocalNoteStore` keeps notes on disk:

- ``<root>/<notebook>/<guid>.enml``: YAML frontmatter (title, tags, attributes,
  resource descriptors, timestamps) followed by the ENML document.
- ``<root>/.resources/<hash>``: resource bytes, addressed by MD5 hex digest.
- ``<root>/<notebook>/<guid>.lock``: present while the note is open for editing
  elsewhere; updates and deletes are rejected until it disappears.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

import frontmatter
import yaml
from bs4 import BeautifulSoup

from enml_notes.constants import LOCK_SUFFIX, NOTE_SUFFIX, RESOURCE_DIRNAME
from enml_notes.core.markup import unwrap_body
from enml_notes.data_models import Note, NoteFields, Resource, StoreMetadata
from enml_notes.errors import RemoteServiceError, ValidationError

logger = logging.getLogger(__name__)


class NoteStore(Protocol):
    """Operations the engine needs from a note-storage service."""

    async def fetch_note(
        self,
        guid: str,
        with_content: bool = True,
        with_resource_data: bool = False,
    ) -> Note: ...

    async def fetch_tag_names(self, guid: str) -> list[str]: ...

    async def create_note(self, fields: NoteFields) -> Note: ...

    async def update_note(self, guid: str, fields: NoteFields) -> Note: ...

    async def delete_note(self, guid: str) -> None: ...

    async def search_notes(self, query: str, notebook: Optional[str], limit: int) -> list[Note]: ...

    async def list_notebooks(self) -> list[dict[str, Any]]: ...

    async def list_tags(self) -> list[dict[str, Any]]: ...


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def validate_notebook_name(name: str) -> str:
    """Return the trimmed notebook name, rejecting names that are not a single folder.

    Raises:
        ValidationError: If the name is empty, hidden, or contains path separators.
    """
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("Notebook name cannot be empty.")
    if "/" in cleaned or "\\" in cleaned:
        raise ValidationError(f"Notebook name cannot contain path separators: '{cleaned}'")
    if cleaned.startswith("."):
        raise ValidationError(f"Notebook name cannot start with '.': '{cleaned}'")
    return cleaned


def _validate_guid(guid: str) -> str:
    cleaned = guid.strip()
    if not cleaned or "/" in cleaned or "\\" in cleaned or cleaned.startswith("."):
        raise RemoteServiceError(f"Invalid note GUID '{guid}'.", code="BAD_DATA_FORMAT")
    return cleaned


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Re-raise filesystem failures as ``INTERNAL_ERROR`` store errors."""
    try:
        yield
    except OSError as exc:
        raise RemoteServiceError(f"Cannot {action}: {exc}", code="INTERNAL_ERROR") from exc


def body_text(content: str) -> str:
    """Extract searchable plain text from an ENML document."""
    body = unwrap_body(content)
    if not body:
        return ""
    return BeautifulSoup(body, "html.parser").get_text(separator=" ", strip=True)


class LocalNoteStore:
    """Filesystem-backed :class:`NoteStore` rooted at a configured store directory."""

    def __init__(self, metadata: StoreMetadata) -> None:
        self.metadata = metadata
        self.root = metadata.path

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def resource_dir(self) -> Path:
        return self.root / RESOURCE_DIRNAME

    def _notebook_dirs(self) -> list[Path]:
        if not self.root.is_dir():
            return []
        return sorted(
            path for path in self.root.iterdir() if path.is_dir() and not path.name.startswith(".")
        )

    def _note_paths(self) -> list[Path]:
        paths: list[Path] = []
        for notebook_dir in self._notebook_dirs():
            paths.extend(sorted(notebook_dir.glob(f"*{NOTE_SUFFIX}")))
        return paths

    def _locate(self, guid: str) -> Path:
        guid = _validate_guid(guid)
        for notebook_dir in self._notebook_dirs():
            candidate = notebook_dir / f"{guid}{NOTE_SUFFIX}"
            if candidate.is_file():
                return candidate
        raise RemoteServiceError(
            f"Note '{guid}' not found in store '{self.metadata.name}'.",
            code=RemoteServiceError.NOT_FOUND,
        )

    def _ensure_unlocked(self, note_path: Path) -> None:
        if note_path.with_suffix(LOCK_SUFFIX).exists():
            raise RemoteServiceError(
                f"Note '{note_path.stem}' is locked by another editor.",
                code=RemoteServiceError.NOTE_LOCKED,
            )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _store_resource_data(self, resources: list[Resource]) -> None:
        if not resources:
            return
        with _storage_errors("store resource data"):
            self.resource_dir.mkdir(parents=True, exist_ok=True)
            for resource in resources:
                target = self.resource_dir / resource.hash_hex
                if not target.exists():
                    target.write_bytes(resource.data)

    def _load_resource(self, entry: dict[str, Any], with_data: bool) -> Resource:
        hash_hex = str(entry.get("hash", ""))
        data = b""
        if with_data:
            try:
                data = (self.resource_dir / hash_hex).read_bytes()
            except OSError as exc:
                raise RemoteServiceError(
                    f"Resource data for hash '{hash_hex}' is missing from store '{self.metadata.name}'.",
                    code=RemoteServiceError.NOT_FOUND,
                ) from exc
        return Resource(
            data=data,
            size=int(entry.get("size", len(data))),
            body_hash=bytes.fromhex(hash_hex),
            mime=str(entry.get("mime", "")),
            file_name=str(entry.get("file_name", "")),
        )

    def _read(self, note_path: Path, with_content: bool, with_resource_data: bool) -> Note:
        try:
            post = frontmatter.loads(note_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise RemoteServiceError(
                f"Note file '{note_path.name}' cannot be read: {exc}",
                code="INTERNAL_ERROR",
            ) from exc

        meta = dict(post.metadata or {})
        content = post.content or ""
        encoded = content.encode("utf-8")
        return Note(
            guid=note_path.stem,
            title=str(meta.get("title", "")),
            notebook=note_path.parent.name,
            content=content if with_content else None,
            content_hash=hashlib.md5(encoded).digest(),
            content_length=len(encoded),
            tag_names=[str(tag) for tag in meta.get("tags") or []],
            attributes=dict(meta.get("attributes") or {}),
            resources=[
                self._load_resource(entry, with_resource_data) for entry in meta.get("resources") or []
            ],
            created=_as_text(meta.get("created")),
            updated=_as_text(meta.get("updated")),
        )

    def _write(self, note_path: Path, note: Note) -> None:
        post = frontmatter.Post(note.content or "")
        post.metadata.update(
            {
                "title": note.title,
                "tags": list(note.tag_names),
                "attributes": dict(note.attributes),
                "resources": [resource.as_payload() for resource in note.resources],
                "created": note.created,
                "updated": note.updated,
            }
        )
        with _storage_errors(f"write note file '{note_path.name}'"):
            note_path.parent.mkdir(parents=True, exist_ok=True)
            note_path.write_text(frontmatter.dumps(post), encoding="utf-8")

    # ------------------------------------------------------------------
    # NoteStore operations
    # ------------------------------------------------------------------

    async def fetch_note(
        self,
        guid: str,
        with_content: bool = True,
        with_resource_data: bool = False,
    ) -> Note:
        return self._read(self._locate(guid), with_content, with_resource_data)

    async def fetch_tag_names(self, guid: str) -> list[str]:
        return self._read(self._locate(guid), False, False).tag_names

    async def create_note(self, fields: NoteFields) -> Note:
        if not fields.title or not fields.title.strip():
            raise RemoteServiceError("Note title is required.", code="BAD_DATA_FORMAT")
        if fields.content is None:
            raise RemoteServiceError("Note content is required.", code="BAD_DATA_FORMAT")

        notebook = validate_notebook_name(fields.notebook or self.metadata.default_notebook)
        guid = str(uuid.uuid4())
        now = _timestamp()
        resources = list(fields.resources or [])
        self._store_resource_data(resources)

        note = Note(
            guid=guid,
            title=fields.title.strip(),
            notebook=notebook,
            content=fields.content,
            tag_names=list(fields.tag_names or []),
            attributes=dict(fields.attributes or {}),
            resources=resources,
            created=now,
            updated=now,
        )
        note_path = self.root / notebook / f"{guid}{NOTE_SUFFIX}"
        self._write(note_path, note)
        logger.info("Created note '%s' in notebook '%s' of store '%s'", guid, notebook, self.metadata.name)
        return self._read(note_path, False, False)

    async def update_note(self, guid: str, fields: NoteFields) -> Note:
        note_path = self._locate(guid)
        self._ensure_unlocked(note_path)
        note = self._read(note_path, True, False)

        if fields.title is not None:
            if not fields.title.strip():
                raise RemoteServiceError("Note title cannot be empty.", code="BAD_DATA_FORMAT")
            note.title = fields.title.strip()
        if fields.content is not None:
            note.content = fields.content
        if fields.tag_names is not None:
            note.tag_names = list(fields.tag_names)
        if fields.attributes is not None:
            note.attributes = dict(fields.attributes)
        if fields.resources is not None:
            self._store_resource_data(fields.resources)
            note.resources = list(fields.resources)
        note.updated = _timestamp()

        target_path = note_path
        if fields.notebook is not None:
            notebook = validate_notebook_name(fields.notebook)
            target_path = self.root / notebook / note_path.name

        self._write(target_path, note)
        if target_path != note_path:
            with _storage_errors(f"remove moved note file '{note_path.name}'"):
                note_path.unlink()
            logger.info("Moved note '%s' to notebook '%s'", guid, target_path.parent.name)

        logger.info(
            "Updated note '%s' in store '%s' (fields=%s)",
            guid,
            self.metadata.name,
            ", ".join(fields.fields_set()) or "none",
        )
        return self._read(target_path, False, False)

    async def delete_note(self, guid: str) -> None:
        note_path = self._locate(guid)
        self._ensure_unlocked(note_path)
        with _storage_errors(f"delete note file '{note_path.name}'"):
            note_path.unlink()
        logger.info("Deleted note '%s' from store '%s'", guid, self.metadata.name)

    async def search_notes(self, query: str, notebook: Optional[str], limit: int) -> list[Note]:
        """Search notes by terms; ``tag:`` and ``notebook:`` terms filter, others match text."""
        required_tags: list[str] = []
        notebooks: list[str] = [notebook.lower()] if notebook else []
        words: list[str] = []
        for term in query.split():
            lowered = term.lower()
            if lowered.startswith("tag:") and len(term) > 4:
                required_tags.append(lowered[4:])
            elif lowered.startswith("notebook:") and len(term) > 9:
                notebooks.append(lowered[9:])
            elif lowered != "*":
                words.append(lowered)

        matches: list[Note] = []
        for note_path in self._note_paths():
            try:
                note = self._read(note_path, True, False)
            except RemoteServiceError as exc:
                logger.warning("Skipping note file '%s' during search: %s", note_path, exc)
                continue

            if notebooks and note.notebook.lower() not in notebooks:
                continue
            note_tags = {tag.lower() for tag in note.tag_names}
            if any(tag not in note_tags for tag in required_tags):
                continue
            haystack = f"{note.title} {body_text(note.content or '')}".lower()
            if any(word not in haystack for word in words):
                logger.debug("Note '%s' does not match query '%s'", note.guid, query)
                continue

            note.content = None
            matches.append(note)

        matches.sort(key=lambda item: item.updated or "", reverse=True)
        return matches[:limit]

    async def list_notebooks(self) -> list[dict[str, Any]]:
        counts = {path.name: len(list(path.glob(f"*{NOTE_SUFFIX}"))) for path in self._notebook_dirs()}
        counts.setdefault(self.metadata.default_notebook, 0)
        return [
            {
                "name": name,
                "note_count": counts[name],
                "default": name == self.metadata.default_notebook,
            }
            for name in sorted(counts)
        ]

    async def list_tags(self) -> list[dict[str, Any]]:
        counter: Counter[str] = Counter()
        for note_path in self._note_paths():
            try:
                counter.update(set(self._read(note_path, False, False).tag_names))
            except RemoteServiceError as exc:
                logger.warning("Skipping note file '%s' while listing tags: %s", note_path, exc)
        return [{"name": name, "note_count": counter[name]} for name in sorted(counter)]
