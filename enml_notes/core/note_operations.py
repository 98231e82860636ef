"""Note operations: sequence the codec, resource builder, edit modes, tag and
attribute handling for one work item and hand the result to a note store."""

from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Optional, Union

from enml_notes.constants import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT
from enml_notes.core.attributes import merge_attributes
from enml_notes.core.content_edit import (
    EditRequest,
    ReplaceContent,
    SearchReplaceContent,
    apply_edit,
    changes_content,
    requires_existing_content,
)
from enml_notes.core.markup import (
    ContentFormat,
    append_to_body,
    encode_content,
    enml_to_html,
    unwrap_body,
    wrap_body,
)
from enml_notes.core.note_store import NoteStore
from enml_notes.core.resources import ResourceBuildResult
from enml_notes.core.tags import TagMode, reconcile_tags, requires_existing_tags
from enml_notes.data_models import Note, NoteFields, WorkItem
from enml_notes.errors import (
    BatchItemError,
    NoteEngineError,
    RemoteServiceError,
    ValidationError,
    error_payload,
)

logger = logging.getLogger(__name__)


class ContentView(str, enum.Enum):
    """Format of the content returned by :func:`read_note`."""

    ENML = "enml"
    HTML = "html"
    NONE = "none"


class SearchReturnMode(str, enum.Enum):
    """Whether search returns note metadata or complete notes."""

    METADATA = "metadata"
    FULL = "full"


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


@contextmanager
def surface_remote_errors() -> Iterator[None]:
    """Add known hints to store errors before they leave the operation."""
    try:
        yield
    except RemoteServiceError as exc:
        raise exc.with_hint()


# ==============================================================================
# NOTE OPERATIONS
# ==============================================================================


async def create_note(
    store: NoteStore,
    title: str,
    content: str = "",
    content_format: ContentFormat = ContentFormat.PLAIN_TEXT,
    notebook: Optional[str] = None,
    tags: Iterable[str] = (),
    tag_mode: TagMode = TagMode.REPLACE,
    attributes_json: Optional[str] = None,
    attributes: Optional[Mapping[str, Any]] = None,
    attachments: Optional[ResourceBuildResult] = None,
) -> dict[str, Any]:
    """Create a note from plain text or HTML content.

    Add and Remove tag modes reconcile against an empty tag set, so no fetch is
    needed. Media tags for ``attachments`` are appended after the content.

    Returns:
        The created note's payload (without content).

    Raises:
        ValidationError: If the attribute JSON is malformed.
        RemoteServiceError: If the store rejects the note.
    """
    media = attachments or ResourceBuildResult()
    merged_attributes = merge_attributes(attributes_json, attributes)

    document = encode_content(content_format, content)
    if media:
        document = append_to_body(document, media.media_tags)

    fields = NoteFields(
        title=title,
        content=document,
        notebook=notebook or None,
        tag_names=reconcile_tags(tag_mode, tags, existing=[]),
        resources=list(media.resources) or None,
        attributes=merged_attributes,
    )

    with surface_remote_errors():
        created = await store.create_note(fields)

    logger.info("Created note '%s' (%d attachment(s))", created.guid, len(media.resources))
    return created.as_payload()


async def read_note(
    store: NoteStore,
    guid: str,
    return_content: ContentView = ContentView.ENML,
) -> dict[str, Any]:
    """Read a note, returning its content as ENML, as display HTML, or not at all."""
    view = ContentView(return_content)
    with surface_remote_errors():
        note = await store.fetch_note(guid, with_content=view is not ContentView.NONE)

    payload = note.as_payload()
    if view is ContentView.HTML and note.content:
        payload["content_html"] = enml_to_html(note.content)
    elif view is ContentView.NONE:
        payload.pop("content", None)
    return payload


async def update_note(
    store: NoteStore,
    guid: str,
    edit: EditRequest,
    title: Optional[str] = None,
    notebook: Optional[str] = None,
    tags: Iterable[str] = (),
    tag_mode: TagMode = TagMode.IGNORE,
    attributes_json: Optional[str] = None,
    attributes: Optional[Mapping[str, Any]] = None,
    attachments: Optional[ResourceBuildResult] = None,
) -> dict[str, Any]:
    """Update a note's content, title, notebook, tags and attributes.

    The existing note is fetched only when the edit mode needs its body (Append,
    SearchReplace, Keep with attachments) or, failing that, when no new title is
    given and the current one must be carried over. Existing tags are fetched
    only for the Add and Remove tag modes.

    When attachments are added to a note whose body is kept or extended, the
    note's existing resources are sent again ahead of the new ones so the stored
    resource list still covers every ``<en-media>`` reference.

    Raises:
        ValidationError: Malformed attribute JSON.
        InvalidPatternError: SearchReplace with a regex that does not compile.
        RemoteServiceError: The store rejected a call.
    """
    media = attachments or ResourceBuildResult()
    has_attachments = bool(media)

    # Everything that can fail locally is checked before the first remote call.
    merged_attributes = merge_attributes(attributes_json, attributes)
    if isinstance(edit, SearchReplaceContent):
        edit.pattern()

    with surface_remote_errors():
        existing: Optional[Note] = None
        if requires_existing_content(edit, has_attachments):
            logger.debug("Fetching content of note '%s' for %s", guid, type(edit).__name__)
            existing = await store.fetch_note(
                guid,
                with_content=True,
                with_resource_data=has_attachments,
            )
        elif not title:
            logger.debug("Fetching note '%s' to carry over its title", guid)
            existing = await store.fetch_note(guid, with_content=False)

        fields = NoteFields(
            title=title or (existing.title if existing is not None else None),
            notebook=notebook or None,
            attributes=merged_attributes,
        )

        if changes_content(edit, has_attachments):
            existing_body = unwrap_body(existing.content or "") if existing is not None else ""
            fields.content = wrap_body(apply_edit(edit, existing_body, media.media_tags))

        if has_attachments:
            prior = []
            if existing is not None and not isinstance(edit, ReplaceContent):
                prior = list(existing.resources)
            fields.resources = [*prior, *media.resources]

        current_tags: Optional[list[str]] = None
        if requires_existing_tags(tag_mode):
            current_tags = await store.fetch_tag_names(guid)
        fields.tag_names = reconcile_tags(tag_mode, tags, current_tags)

        updated = await store.update_note(guid, fields)

    logger.info("Updated note '%s' (%s)", guid, type(edit).__name__)
    return updated.as_payload()


async def delete_note(store: NoteStore, guid: str) -> dict[str, Any]:
    """Delete a note and acknowledge it."""
    with surface_remote_errors():
        await store.delete_note(guid)
    return {"success": True, "guid": guid}


async def search_notes(
    store: NoteStore,
    query: str,
    notebook: Optional[str] = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
    return_mode: SearchReturnMode = SearchReturnMode.METADATA,
) -> list[dict[str, Any]]:
    """Search notes; in full mode each match is fetched again with its content.

    Raises:
        ValidationError: If ``limit`` is outside ``1..MAX_SEARCH_LIMIT``.
    """
    if not 1 <= limit <= MAX_SEARCH_LIMIT:
        raise ValidationError(f"Search limit must be between 1 and {MAX_SEARCH_LIMIT}, got {limit}.")

    with surface_remote_errors():
        matches = await store.search_notes(query, notebook or None, limit)
        if SearchReturnMode(return_mode) is SearchReturnMode.METADATA:
            return [note.as_payload() for note in matches]

        full: list[dict[str, Any]] = []
        for note in matches:
            full.append((await store.fetch_note(note.guid, with_content=True)).as_payload())
        return full


async def list_notebooks(store: NoteStore) -> list[dict[str, Any]]:
    with surface_remote_errors():
        return await store.list_notebooks()


async def list_tags(store: NoteStore) -> list[dict[str, Any]]:
    with surface_remote_errors():
        return await store.list_tags()


# ==============================================================================
# BATCH PROCESSING
# ==============================================================================

ItemResult = Union[dict[str, Any], Sequence[dict[str, Any]]]
ItemHandler = Callable[[WorkItem], Awaitable[ItemResult]]


async def process_batch(
    items: Sequence[WorkItem],
    handler: ItemHandler,
    continue_on_fail: bool = False,
) -> list[dict[str, Any]]:
    """Run ``handler`` over ``items`` one at a time, preserving input order.

    Each handler result (a payload or a list of payloads) is emitted as
    ``{"json": payload, "paired_item": index}``. When an item fails and
    ``continue_on_fail`` is set, the item's own input is emitted with an
    ``error`` entry and processing continues; otherwise the batch stops.

    Raises:
        BatchItemError: The first failure when ``continue_on_fail`` is not set.
    """
    results: list[dict[str, Any]] = []
    for index, item in enumerate(items):
        try:
            produced = await handler(item)
        except (NoteEngineError, ValueError) as exc:
            if not continue_on_fail:
                raise BatchItemError(index, exc) from exc
            logger.warning("Item %d failed, continuing: %s", index, exc)
            results.append({"json": dict(item.json), "error": error_payload(exc), "paired_item": index})
            continue

        payloads = [produced] if isinstance(produced, dict) else list(produced)
        results.extend({"json": payload, "paired_item": index} for payload in payloads)

    return results
