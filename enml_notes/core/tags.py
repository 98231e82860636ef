"""Tag set reconciliation for note create and update operations."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Optional


class TagMode(str, enum.Enum):
    """How requested tags combine with the tags already on a note."""

    REPLACE = "replace"
    ADD = "add"
    REMOVE = "remove"
    IGNORE = "ignore"


def split_tags(raw: Optional[str]) -> list[str]:
    """Split a comma separated tag string, trimming names and dropping blanks."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim tag names, drop blanks and duplicates, keeping first occurrence order."""
    seen: set[str] = set()
    normalized: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        normalized.append(cleaned)
    return normalized


def requires_existing_tags(mode: TagMode) -> bool:
    """Return True when ``mode`` must read the note's current tags first."""
    return TagMode(mode) in (TagMode.ADD, TagMode.REMOVE)


def reconcile_tags(
    mode: TagMode,
    requested: Iterable[str],
    existing: Optional[Iterable[str]] = None,
) -> Optional[list[str]]:
    """Compute the final tag list for a note.

    Args:
        mode: Reconciliation mode.
        requested: Tag names supplied with the operation.
        existing: Current tag names of the note. Treated as empty when ``None``.

    Returns:
        The final tag list, or ``None`` for :attr:`TagMode.IGNORE`, meaning the
        tags must not be sent to the store at all.
    """
    mode = TagMode(mode)
    if mode is TagMode.IGNORE:
        return None

    wanted = normalize_tags(requested)
    if mode is TagMode.REPLACE:
        return wanted

    current = normalize_tags(existing or [])
    if mode is TagMode.ADD:
        return normalize_tags([*current, *wanted])

    removed = set(wanted)
    return [tag for tag in current if tag not in removed]
