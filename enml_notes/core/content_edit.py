"""Content edit modes applied when updating an existing note.

Each mode is its own frozen dataclass; :data:`EditRequest` is their union and
:func:`apply_edit` dispatches on the variant type.

=================  ==========================  =======================================
Mode               Needs the existing body?    Resulting body
=================  ==========================  =======================================
ReplaceContent     no                          newly encoded input
AppendContent      yes                         existing body + newly encoded body
KeepContent        only with attachments       existing body, unchanged
SearchReplace...   yes                         existing body with every match replaced
=================  ==========================  =======================================

Media tags for new attachments are appended after the mode transform in every
mode.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from enml_notes.core.markup import ContentFormat, encode_content, unwrap_body
from enml_notes.errors import InvalidPatternError, ValidationError


@dataclass(frozen=True)
class ReplaceContent:
    """Discard the existing body and use the encoded input."""

    content: str
    content_format: ContentFormat = ContentFormat.PLAIN_TEXT

    def encoded_body(self) -> str:
        return unwrap_body(encode_content(self.content_format, self.content))


@dataclass(frozen=True)
class AppendContent:
    """Concatenate the encoded input after the existing body."""

    content: str
    content_format: ContentFormat = ContentFormat.PLAIN_TEXT

    def encoded_body(self) -> str:
        return unwrap_body(encode_content(self.content_format, self.content))


@dataclass(frozen=True)
class KeepContent:
    """Leave the existing body untouched."""


@dataclass(frozen=True)
class SearchReplaceContent:
    """Replace every occurrence of ``search`` in the existing body.

    Matching is case-insensitive unless ``case_sensitive`` is set. ``search`` is
    a literal string unless ``use_regex`` is set. ``replacement`` is always
    inserted literally.
    """

    search: str
    replacement: str = ""
    use_regex: bool = False
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not self.search:
            raise ValidationError("Search value cannot be empty for search and replace.")

    def pattern(self) -> re.Pattern[str]:
        return compile_search_pattern(self.search, self.use_regex, self.case_sensitive)


EditRequest = Union[ReplaceContent, AppendContent, KeepContent, SearchReplaceContent]


def compile_search_pattern(search: str, use_regex: bool, case_sensitive: bool) -> re.Pattern[str]:
    """Compile the search value of a search-and-replace edit.

    Raises:
        ValidationError: If ``search`` is empty.
        InvalidPatternError: If ``use_regex`` is set and ``search`` does not compile.
    """
    if not search:
        raise ValidationError("Search value cannot be empty for search and replace.")

    source = search if use_regex else re.escape(search)
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise InvalidPatternError(search, str(exc)) from exc


def search_and_replace(body: str, edit: SearchReplaceContent) -> str:
    """Apply ``edit`` globally to ``body``."""
    pattern = edit.pattern()
    replacement = edit.replacement
    return pattern.sub(lambda _match: replacement, body)


def requires_existing_content(edit: EditRequest, has_attachments: bool = False) -> bool:
    """Return True when ``edit`` needs the current body of the note."""
    if isinstance(edit, (AppendContent, SearchReplaceContent)):
        return True
    if isinstance(edit, KeepContent):
        return has_attachments
    return False


def changes_content(edit: EditRequest, has_attachments: bool = False) -> bool:
    """Return False only when the update must leave the stored content untouched."""
    return not isinstance(edit, KeepContent) or has_attachments


def apply_edit(edit: EditRequest, existing_body: str = "", media_tags: Sequence[str] = ()) -> str:
    """Compute the new note body for ``edit``.

    Args:
        edit: The requested edit mode.
        existing_body: Body of the stored note (ignored by ``ReplaceContent``).
        media_tags: Reference tags of resources attached by this operation.

    Returns:
        The new body, without the ENML document shell.
    """
    if isinstance(edit, ReplaceContent):
        body = edit.encoded_body()
    elif isinstance(edit, AppendContent):
        body = f"{existing_body}{edit.encoded_body()}"
    elif isinstance(edit, KeepContent):
        body = existing_body
    elif isinstance(edit, SearchReplaceContent):
        body = search_and_replace(existing_body, edit)
    else:
        raise ValidationError(f"Unsupported edit mode: {type(edit).__name__}")

    return body + "".join(media_tags)
