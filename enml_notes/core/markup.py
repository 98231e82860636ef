"""ENML document shell: wrapping, unwrapping and conversion to display HTML."""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable
from xml.sax.saxutils import escape

from enml_notes.constants import ENML_DOCTYPE, XML_PROLOG
from enml_notes.core.sanitizer import sanitize_html_to_body, strip_invalid_xml_chars

_BODY_PATTERN = re.compile(r"<en-note[^>]*>([\s\S]*?)</en-note>", re.IGNORECASE)
_LINE_BREAK_PATTERN = re.compile(r"\r?\n")

_PROLOG_PATTERN = re.compile(r"<\?xml[^>]*>", re.IGNORECASE)
_DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
_ROOT_OPEN_PATTERN = re.compile(r"<en-note([^>]*)>", re.IGNORECASE)
_ROOT_CLOSE_PATTERN = re.compile(r"</en-note>", re.IGNORECASE)
_TODO_CHECKED_PATTERN = re.compile(r"<en-todo checked=\"true\"\s*/?>", re.IGNORECASE)
_TODO_UNCHECKED_PATTERN = re.compile(r"<en-todo checked=\"false\"\s*/?>", re.IGNORECASE)
_TODO_BARE_PATTERN = re.compile(r"<en-todo\s*/?>", re.IGNORECASE)

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

LINE_BREAK = "<br/>"


class ContentFormat(str, enum.Enum):
    """How user supplied note content should be interpreted."""

    PLAIN_TEXT = "plain_text"
    HTML = "html"


def wrap_body(body: str) -> str:
    """Place ``body`` inside the ENML prolog, doctype and ``<en-note>`` root.

    ``body`` is inserted verbatim; callers must pass allowlisted markup.
    """
    return f"{XML_PROLOG}\n{ENML_DOCTYPE}<en-note>{body}</en-note>"


def unwrap_body(document: str) -> str:
    """Return the markup between the ``<en-note>`` opening and closing tags.

    Attributes on the opening tag are tolerated. An empty string is returned when
    the root element is absent.
    """
    match = _BODY_PATTERN.search(document or "")
    return match.group(1) if match else ""


def escape_text(text: str) -> str:
    """Escape the five XML metacharacters and drop characters XML 1.0 forbids."""
    return escape(strip_invalid_xml_chars(text), _XML_ENTITIES)


def plain_text_to_enml(text: str) -> str:
    """Convert plain text into an ENML document with one ``<div>`` block."""
    escaped = _LINE_BREAK_PATTERN.sub(LINE_BREAK, escape_text(text))
    return wrap_body(f"<div>{escaped}</div>")


def html_to_enml(html: str) -> str:
    """Sanitize arbitrary HTML and wrap the result into an ENML document."""
    return wrap_body(sanitize_html_to_body(html))


def encode_content(content_format: ContentFormat, text: str) -> str:
    """Encode user content into a complete ENML document."""
    if ContentFormat(content_format) is ContentFormat.HTML:
        return html_to_enml(text)
    return plain_text_to_enml(text)


def append_to_body(document: str, fragments: Iterable[str]) -> str:
    """Return ``document`` with ``fragments`` appended after its existing body."""
    suffix = "".join(fragments)
    if not suffix:
        return document
    return wrap_body(f"{unwrap_body(document)}{suffix}")


def enml_to_html(document: str) -> str:
    """Convert an ENML document into HTML suitable for display.

    The root becomes a ``<div>`` (attributes kept) and checklist items become
    disabled checkboxes, so checklist state cannot be written back.
    """
    html = _PROLOG_PATTERN.sub("", document or "", count=1)
    html = _DOCTYPE_PATTERN.sub("", html, count=1).strip()
    html = _ROOT_OPEN_PATTERN.sub(r"<div\1>", html, count=1)
    html = _ROOT_CLOSE_PATTERN.sub("</div>", html, count=1)
    html = _TODO_CHECKED_PATTERN.sub('<input type="checkbox" checked disabled>', html)
    html = _TODO_UNCHECKED_PATTERN.sub('<input type="checkbox" disabled>', html)
    return _TODO_BARE_PATTERN.sub('<input type="checkbox" disabled>', html)
