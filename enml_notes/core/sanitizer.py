"""HTML to ENML sanitization policy.

Arbitrary HTML is reduced to the element and attribute allowlist accepted inside
``<en-note>``. Elements outside the allowlist are unwrapped so their children
survive in the parent's context; elements that only carry code or document
metadata are removed together with their content. The result is serialized
with XML-compatible void elements (``<br/>``) so it can be wrapped directly.
"""

from __future__ import annotations

import logging
import re
from typing import Union

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import NavigableString, PreformattedString, Tag
from bs4.formatter import HTMLFormatter

logger = logging.getLogger(__name__)


ALLOWED_TAGS = frozenset(
    {
        "en-media",
        "a",
        "b",
        "strong",
        "i",
        "em",
        "u",
        "s",
        "strike",
        "sub",
        "sup",
        "p",
        "br",
        "hr",
        "ul",
        "ol",
        "li",
        "div",
        "span",
        "pre",
        "code",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
    }
)

_HEADING_ATTRIBUTES = frozenset({"style"})

ALLOWED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "title", "name"}),
    "div": frozenset({"style"}),
    "span": frozenset({"style"}),
    "p": frozenset({"style"}),
    "table": frozenset({"style", "border", "cellpadding", "cellspacing"}),
    "th": frozenset({"style", "colspan", "rowspan"}),
    "td": frozenset({"style", "colspan", "rowspan"}),
    "tr": frozenset({"style"}),
    "h1": _HEADING_ATTRIBUTES,
    "h2": _HEADING_ATTRIBUTES,
    "h3": _HEADING_ATTRIBUTES,
    "h4": _HEADING_ATTRIBUTES,
    "h5": _HEADING_ATTRIBUTES,
    "h6": _HEADING_ATTRIBUTES,
    "en-media": frozenset(
        {"type", "hash", "width", "height", "style", "align", "alt", "longdesc", "reco-type"}
    ),
}

ALLOWED_SCHEMES = frozenset({"http", "https", "mailto", "data"})
URL_ATTRIBUTES = frozenset({"href", "longdesc"})

SELF_CLOSING_TAGS = frozenset({"br", "hr", "img", "en-media"})

# Removed with their content rather than unwrapped.
DISCARDED_TAGS = frozenset(
    {"script", "style", "textarea", "option", "noscript", "head", "title", "iframe", "object", "template"}
)

TAG_ALIASES = {"enmedia": "en-media"}

_SCHEME_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_URL_NOISE_PATTERN = re.compile(r"[\x00-\x20\x7f]+")
# C0 controls other than tab, LF and CR are not allowed anywhere in XML 1.0.
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


class _SourceOrderFormatter(HTMLFormatter):
    """The "minimal" formatter, keeping attributes in document order instead of sorting them."""

    def attributes(self, tag: Tag):
        return list((tag.attrs or {}).items())


_FORMATTER = _SourceOrderFormatter(entity_substitution=EntitySubstitution.substitute_xml)


def strip_invalid_xml_chars(text: str) -> str:
    """Remove characters that cannot appear in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("", text)


def is_allowed_url(value: str) -> bool:
    """Return True when ``value`` is relative or uses an allowlisted scheme."""
    compact = _URL_NOISE_PATTERN.sub("", value)
    match = _SCHEME_PATTERN.match(compact)
    if match is None:
        return True
    return match.group(1).lower() in ALLOWED_SCHEMES


def _filter_attributes(tag: Tag) -> None:
    allowed = ALLOWED_ATTRIBUTES.get(tag.name, frozenset())
    cleaned: dict[str, str] = {}
    for name, value in tag.attrs.items():
        if name not in allowed:
            continue
        if isinstance(value, list):
            value = " ".join(value)
        if name in URL_ATTRIBUTES and not is_allowed_url(value):
            logger.debug("Dropping %s attribute with disallowed scheme on <%s>", name, tag.name)
            continue
        cleaned[name] = strip_invalid_xml_chars(value)
    tag.attrs = cleaned


def _clean_children(node: Union[Tag, BeautifulSoup]) -> None:
    for child in list(node.children):
        if isinstance(child, PreformattedString):
            # comments, doctypes, CDATA, processing instructions
            child.extract()
            continue
        if isinstance(child, NavigableString):
            text = strip_invalid_xml_chars(child)
            if text != child:
                child.replace_with(text)
            continue
        if not isinstance(child, Tag):
            continue

        child.name = TAG_ALIASES.get(child.name, child.name)
        if child.name in DISCARDED_TAGS:
            child.decompose()
            continue

        _clean_children(child)

        if child.name not in ALLOWED_TAGS:
            child.unwrap()
            continue

        _filter_attributes(child)
        if child.name in SELF_CLOSING_TAGS:
            # A void element never owns children; keep them as following siblings.
            for grandchild in reversed(list(child.contents)):
                child.insert_after(grandchild.extract())
            child.can_be_empty_element = True


def sanitize_html_to_body(html: str) -> str:
    """Reduce ``html`` to allowlisted, XML-serialized ENML body markup.

    Args:
        html: Arbitrary user supplied HTML fragment or document.

    Returns:
        Markup that can be passed to :func:`enml_notes.core.markup.wrap_body`
        unchanged: well formed, self-closed void elements, attributes in
        source order, no characters XML 1.0 forbids, and ``&``, ``<`` and
        ``>`` escaped everywhere outside tags.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    # Content outside an explicit <body> (e.g. after </html>) is ignored.
    root: Union[Tag, BeautifulSoup] = soup.body if soup.body is not None else soup
    _clean_children(root)
    return root.decode_contents(formatter=_FORMATTER)
