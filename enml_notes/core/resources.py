"""Build content-addressed resources and their ``<en-media>`` reference tags."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional
from xml.sax.saxutils import quoteattr

from enml_notes.constants import DEFAULT_MIME_TYPE
from enml_notes.data_models import BinaryPayload, Resource, WorkItem

logger = logging.getLogger(__name__)


@dataclass
class ResourceBuildResult:
    """Resources and media tags, index-aligned."""

    resources: list[Resource] = field(default_factory=list)
    media_tags: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.resources)


def parse_binary_property_names(raw: Optional[str]) -> list[str]:
    """Split a comma separated list of binary property names, dropping blanks."""
    if not raw:
        return []
    return [name.strip() for name in raw.split(",") if name.strip()]


def media_tag(mime: str, hash_hex: str) -> str:
    """Return the inline reference tag for a resource."""
    return f"<en-media type={quoteattr(mime)} hash={quoteattr(hash_hex)}/>"


def build_resource(property_name: str, payload: BinaryPayload) -> Resource:
    """Create a resource from one binary payload.

    The digest is computed once over ``payload.data`` and shared by the resource
    and its reference tag.
    """
    data = bytes(payload.data)
    return Resource(
        data=data,
        size=len(data),
        body_hash=hashlib.md5(data).digest(),
        mime=payload.mime_type or DEFAULT_MIME_TYPE,
        file_name=payload.file_name or property_name,
    )


def build_resources(payloads: Iterable[tuple[str, BinaryPayload]]) -> ResourceBuildResult:
    """Build resources and media tags for ``(property_name, payload)`` pairs, in order."""
    result = ResourceBuildResult()
    for property_name, payload in payloads:
        resource = build_resource(property_name, payload)
        result.resources.append(resource)
        result.media_tags.append(media_tag(resource.mime, resource.hash_hex))
        logger.debug(
            "Built resource '%s' (%s, %d bytes, hash=%s)",
            resource.file_name,
            resource.mime,
            resource.size,
            resource.hash_hex,
        )
    return result


def build_resources_for_item(item: WorkItem, property_names: Sequence[str]) -> ResourceBuildResult:
    """Resolve ``property_names`` on ``item`` and build their resources.

    Raises:
        InputError: If any named binary property is missing from ``item``.
    """
    payloads = [(name, item.get_binary_payload(name)) for name in property_names]
    return build_resources(payloads)
