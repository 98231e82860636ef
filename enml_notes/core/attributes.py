"""Merge note attributes from a JSON blob and structured fields."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from enml_notes.errors import ValidationError

logger = logging.getLogger(__name__)


# snake_case name -> Evernote NoteAttributes field name
ATTRIBUTE_VOCABULARY: dict[str, str] = {
    "author": "author",
    "source": "source",
    "source_url": "sourceURL",
    "source_application": "sourceApplication",
    "place_name": "placeName",
    "content_class": "contentClass",
    "latitude": "latitude",
    "longitude": "longitude",
    "altitude": "altitude",
    "subject_date": "subjectDate",
    "reminder_order": "reminderOrder",
    "reminder_time": "reminderTime",
    "reminder_done_time": "reminderDoneTime",
}

_ALIASES: dict[str, str] = {
    **{name: name for name in ATTRIBUTE_VOCABULARY},
    **{remote: name for name, remote in ATTRIBUTE_VOCABULARY.items()},
}


def normalize_attribute_key(key: str) -> str:
    """Map a snake_case or camelCase attribute name onto the vocabulary.

    Raises:
        ValidationError: If ``key`` is not a known attribute.
    """
    try:
        return _ALIASES[key.strip()]
    except KeyError as exc:
        raise ValidationError(
            f"Unknown note attribute '{key}'. "
            f"Supported attributes: {', '.join(sorted(ATTRIBUTE_VOCABULARY))}."
        ) from exc


def _check_scalar(key: str, value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    raise ValidationError(
        f"Note attribute '{key}' must be a string, number or boolean, "
        f"got {type(value).__name__}."
    )


def parse_attributes_json(raw: Optional[str]) -> dict[str, Any]:
    """Parse the free-form JSON attribute blob.

    ``None``, empty and whitespace-only strings yield an empty mapping. ``null``
    values are skipped.

    Raises:
        ValidationError: If ``raw`` is not valid JSON, is not an object, or holds
            unknown keys or non-scalar values.
    """
    if raw is None or not raw.strip():
        return {}

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Attributes JSON is not valid JSON: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValidationError("Attributes JSON must be an object of key/value pairs.")

    attributes: dict[str, Any] = {}
    for key, value in parsed.items():
        if value is None:
            continue
        name = normalize_attribute_key(key)
        attributes[name] = _check_scalar(name, value)
    return attributes


def merge_attributes(
    attributes_json: Optional[str] = None,
    fields: Optional[Mapping[str, Any]] = None,
) -> Optional[dict[str, Any]]:
    """Combine the JSON blob and the structured fields into one attribute set.

    The JSON blob is parsed first; structured fields are overlaid on top and win
    on key collisions. Structured fields set to ``None`` are ignored.

    Returns:
        The merged attributes, or ``None`` when neither source supplied any.

    Raises:
        ValidationError: If the JSON blob is malformed or a key/value is invalid.
    """
    merged = parse_attributes_json(attributes_json)
    for key, value in (fields or {}).items():
        if value is None:
            continue
        name = normalize_attribute_key(key)
        merged[name] = _check_scalar(name, value)

    if not merged:
        return None

    logger.debug("Merged note attributes: %s", ", ".join(sorted(merged)))
    return merged
