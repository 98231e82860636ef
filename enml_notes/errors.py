"""Exception types raised by the ENML note engine.

Every error is fatal to the item being processed and is never retried by the
engine. ``ValidationError`` and ``InvalidPatternError`` subclass ``ValueError``
so callers that already guard configuration mistakes with ``except ValueError``
keep working.
"""

from __future__ import annotations

from typing import Any, Optional


NOTE_LOCKED_HINT = (
    "The note is currently open for editing elsewhere. "
    "Close it in the other editor (or wait for the lock to clear) and try again."
)


class NoteEngineError(Exception):
    """Base class for all engine errors."""


class ValidationError(NoteEngineError, ValueError):
    """User supplied input that cannot be processed (bad JSON, empty search value, ...)."""


class InvalidPatternError(NoteEngineError, ValueError):
    """A search pattern failed to compile as a regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid search pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class InputError(NoteEngineError, LookupError):
    """A referenced binary payload is not present on the current work item."""

    def __init__(self, property_name: str, available: Optional[list[str]] = None) -> None:
        message = f"Binary property '{property_name}' does not exist on this item."
        if available:
            message += f" Available properties: {', '.join(sorted(available))}."
        super().__init__(message)
        self.property_name = property_name


class RemoteServiceError(NoteEngineError):
    """The note-storage collaborator rejected or failed a call.

    ``message`` and ``code`` are surfaced verbatim. ``hint`` is only filled in
    for conditions the engine knows how to explain.
    """

    NOTE_LOCKED = "NOTE_LOCKED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    def __init__(self, message: str, code: Optional[str] = None, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint

    def __str__(self) -> str:
        text = self.message
        if self.code:
            text = f"[{self.code}] {text}"
        if self.hint:
            text = f"{text} {self.hint}"
        return text

    def with_hint(self) -> "RemoteServiceError":
        """Return this error augmented with a human-readable hint when one is known."""
        if self.code == self.NOTE_LOCKED and not self.hint:
            self.hint = NOTE_LOCKED_HINT
        return self

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.hint:
            payload["hint"] = self.hint
        return payload


class BatchItemError(NoteEngineError):
    """Raised when an item fails and failure isolation is disabled for the batch."""

    def __init__(self, item_index: int, error: Exception) -> None:
        super().__init__(f"Item {item_index} failed: {error}")
        self.item_index = item_index
        self.error = error


def error_payload(error: Exception) -> dict[str, Any]:
    """Serialize an engine error for the ``error`` field of a batch result."""
    if isinstance(error, RemoteServiceError):
        payload = error.as_payload()
    else:
        payload = {"message": str(error)}
    payload["type"] = type(error).__name__
    return payload
