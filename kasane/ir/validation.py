"""
Kasane Error Taxonomy and Shape Checks

Failures fall into two camps and must never be confused:

- Contract violations (EncodingError, DecodingError, ResponseShapeError):
  a local bug or protocol drift. These propagate; nothing in this
  package catches them.
- Engine outcomes (CommandError): the engine answered {"Error": msg}.
  Legitimate at runtime, e.g. "already exists" from put_value.

Version mismatches are neither: they are warnings and never stop a
client from being constructed.
"""

from __future__ import annotations

import json
from typing import Any, Optional


class KasaneError(Exception):
    """Base class for every error raised by this package."""

    pass


class EncodingError(KasaneError, ValueError):
    """
    Raised when caller-supplied input cannot be encoded.

    Always a programming error: a malformed dimension range, filter,
    identifier or range expression.
    """

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


class DecodingError(KasaneError, ValueError):
    """Raised when an engine payload does not match any known wire tag."""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


class ResponseShapeError(DecodingError):
    """
    Raised when an engine response has the wrong structure for the
    operation: bad envelope, unexpected Output variant, malformed record.
    """

    pass


class CommandError(KasaneError):
    """
    Raised when the engine reports {"Error": message}.

    str(error) is the engine's message verbatim so callers can branch on
    it.
    """

    def __init__(self, message: str, command: Any = None):
        self.message = message
        self.command = command
        super().__init__(message)


class VersionCompatibilityWarning(UserWarning):
    """Issued when the engine version is outside the supported window."""

    pass


def describe(payload: Any) -> str:
    """Render a payload for an error message, JSON where possible."""
    try:
        return json.dumps(payload, default=str)
    except (TypeError, ValueError):
        return repr(payload)


def require_single_key(payload: Any, what: str) -> str:
    """
    Return the only key of a one-entry dict.

    Raises:
        EncodingError: If payload is not a dict with exactly one key.
    """
    if not isinstance(payload, dict) or len(payload) != 1:
        raise EncodingError(f"unrecognized {what}: {describe(payload)}", payload)
    return next(iter(payload))


def is_number(value: Any) -> bool:
    """True for int and float, False for bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_pair(value: Any, what: str, payload: Optional[Any] = None) -> None:
    """
    Raises:
        EncodingError: If value is not a two-element list or tuple.
    """
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise EncodingError(
            f"{what} expects two values, got {describe(value)}",
            payload if payload is not None else value,
        )
