"""Failure taxonomy for content generation."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class GenerationErrorKind(str, Enum):
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_JSON = "malformed_json"
    SHAPE_MISMATCH = "shape_mismatch"


class GenerationError(Exception):
    """Terminal failure of a single generation call.

    ``raw_text`` holds the provider output exactly as received when the
    failure happened after invocation. ``field`` names the first offending
    path for shape mismatches, e.g. ``questions[0].options``.
    """

    def __init__(
        self,
        kind: GenerationErrorKind,
        message: str,
        *,
        raw_text: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.raw_text = raw_text
        self.field = field

    def __repr__(self) -> str:
        return f"GenerationError(kind={self.kind.value!r}, message={self.message!r})"
