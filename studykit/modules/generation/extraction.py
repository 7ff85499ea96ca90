"""Turn raw provider text into typed values.

Model output is untrusted: structured tasks go through fence stripping, a
strict JSON parse and shape validation, in that order, and stop at the first
failure. Free-form tasks only need non-empty text.
"""

from __future__ import annotations

import json
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from studykit.modules.generation.errors import GenerationError, GenerationErrorKind

JSON_FENCE = "```json"
FENCE = "```"

ShapeT = TypeVar("ShapeT", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """Remove ```json and ``` markers plus surrounding whitespace.

    Only these two literal markers are removed; any other Markdown is left
    alone. Applying it twice gives the same result as applying it once.
    """
    return text.replace(JSON_FENCE, "").replace(FENCE, "").strip()


def require_text(raw: Optional[str]) -> str:
    if raw is None or not raw.strip():
        raise GenerationError(
            GenerationErrorKind.EMPTY_RESPONSE,
            "Model returned no text",
            raw_text=raw,
        )
    return raw


def extract_text(raw: Optional[str]) -> str:
    """Trimmed free-form text; never parsed as JSON."""
    return require_text(raw).strip()


def parse_json(raw: str) -> Any:
    cleaned = strip_code_fences(raw)
    if not cleaned:
        raise GenerationError(
            GenerationErrorKind.EMPTY_RESPONSE,
            "Model returned an empty code block",
            raw_text=raw,
        )
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GenerationError(
            GenerationErrorKind.MALFORMED_JSON,
            f"Model output is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            raw_text=raw,
        ) from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and pathological nesting
        raise GenerationError(
            GenerationErrorKind.MALFORMED_JSON,
            f"Model output is not valid JSON: {e}",
            raw_text=raw,
        ) from e


def format_loc(loc: tuple[Any, ...]) -> str:
    """Render a validation error location as ``questions[0].options``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "(root)"


def validate_shape(shape: type[ShapeT], data: Any, *, raw: Optional[str] = None) -> ShapeT:
    try:
        return shape.model_validate(data)
    except ValidationError as e:
        first = e.errors(include_url=False)[0]
        path = format_loc(tuple(first["loc"]))
        raise GenerationError(
            GenerationErrorKind.SHAPE_MISMATCH,
            f"Invalid {shape.__name__} at {path}: {first['msg']}",
            raw_text=raw,
            field=path,
        ) from e


def extract_structured(shape: type[ShapeT], raw: Optional[str]) -> ShapeT:
    text = require_text(raw)
    data = parse_json(text)
    return validate_shape(shape, data, raw=text)
