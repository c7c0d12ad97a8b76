"""Field validators used when saving drafts and creating entities.

Each validator takes the raw value and returns the value to store, or raises
:class:`ContentValidationError`. Values are never coerced across JSON types.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from portfolio_cms.models.errors import ContentValidationError

FieldValidator = Callable[[str, Any], Any]

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_SETTING_KEY_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_.-]*$")
_MAX_TITLE_LENGTH = 255
_JSON_SCALARS = (str, int, float, bool, type(None))


def required_text(field: str, value: Any) -> str:
    """Non-empty string, at most 255 characters after stripping."""
    if not isinstance(value, str):
        raise ContentValidationError(f"{field} must be a string", field=field)
    stripped = value.strip()
    if not stripped:
        raise ContentValidationError(f"{field} must not be empty", field=field)
    if len(stripped) > _MAX_TITLE_LENGTH:
        raise ContentValidationError(
            f"{field} must be at most {_MAX_TITLE_LENGTH} characters", field=field
        )
    return stripped


def optional_text(field: str, value: Any) -> str:
    """Any string; ``None`` is stored as the empty string."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ContentValidationError(f"{field} must be a string", field=field)
    return value


def optional_url(field: str, value: Any) -> str | None:
    """Absolute http(s) URL, or ``None`` / empty string to clear."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ContentValidationError(f"{field} must be a string", field=field)
    parsed = urlparse(value.strip())
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ContentValidationError(f"{field} must be an absolute http(s) URL", field=field)
    return value.strip()


def string_list(field: str, value: Any) -> list[str]:
    """List of strings, e.g. technology names."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ContentValidationError(f"{field} must be a list of strings", field=field)
    return value


def json_object(field: str, value: Any) -> dict[str, Any]:
    """JSON object (mapping of string keys to JSON values)."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ContentValidationError(f"{field} must be a JSON object", field=field)
    return json_value(field, value)


def json_value(field: str, value: Any) -> Any:
    """Any JSON-serializable value built from dicts, lists and scalars."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ContentValidationError(f"{field} must not contain NaN or infinity", field=field)
    if isinstance(value, _JSON_SCALARS):
        return value
    if isinstance(value, list):
        for item in value:
            json_value(field, item)
        return value
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise ContentValidationError(f"{field} keys must be strings", field=field)
            json_value(field, item)
        return value
    raise ContentValidationError(
        f"{field} contains a non-JSON value of type {type(value).__name__}", field=field
    )


def validate_slug(value: Any) -> str:
    """Lowercase, hyphen-separated slug."""
    if not isinstance(value, str) or not _SLUG_PATTERN.match(value):
        raise ContentValidationError(
            "slug must be lowercase letters, digits and single hyphens", field="slug"
        )
    return value


def validate_setting_key(value: Any) -> str:
    """Setting key: starts with a letter, then letters, digits, ``_``, ``.`` or ``-``."""
    if not isinstance(value, str) or not _SETTING_KEY_PATTERN.match(value):
        raise ContentValidationError("invalid setting key", field="key")
    return value
