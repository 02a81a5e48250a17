from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_LETTERS_ONLY = re.compile(r"^[a-zA-Z\s]*$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required.")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"The {field_name.lower()} should be at least {min_len} characters long.")
    return value


def require_letters(value: str, field_name: str, max_len: int | None = None) -> str:
    value = require_non_empty(value, field_name)
    if not _LETTERS_ONLY.match(value):
        raise ValidationError(f"{field_name} may only contain letters and spaces.")
    if max_len is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters.")
    return value
