from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be {max_len} characters or less")
    return value


def normalize_email(value: str) -> str:
    email = require_non_empty(value, "email").lower()
    require_max_length(email, "email", MAX_EMAIL_LENGTH)
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"email is not a valid address: {value!r}")
    return email


def normalize_name(value: str) -> str:
    name = require_non_empty(value, "name")
    return require_max_length(name, "name", MAX_NAME_LENGTH)


def normalize_picture(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("picture must be a string")
    return value.strip() or None
