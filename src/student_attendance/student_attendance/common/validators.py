from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_RATING, MIN_RATING, PHONE_PATTERN
from ..core.exceptions import ValidationError

_PHONE_RE = re.compile(PHONE_PATTERN)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_phone(value: str, field_name: str = "Phone") -> str:
    if not value or not _PHONE_RE.fullmatch(value):
        raise ValidationError(f"{field_name} must start with 010, 011, 012, or 015 and be 11 digits")
    return value


def optional_phone(value: Optional[str], field_name: str) -> Optional[str]:
    if not value:
        return None
    return require_phone(value, field_name)


def require_rating(value: int) -> int:
    # 0 means "unrated" and is never a valid target
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Rating must be an integer")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return value
