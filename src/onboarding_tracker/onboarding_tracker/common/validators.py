from __future__ import annotations

from ..core.constants import ALLOWED_BUCKET_WIDTHS
from ..core.enums import Checkpoint
from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_checkpoint(value: str | Checkpoint) -> Checkpoint:
    if isinstance(value, Checkpoint):
        return value
    try:
        return Checkpoint(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid checkpoint: {value!r}") from None


def require_bucket_width(value: int | str) -> int:
    try:
        width = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid interval: {value!r}") from None
    if width not in ALLOWED_BUCKET_WIDTHS:
        allowed = ", ".join(str(w) for w in ALLOWED_BUCKET_WIDTHS)
        raise ValidationError(f"Invalid interval. Must be one of {allowed} minutes")
    return width


def require_non_negative_int(value: object, field_name: str) -> int:
    # bool is an int subclass; floats would be silently truncated.
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValidationError(f"{field_name} must be a non-negative integer")
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a non-negative integer") from None
    if number < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer")
    return number
