"""Input checks run before anything is sent to Joplin."""

from __future__ import annotations

import re
from typing import Any

from .errors import ValidationError

MAX_TITLE_LENGTH = 255
MAX_PAGE_LIMIT = 100
# 9999-12-31T23:59:59.999Z in milliseconds
MAX_TIMESTAMP = 253_402_300_799_999
ORDER_FIELDS = (
    "id",
    "title",
    "created_time",
    "updated_time",
    "user_created_time",
    "user_updated_time",
)
ORDER_DIRECTIONS = ("ASC", "DESC")

_ID_RE = re.compile(r"^[a-f0-9]{32}$", re.IGNORECASE)
_HEX_RE = re.compile(r"[a-f0-9]", re.IGNORECASE)


def is_blank(value: Any) -> bool:
    return value is None or value == ""


def validate_id(value: Any, label: str) -> None:
    if not isinstance(value, str) or not _ID_RE.match(value):
        raise ValidationError(
            f"Invalid {label} format. Must be 32-character hexadecimal string.",
            identifier=value if isinstance(value, str) else None,
        )


def validate_optional_id(value: Any, label: str) -> None:
    if not is_blank(value):
        validate_id(value, label)


def looks_like_id(value: str) -> bool:
    """Loose check used by the read tools to catch titles passed as ids."""
    return len(value) >= 10 and bool(_HEX_RE.search(value))


def require_read_id(value: Any, label: str, *, tool: str, listing: str) -> None:
    if not value or not isinstance(value, str):
        raise ValidationError(
            f"Please provide a {label} ID.",
            hint=f'Example: {tool} {label}_id="your-{label}-id"',
        )
    if not looks_like_id(value):
        raise ValidationError(
            f'"{value}" does not appear to be a valid {label} ID.',
            identifier=value,
            hint=(
                f"{label.capitalize()} IDs are long alphanumeric strings like "
                f'"58a0a29f68bc4141b49c99f5d367638a". Use {listing} to find them.'
            ),
        )


def validate_title(title: Any) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required and cannot be empty.")
    _check_title_length(title)


def validate_optional_title(title: Any) -> None:
    if is_blank(title):
        return
    if not isinstance(title, str):
        raise ValidationError("Title must be a string.")
    if not title.strip():
        raise ValidationError("Title cannot be empty.")
    _check_title_length(title)


def _check_title_length(title: str) -> None:
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title cannot exceed {MAX_TITLE_LENGTH} characters.")


def validate_optional_body(body: Any) -> None:
    if body is not None and not isinstance(body, str):
        raise ValidationError("Note body must be a string.")


def validate_optional_bool(value: Any, field: str) -> None:
    if value is not None and not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean (true/false).")


def validate_optional_timestamp(value: Any, field: str) -> None:
    if value is None:
        return
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not _is_int(value) or not 0 <= value <= MAX_TIMESTAMP:
        raise ValidationError(
            f"{field} must be a valid Unix timestamp in milliseconds (whole positive number)."
        )


def validate_pagination(page: Any, limit: Any) -> None:
    if page is not None and (not _is_int(page) or page < 1):
        raise ValidationError("Page must be a positive number starting from 1.")
    if limit is not None and (not _is_int(limit) or not 1 <= limit <= MAX_PAGE_LIMIT):
        raise ValidationError(f"Limit must be a number between 1 and {MAX_PAGE_LIMIT}.")


def validate_order(order_by: Any, order_dir: Any) -> None:
    if not is_blank(order_by) and order_by not in ORDER_FIELDS:
        raise ValidationError(f"Order by must be one of: {', '.join(ORDER_FIELDS)}")
    if not is_blank(order_dir) and (
        not isinstance(order_dir, str) or order_dir.upper() not in ORDER_DIRECTIONS
    ):
        raise ValidationError("Order direction must be ASC or DESC")


def validate_at_least_one(fields: dict[str, Any]) -> None:
    if all(is_blank(v) for v in fields.values()):
        raise ValidationError(
            "At least one property must be provided for update: " + ", ".join(fields) + "."
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
