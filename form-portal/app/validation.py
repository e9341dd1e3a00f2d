"""Client-side validation for form fields and the login form."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from app.schema import FieldDescriptor, FieldType

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_PHONE_RE = re.compile(r"[0-9]{10}")

MIN_ROLL_NUMBER_LENGTH = 3
MIN_NAME_LENGTH = 2


def validate_field(value: str | list[str] | None, field: FieldDescriptor) -> str:
    """Validate a single value against its field descriptor.

    Rules run in order and the first failure wins. Returns the error
    message, or an empty string when the value is acceptable.
    """
    if value is None:
        value = field.empty_value()

    if field.required and len(value) == 0:
        return "This field is required"

    if field.min_length and len(value) < field.min_length:
        return f"Minimum length is {field.min_length} characters"

    if field.max_length and len(value) > field.max_length:
        return f"Maximum length is {field.max_length} characters"

    if field.type is FieldType.EMAIL and value:
        if not _EMAIL_RE.fullmatch(str(value)):
            return "Please enter a valid email address"

    if field.type is FieldType.TEL and value:
        if not _PHONE_RE.fullmatch(str(value)):
            return "Please enter a valid 10-digit phone number"

    return ""


def validate_section(
    fields: Iterable[FieldDescriptor],
    values: Mapping[str, str | list[str]],
) -> dict[str, str]:
    """Return {field_id: message} for every failing field in a section."""
    errors: dict[str, str] = {}
    for f in fields:
        message = validate_field(values.get(f.field_id), f)
        if message:
            errors[f.field_id] = message
    return errors


def validate_identity(roll_number: str, name: str) -> list[str]:
    """Validate the login form. Returns error messages in display order."""
    errors: list[str] = []
    roll_number = (roll_number or "").strip()
    name = (name or "").strip()

    if not roll_number:
        errors.append("Roll number is required")
    elif len(roll_number) < MIN_ROLL_NUMBER_LENGTH:
        errors.append(f"Roll number must be at least {MIN_ROLL_NUMBER_LENGTH} characters")

    if not name:
        errors.append("Name is required")
    elif len(name) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters")

    return errors
