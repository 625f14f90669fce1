"""
Strict payload parsing helpers that raise ValidationError with a field message.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError


def parse_decimal_field(value, label, positive=False, allow_none=True):
    """Parse a number into a Decimal or raise ValidationError."""
    if value is None or value == '':
        if allow_none:
            return None
        raise ValidationError(f"{label} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{label} must be a number")
    if positive and number <= 0:
        raise ValidationError(f"{label} must be a positive number")
    if number < 0:
        raise ValidationError(f"{label} cannot be negative")
    return number


def parse_int_field(value, label, minimum=None, allow_none=True):
    if value is None or value == '':
        if allow_none:
            return None
        raise ValidationError(f"{label} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number")
    try:
        number = int(str(value))
    except ValueError:
        raise ValidationError(f"{label} must be a whole number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{label} must be at least {minimum}")
    return number


def parse_date_field(value, label, allow_none=True):
    """Parse YYYY-MM-DD (a trailing time part is ignored)."""
    if not value:
        if allow_none:
            return None
        raise ValidationError(f"{label} is required")
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError(f"{label} must be a date (YYYY-MM-DD)")


def clean_text(value):
    return str(value).strip() if value is not None else ''


def parse_bool_field(value, label, default=False):
    """Accept JSON booleans or the strings true/false/1/0."""
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('true', '1'):
        return True
    if text in ('false', '0'):
        return False
    raise ValidationError(f"{label} must be true or false")
