"""Reusable validation utilities for input sanitization."""

import re
from decimal import Decimal, InvalidOperation

# NUMERIC(12, 2)
MAX_AMOUNT = Decimal("9999999999.99")
MIN_BILL_AMOUNT = Decimal("0.01")


def validate_currency(
    value: Decimal | float | str,
    max_value: Decimal = MAX_AMOUNT,
    allow_negative: bool = False,
) -> Decimal:
    """
    Validate currency input.

    Args:
        value: Currency value to validate
        max_value: Maximum allowed absolute value (default matches NUMERIC(12, 2))
        allow_negative: Accept signed values (opening balances)

    Returns:
        Validated Decimal quantized to 2 decimal places

    Raises:
        ValueError: If value is malformed, negative (when not allowed),
            exceeds max, or has more than 2 decimals
    """
    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid currency format: {value}") from e

    if not decimal_value.is_finite():
        raise ValueError(f"Invalid currency format: {value}")

    if decimal_value < 0 and not allow_negative:
        raise ValueError("Currency value cannot be negative")

    if abs(decimal_value) > max_value:
        raise ValueError(f"Currency value exceeds maximum allowed: {max_value}")

    if decimal_value.as_tuple().exponent < -2:
        raise ValueError("Currency value cannot have more than 2 decimal places")

    return decimal_value.quantize(Decimal("0.01"))


def validate_person_name(value: str, field_name: str = "Name", min_length: int = 2) -> str:
    """
    Validate a customer or wholesaler name.

    Names are free text (shop names carry &, /, apostrophes), so only
    length and HTML are checked.
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    cleaned = sanitize_html(value)
    if cleaned is None or len(cleaned) < min_length:
        raise ValueError(f"{field_name} must be at least {min_length} characters")

    return cleaned


def validate_phone(value: str | None) -> str | None:
    """
    Validate phone number format.

    Returns:
        Validated phone or None if empty

    Raises:
        ValueError: If format is invalid
    """
    if not value or not value.strip():
        return None

    cleaned = value.strip()

    # Allow: digits, spaces, +, -, (, )
    if not re.match(r"^[0-9\s+\-()]+$", cleaned):
        raise ValueError("Phone can only contain digits, spaces, +, -, (, )")

    digits_only = re.sub(r"[^0-9]", "", cleaned)
    if len(digits_only) < 5:
        raise ValueError("Phone must contain at least 5 digits")

    return cleaned


def sanitize_html(value: str | None) -> str | None:
    """
    Strip/escape HTML tags to prevent XSS.

    Returns:
        Sanitized text or None if empty
    """
    if not value:
        return None

    cleaned = re.sub(r"<[^>]+>", "", value)

    cleaned = (
        cleaned.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )

    return cleaned.strip() if cleaned.strip() else None


def validate_email(value: str | None) -> str | None:
    """
    Basic email format validation. Empty string means "no email".

    Returns:
        Lowercase email or None
    """
    if value is None or not value.strip():
        return None

    cleaned = value.strip().lower()

    pattern = r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$"
    if not re.match(pattern, cleaned):
        raise ValueError("Invalid email format")

    return cleaned
