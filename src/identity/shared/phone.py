"""Phone number validation for delivery contact numbers."""

import re

from shared.exceptions import ValidationError


def validate_phone_number(number: str | None) -> str:
    """Return the trimmed number, or raise ``ValidationError``.

    Accepts digits, spaces, hyphens, parentheses, and an optional leading +.
    """
    number = (number or "").strip()
    if not number:
        raise ValidationError({"phone_number": ["Phone number is required"]})

    # Must contain at least one digit
    if not re.search(r"\d", number):
        raise ValidationError({"phone_number": [f"Invalid phone number: {number!r}"]})

    # Only allow: digits, spaces, hyphens, parentheses, leading +
    if not re.match(r"^\+?[\d\s\-()]+$", number) or len(number) > 20:
        raise ValidationError({"phone_number": [f"Invalid phone number: {number!r}"]})

    return number
