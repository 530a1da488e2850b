"""Monetary helpers: amounts are carried as Decimal and computed in integer minor units.

Every arithmetic step on money (totals, discounts, fee splits) happens on
integer cents. Decimal is the representation at model boundaries; floats only
appear when a value is rendered for display or sent over the wire.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated

from pydantic import PlainSerializer

from shared.exceptions import ValidationError

MINOR_UNITS_PER_MAJOR = 100
_CENT = Decimal("0.01")

VALID_CURRENCIES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "CAD",
        "AUD",
        "SGD",
        "VND",
    }
)


# The backend stores amounts as JSON numbers, not strings.
WireAmount = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


def to_decimal(value) -> Decimal:
    """Coerce an int, str, float or Decimal into a Decimal without binary drift."""
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so 29.99 stays 29.99 rather than 29.989999...
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError({"amount": [f"Not a monetary amount: {value!r}"]}) from exc


def round2(value) -> Decimal:
    """Round half-up to two decimal places."""
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def to_minor(value) -> int:
    """Convert a major-unit amount to integer minor units (cents), rounding half-up."""
    return int(round2(value) * MINOR_UNITS_PER_MAJOR)


def from_minor(minor: int) -> Decimal:
    """Convert integer minor units back to a two-place Decimal."""
    return (Decimal(minor) / MINOR_UNITS_PER_MAJOR).quantize(_CENT)


def format_amount(value, currency: str = "USD") -> str:
    """Render an amount for display, e.g. ``$59.98`` or ``59.98 EUR``."""
    amount = round2(value)
    if currency == "USD":
        return f"${amount}"
    return f"{amount} {currency}"


def validate_currency(currency: str) -> str:
    if currency not in VALID_CURRENCIES:
        raise ValidationError({"currency": [f"Unsupported currency: {currency}"]})
    return currency
