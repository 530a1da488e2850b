"""Fixed-rate conversion from the cart currency to the settlement currency.

This is a placeholder, not an exchange-rate engine: the rate is a
configuration constant with no versioning, and amounts already in flight are
not re-priced when it changes.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.money import round2, validate_currency
from shared.settings import Settings


@dataclass(frozen=True)
class FixedRateConverter:
    source_currency: str
    target_currency: str
    rate: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        validate_currency(self.source_currency)
        validate_currency(self.target_currency)
        if self.source_currency == self.target_currency and self.rate != 1:
            raise ValueError("Same-currency conversion must use a rate of 1")

    @classmethod
    def from_settings(cls, settings: Settings) -> "FixedRateConverter":
        return cls(
            source_currency=settings.cart_currency,
            target_currency=settings.settlement_currency,
            rate=settings.conversion_rate,
        )

    def convert(self, amount) -> Decimal:
        """Convert ``amount`` (in the source currency) into the target currency, to the cent."""
        return round2(Decimal(str(amount)) * self.rate)
