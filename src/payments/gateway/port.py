"""Marketplace payment gateway port (abstract interface).

Defines the contract that all marketplace gateway adapters must implement.
This enables swapping between FakeMarketplaceGateway (dev/test) and
PayPalMarketplaceGateway (production) without changing the checkout.

Every call can fail independently. ``create_split_order`` must never be
retried blindly: a duplicate would authorise the buyer twice.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from shared.money import from_minor, to_minor


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: datetime

    def is_fresh(self, margin_seconds: int = 0, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return now + timedelta(seconds=margin_seconds) < self.expires_at


@dataclass(frozen=True)
class MarketplaceOrder:
    """A split-payment order created with the processor, not yet captured."""

    gateway_order_id: str
    gross_amount: Decimal
    platform_fee: Decimal
    seller_net_amount: Decimal
    currency: str
    seller_merchant_id: str
    status: str = "CREATED"
    approve_url: str | None = None


@dataclass(frozen=True)
class CaptureResult:
    gateway_order_id: str
    status: str
    capture_id: str | None = None


def split_amount(gross_amount, fee_rate) -> tuple[Decimal, Decimal]:
    """Split ``gross_amount`` into (platform fee, seller net).

    The fee is rounded half-up to the cent and the seller gets the exact
    remainder, so fee + net always equals the gross amount.
    """
    gross_minor = to_minor(gross_amount)
    fee_minor = int((Decimal(gross_minor) * Decimal(str(fee_rate))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return from_minor(fee_minor), from_minor(gross_minor - fee_minor)


class MarketplaceGateway(ABC):
    """Abstract marketplace payment gateway interface."""

    @abstractmethod
    async def get_access_token(self) -> AccessToken:
        """Obtain an API token with the platform's client credentials."""
        ...

    @abstractmethod
    async def onboard_seller(self, seller_id: str, email: str, business_name: str) -> str:
        """Create a partner referral and return the URL the seller must visit."""
        ...

    @abstractmethod
    async def create_split_order(self, gross_amount, seller_id: str, seller_merchant_id: str) -> MarketplaceOrder:
        """Create an order paying the seller, minus the platform fee."""
        ...

    @abstractmethod
    async def capture_order(self, gateway_order_id: str) -> CaptureResult:
        """Capture a buyer-approved order, moving the funds."""
        ...
