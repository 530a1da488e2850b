"""Marketplace payment gateway.

Adapters are injected where they are used:
- FakeMarketplaceGateway for development and testing
- PayPalMarketplaceGateway for production
"""

from payments.gateway.fake_adapter import FakeMarketplaceGateway
from payments.gateway.paypal_adapter import PayPalMarketplaceGateway
from payments.gateway.port import AccessToken, CaptureResult, MarketplaceGateway, MarketplaceOrder, split_amount

__all__ = [
    "AccessToken",
    "CaptureResult",
    "FakeMarketplaceGateway",
    "MarketplaceGateway",
    "MarketplaceOrder",
    "PayPalMarketplaceGateway",
    "split_amount",
]
