"""Configurable fake marketplace gateway for development and testing.

This adapter simulates the payment processor without any external calls.
Each operation can be configured at runtime to raise a gateway error,
making it useful for:
- Automated tests of every checkout failure path
- Development without real processor credentials

Calls are recorded in order in ``calls`` so tests can assert sequencing.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from payments.gateway.port import AccessToken, CaptureResult, MarketplaceGateway, MarketplaceOrder, split_amount
from shared.exceptions import GatewayOrderError
from shared.money import round2, to_minor


class FakeMarketplaceGateway(MarketplaceGateway):
    """Configurable fake marketplace gateway."""

    def __init__(self, fee_rate: Decimal = Decimal("0.10"), currency: str = "USD") -> None:
        self.fee_rate = fee_rate
        self.currency = currency
        self.calls: list[dict] = []
        self.failures: dict[str, Exception] = {}
        self.orders: dict[str, MarketplaceOrder] = {}
        self.captured: set[str] = set()

    def configure(self, method: str, error: Exception | None) -> None:
        """Make ``method`` raise ``error``, or succeed again when ``error`` is None."""
        if error is None:
            self.failures.pop(method, None)
        else:
            self.failures[method] = error

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if method in self.failures:
            raise self.failures[method]

    async def get_access_token(self) -> AccessToken:
        self._record("get_access_token")
        return AccessToken(
            value=f"fake_token_{uuid4().hex[:12]}",
            expires_at=datetime.now(UTC) + timedelta(hours=8),
        )

    async def onboard_seller(self, seller_id: str, email: str, business_name: str) -> str:
        self._record("onboard_seller", seller_id=seller_id, email=email, business_name=business_name)
        return f"https://fake-gateway.test/onboarding/{seller_id}"

    async def create_split_order(self, gross_amount, seller_id: str, seller_merchant_id: str) -> MarketplaceOrder:
        self._record(
            "create_split_order",
            gross_amount=round2(gross_amount),
            seller_id=seller_id,
            seller_merchant_id=seller_merchant_id,
        )
        if to_minor(gross_amount) < 1:
            raise GatewayOrderError(f"Cannot create a payment for {round2(gross_amount)}")
        if not seller_merchant_id:
            raise GatewayOrderError("Seller has no merchant account")
        fee, net = split_amount(gross_amount, self.fee_rate)
        order = MarketplaceOrder(
            gateway_order_id=f"fake_order_{uuid4().hex[:12]}",
            gross_amount=round2(gross_amount),
            platform_fee=fee,
            seller_net_amount=net,
            currency=self.currency,
            seller_merchant_id=seller_merchant_id,
        )
        self.orders[order.gateway_order_id] = order
        return order

    async def capture_order(self, gateway_order_id: str) -> CaptureResult:
        self._record("capture_order", gateway_order_id=gateway_order_id)
        self.captured.add(gateway_order_id)
        return CaptureResult(
            gateway_order_id=gateway_order_id,
            status="COMPLETED",
            capture_id=f"fake_capture_{uuid4().hex[:12]}",
        )
