"""PayPal marketplace gateway adapter (REST, via httpx).

Talks to the PayPal Orders v2 and Partner Referrals v2 APIs as a platform
partner:

- ``POST /v1/oauth2/token``                 client-credentials token
- ``POST /v2/customer/partner-referrals``   seller onboarding link
- ``POST /v2/checkout/orders``              order paying the seller, with a platform fee
- ``POST /v2/checkout/orders/{id}/capture`` capture after buyer approval

Tokens are cached until shortly before they expire. Concurrent callers that
find the cache stale wait on one lock, so only one refresh is in flight.
Token fetches and captures may be retried on timeout (captures carry a
``PayPal-Request-Id`` so a retry is idempotent). Order creation is never
retried.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import httpx
import structlog

from payments.gateway.port import AccessToken, CaptureResult, MarketplaceGateway, MarketplaceOrder, split_amount
from shared.exceptions import (
    CaptureError,
    GatewayAuthError,
    GatewayError,
    GatewayOrderError,
    GatewayTimeout,
    OnboardingError,
)
from shared.money import round2, to_minor
from shared.settings import Settings

logger = structlog.get_logger(__name__)

DEFAULT_TOKEN_LIFETIME_SECONDS = 32400


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _link(body: dict, rel: str) -> str | None:
    for link in body.get("links") or []:
        if isinstance(link, dict) and link.get("rel") == rel and link.get("href"):
            return link["href"]
    return None


def _amount(value: Decimal, currency: str) -> dict:
    return {"currency_code": currency, "value": f"{value:.2f}"}


class PayPalMarketplaceGateway(MarketplaceGateway):
    """Production PayPal gateway adapter."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        fee_rate: Decimal = Decimal("0.10"),
        currency: str = "USD",
        partner_attribution_id: str | None = None,
        return_url: str = "snapbuy://paypal/onboarding-complete",
        token_refresh_margin_seconds: int = 60,
        token_retries: int = 1,
        capture_retries: int = 0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.client = client
        self.client_id = client_id
        self.client_secret = client_secret
        self.fee_rate = fee_rate
        self.currency = currency
        self.partner_attribution_id = partner_attribution_id
        self.return_url = return_url
        self.token_refresh_margin_seconds = token_refresh_margin_seconds
        self.token_retries = token_retries
        self.capture_retries = capture_retries
        self._clock = clock or (lambda: datetime.now(UTC))
        self._token: AccessToken | None = None
        self._token_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> "PayPalMarketplaceGateway":
        client = client or httpx.AsyncClient(
            base_url=settings.gateway_base_url,
            timeout=settings.gateway_timeout_seconds,
        )
        return cls(
            client=client,
            client_id=settings.gateway_client_id,
            client_secret=settings.gateway_client_secret.get_secret_value(),
            fee_rate=settings.platform_fee_rate,
            currency=settings.settlement_currency,
            partner_attribution_id=settings.gateway_partner_attribution_id,
            return_url=settings.onboarding_return_url,
            token_refresh_margin_seconds=settings.token_refresh_margin_seconds,
            token_retries=settings.token_retries,
            capture_retries=settings.capture_retries,
        )

    # -------------------------------------------------------------------
    # Access token
    # -------------------------------------------------------------------
    def _cached_token(self) -> AccessToken | None:
        token = self._token
        if token is not None and token.is_fresh(self.token_refresh_margin_seconds, now=self._clock()):
            return token
        return None

    def invalidate_token(self) -> None:
        self._token = None

    async def get_access_token(self) -> AccessToken:
        token = self._cached_token()
        if token is not None:
            return token

        async with self._token_lock:
            # Another caller may have refreshed while we waited for the lock
            token = self._cached_token()
            if token is not None:
                return token

            attempt = 0
            while True:
                try:
                    self._token = await self._fetch_token()
                    return self._token
                except GatewayTimeout:
                    if attempt >= self.token_retries:
                        raise
                    attempt += 1
                    logger.info("Retrying access token fetch after timeout", attempt=attempt)

    async def _fetch_token(self) -> AccessToken:
        try:
            response = await self.client.post(
                "/v1/oauth2/token",
                auth=(self.client_id, self.client_secret),
                data={"grant_type": "client_credentials"},
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as exc:
            raise GatewayTimeout("Timed out fetching access token") from exc
        except httpx.TransportError as exc:
            raise GatewayAuthError(f"Could not reach payment processor: {exc}") from exc

        body = _json_or_empty(response)
        if not response.is_success:
            logger.warning("Access token request rejected", status_code=response.status_code, error=body.get("error"))
            raise GatewayAuthError(
                body.get("error_description") or "Access token request rejected",
                status_code=response.status_code,
            )

        value = body.get("access_token")
        if not isinstance(value, str) or not value:
            raise GatewayAuthError("Access token response has no access_token", status_code=response.status_code)

        try:
            lifetime = int(body.get("expires_in", DEFAULT_TOKEN_LIFETIME_SECONDS))
        except (TypeError, ValueError) as exc:
            raise GatewayAuthError("Access token response has a malformed expires_in") from exc

        return AccessToken(value=value, expires_at=self._clock() + timedelta(seconds=lifetime))

    # -------------------------------------------------------------------
    # Authenticated calls
    # -------------------------------------------------------------------
    async def _post(
        self,
        path: str,
        payload: dict,
        error_cls: type[GatewayError],
        extra_headers: dict | None = None,
    ) -> httpx.Response:
        token = await self.get_access_token()
        headers = {
            "Authorization": f"Bearer {token.value}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.partner_attribution_id:
            headers["PayPal-Partner-Attribution-Id"] = self.partner_attribution_id
        headers.update(extra_headers or {})

        try:
            response = await self.client.post(path, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise GatewayTimeout(f"Timed out calling {path}") from exc
        except httpx.TransportError as exc:
            raise error_cls(f"Could not reach payment processor: {exc}") from exc

        if response.status_code == 401:
            # Token revoked or expired early; the next call fetches a new one
            self.invalidate_token()
        return response

    def _rejected(self, error_cls: type[GatewayError], response: httpx.Response, action: str) -> GatewayError:
        body = _json_or_empty(response)
        debug_id = body.get("debug_id")
        logger.warning(
            "Payment processor rejected request",
            action=action,
            status_code=response.status_code,
            name=body.get("name"),
            debug_id=debug_id,
        )
        message = body.get("message") or f"{action} failed"
        return error_cls(message, status_code=response.status_code, debug_id=debug_id)

    # -------------------------------------------------------------------
    # Seller onboarding
    # -------------------------------------------------------------------
    async def onboard_seller(self, seller_id: str, email: str, business_name: str) -> str:
        payload = {
            "tracking_id": seller_id,
            "email": email,
            "partner_config_override": {"return_url": self.return_url},
            "business_entity": {"names": [{"business_name": business_name, "type": "LEGAL_NAME"}]},
            "operations": [
                {
                    "operation": "API_INTEGRATION",
                    "api_integration_preference": {
                        "rest_api_integration": {
                            "integration_method": "PAYPAL",
                            "integration_type": "THIRD_PARTY",
                            "third_party_details": {"features": ["PAYMENT", "REFUND"]},
                        }
                    },
                }
            ],
            "products": ["EXPRESS_CHECKOUT"],
            "legal_consents": [{"type": "SHARE_DATA_CONSENT", "granted": True}],
        }
        response = await self._post("/v2/customer/partner-referrals", payload, OnboardingError)
        if not response.is_success:
            raise self._rejected(OnboardingError, response, "partner referral")

        action_url = _link(_json_or_empty(response), "action_url")
        if action_url is None:
            raise OnboardingError("Partner referral response has no action_url link", status_code=response.status_code)

        logger.info("Seller onboarding link created", seller_id=seller_id)
        return action_url

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    async def create_split_order(self, gross_amount, seller_id: str, seller_merchant_id: str) -> MarketplaceOrder:
        gross = round2(gross_amount)
        if to_minor(gross) < 1:
            raise GatewayOrderError(f"Cannot create a payment for {gross}")
        if not seller_merchant_id:
            raise GatewayOrderError("Seller has no merchant account")

        fee, net = split_amount(gross, self.fee_rate)
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": seller_id,
                    "amount": _amount(gross, self.currency),
                    "payee": {"merchant_id": seller_merchant_id},
                    "payment_instruction": {
                        "disbursement_mode": "INSTANT",
                        "platform_fees": [{"amount": _amount(fee, self.currency)}],
                    },
                }
            ],
        }
        response = await self._post("/v2/checkout/orders", payload, GatewayOrderError)
        if response.status_code != 201:
            raise self._rejected(GatewayOrderError, response, "order creation")

        body = _json_or_empty(response)
        gateway_order_id = body.get("id")
        if not gateway_order_id:
            raise GatewayOrderError("Order response has no id", status_code=response.status_code)

        logger.info(
            "Split payment order created",
            gateway_order_id=gateway_order_id,
            seller_id=seller_id,
            gross_amount=str(gross),
            platform_fee=str(fee),
        )
        return MarketplaceOrder(
            gateway_order_id=gateway_order_id,
            gross_amount=gross,
            platform_fee=fee,
            seller_net_amount=net,
            currency=self.currency,
            seller_merchant_id=seller_merchant_id,
            status=body.get("status", "CREATED"),
            approve_url=_link(body, "approve") or _link(body, "payer-action"),
        )

    async def capture_order(self, gateway_order_id: str) -> CaptureResult:
        attempt = 0
        while True:
            try:
                return await self._capture_once(gateway_order_id)
            except GatewayTimeout:
                if attempt >= self.capture_retries:
                    raise
                attempt += 1
                logger.info("Retrying capture after timeout", gateway_order_id=gateway_order_id, attempt=attempt)

    async def _capture_once(self, gateway_order_id: str) -> CaptureResult:
        response = await self._post(
            f"/v2/checkout/orders/{gateway_order_id}/capture",
            {},
            CaptureError,
            extra_headers={"PayPal-Request-Id": f"capture-{gateway_order_id}"},
        )
        # 201 on first capture, 200 when PayPal replays an idempotent request
        if response.status_code not in (200, 201):
            raise self._rejected(CaptureError, response, "capture")

        body = _json_or_empty(response)
        status = body.get("status")
        if status != "COMPLETED":
            raise CaptureError(f"Capture finished with status {status!r}", status_code=response.status_code)

        capture_id = None
        for unit in body.get("purchase_units") or []:
            captures = (unit.get("payments") or {}).get("captures") or []
            if captures:
                capture_id = captures[0].get("id")
                break

        logger.info("Payment captured", gateway_order_id=gateway_order_id, capture_id=capture_id)
        return CaptureResult(gateway_order_id=gateway_order_id, status=status, capture_id=capture_id)
