"""Runtime configuration for the checkout core.

Defaults are suitable for local development against the fake adapters.
``Settings.from_env()`` overlays ``SNAPBUY_*`` environment variables.
"""

import os
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, SecretStr

_ENV_PREFIX = "SNAPBUY_"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Pricing
    shipping_fee: Decimal = Field(default=Decimal("6.00"), ge=0)
    platform_fee_rate: Decimal = Field(default=Decimal("0.10"), ge=0, lt=1)

    # Currency. The conversion is a fixed-rate placeholder, not an exchange-rate engine.
    cart_currency: str = "USD"
    settlement_currency: str = "USD"
    conversion_rate: Decimal = Field(default=Decimal("1"), gt=0)

    # Backend services
    api_base_url: str = "http://localhost"
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Marketplace payment processor
    gateway_base_url: str = "https://api-m.sandbox.paypal.com"
    gateway_client_id: str = "SANDBOX_CLIENT_ID"
    gateway_client_secret: SecretStr = SecretStr("")
    gateway_partner_attribution_id: str | None = None
    gateway_timeout_seconds: float = Field(default=15.0, gt=0)
    token_refresh_margin_seconds: int = Field(default=60, ge=0)
    token_retries: int = Field(default=1, ge=0)
    capture_retries: int = Field(default=0, ge=0)
    onboarding_return_url: str = "snapbuy://paypal/onboarding-complete"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from ``SNAPBUY_<FIELD>`` environment variables."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for name in cls.model_fields:
            key = f"{_ENV_PREFIX}{name.upper()}"
            if key in environ:
                overrides[name] = environ[key]
        return cls(**overrides)
