"""Tests for runtime settings."""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaError
from shared.settings import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.shipping_fee == Decimal("6.00")
        assert settings.platform_fee_rate == Decimal("0.10")
        assert settings.capture_retries == 0

    def test_from_env(self):
        settings = Settings.from_env(
            {
                "SNAPBUY_SHIPPING_FEE": "4.50",
                "SNAPBUY_GATEWAY_CLIENT_SECRET": "shh",
                "SNAPBUY_CAPTURE_RETRIES": "2",
                "UNRELATED": "x",
            }
        )

        assert settings.shipping_fee == Decimal("4.50")
        assert settings.capture_retries == 2
        assert settings.gateway_client_secret.get_secret_value() == "shh"
        assert "shh" not in repr(settings)

    def test_fee_rate_bounds(self):
        with pytest.raises(SchemaError):
            Settings(platform_fee_rate=Decimal("1.5"))

    def test_frozen(self):
        with pytest.raises(SchemaError):
            Settings().shipping_fee = Decimal("1")
