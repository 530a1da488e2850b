"""Tests for starting seller onboarding with the payment processor."""

import pytest
from identity.users.fake_adapter import FakeUserService
from payments.gateway import FakeMarketplaceGateway
from payments.payment.onboarding import SellerOnboarding
from shared.exceptions import ObjectNotFoundError, OnboardingError


class TestSellerOnboarding:
    async def test_returns_referral_url(self, seller_not_onboarded):
        gateway = FakeMarketplaceGateway()
        onboarding = SellerOnboarding(FakeUserService([seller_not_onboarded]), gateway)

        url = await onboarding.start("seller-1")

        assert url == "https://fake-gateway.test/onboarding/seller-1"
        assert gateway.calls_to("onboard_seller")[0] == {
            "method": "onboard_seller",
            "seller_id": "seller-1",
            "email": "sales@toteco.test",
            "business_name": "Tote Co",
        }

    async def test_already_onboarded(self, seller_onboarded):
        gateway = FakeMarketplaceGateway()

        assert await SellerOnboarding(FakeUserService([seller_onboarded]), gateway).start("seller-1") is None
        assert gateway.calls == []

    async def test_gateway_rejection_propagates(self, seller_not_onboarded):
        gateway = FakeMarketplaceGateway()
        gateway.configure("onboard_seller", OnboardingError("INVALID_REQUEST"))

        with pytest.raises(OnboardingError):
            await SellerOnboarding(FakeUserService([seller_not_onboarded]), gateway).start("seller-1")

    async def test_unknown_seller(self):
        with pytest.raises(ObjectNotFoundError):
            await SellerOnboarding(FakeUserService(), FakeMarketplaceGateway()).start("ghost")
