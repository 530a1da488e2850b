"""Tests for the concurrent buyer + seller profile prefetch."""

import pytest
from identity.users.fake_adapter import FakeUserService
from identity.users.prefetch import prefetch_parties
from shared.exceptions import ObjectNotFoundError, ServiceTimeout


class TestPrefetchParties:
    async def test_both_profiles(self, buyer_profile, seller_onboarded):
        service = FakeUserService([buyer_profile, seller_onboarded])

        parties = await prefetch_parties(service, "buyer-1", "seller-1")

        assert parties.buyer.name == "Ada Buyer"
        assert parties.seller_payment_profile.is_onboarded

    async def test_first_error_wins(self, buyer_profile, seller_onboarded):
        service = FakeUserService([buyer_profile, seller_onboarded])
        service.fail_user("seller-1", ServiceTimeout("user timed out", service="user"))

        with pytest.raises(ServiceTimeout):
            await prefetch_parties(service, "buyer-1", "seller-1")

    async def test_missing_buyer(self, seller_onboarded):
        with pytest.raises(ObjectNotFoundError):
            await prefetch_parties(FakeUserService([seller_onboarded]), "buyer-1", "seller-1")


class TestLastViewedProduct:
    async def test_fake_remembers_product(self, buyer_profile):
        service = FakeUserService([buyer_profile])

        await service.update_last_viewed_product("buyer-1", 77)

        assert (await service.get_user("buyer-1")).last_product_id == 77
