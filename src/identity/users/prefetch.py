"""Concurrent buyer + seller profile prefetch for the payment screen.

Both profiles are only needed for display (names, avatars, the seller's
onboarding state), so they are fetched together and the first failure wins.
"""

import asyncio
from dataclasses import dataclass

from identity.users.port import SellerPaymentProfile, UserProfile, UserService


@dataclass(frozen=True)
class CheckoutParties:
    buyer: UserProfile
    seller: UserProfile

    @property
    def seller_payment_profile(self) -> SellerPaymentProfile:
        return SellerPaymentProfile.from_user(self.seller)


async def prefetch_parties(user_service: UserService, buyer_id: str, seller_id: str) -> CheckoutParties:
    buyer, seller = await asyncio.gather(
        user_service.get_user(buyer_id),
        user_service.get_user(seller_id),
    )
    return CheckoutParties(buyer=buyer, seller=seller)
