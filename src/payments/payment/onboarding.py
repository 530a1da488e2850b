"""Seller onboarding with the marketplace payment processor."""

import structlog

from identity.users.port import UserService
from payments.gateway.port import MarketplaceGateway

logger = structlog.get_logger(__name__)


class SellerOnboarding:
    """Starts onboarding for sellers who cannot yet accept marketplace payments."""

    def __init__(self, user_service: UserService, gateway: MarketplaceGateway) -> None:
        self.user_service = user_service
        self.gateway = gateway

    async def start(self, seller_id: str) -> str | None:
        """Return the referral URL the seller must visit, or None if already onboarded.

        Raises ``ServiceError`` if the seller cannot be loaded and
        ``OnboardingError`` if the processor rejects the referral.
        """
        profile = await self.user_service.get_seller_payment_profile(seller_id)
        if profile.is_onboarded:
            logger.debug("Seller already onboarded", seller_id=seller_id)
            return None

        url = await self.gateway.onboard_seller(
            seller_id=profile.seller_id,
            email=profile.email,
            business_name=profile.business_name,
        )
        logger.info("Seller onboarding started", seller_id=seller_id)
        return url
