"""User service port and the user records the checkout reads.

A seller is "onboarded" for marketplace payments once the payment processor
has issued them a merchant id. Buyers and sellers share the same user record.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from shared.schemas import WireModel


class UserProfile(WireModel):
    id: str
    name: str = ""
    user_name: str = ""
    email: str = ""
    image_url: str = Field(default="", alias="imageURL")
    last_product_id: int | None = None
    paypal_merchant_id: str | None = None


class SellerPaymentProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    seller_id: str
    marketplace_merchant_id: str | None = None
    email: str = ""
    business_name: str = ""

    @property
    def is_onboarded(self) -> bool:
        return bool(self.marketplace_merchant_id and self.marketplace_merchant_id.strip())

    @classmethod
    def from_user(cls, user: UserProfile) -> "SellerPaymentProfile":
        return cls(
            seller_id=user.id,
            marketplace_merchant_id=user.paypal_merchant_id,
            email=user.email,
            business_name=user.name or user.user_name,
        )


class UserService(ABC):
    @abstractmethod
    async def get_user(self, user_id: str) -> UserProfile:
        """Fetch a user's profile."""
        ...

    async def get_seller_payment_profile(self, seller_id: str) -> SellerPaymentProfile:
        """Fetch the payment-related part of a seller's profile."""
        return SellerPaymentProfile.from_user(await self.get_user(seller_id))

    @abstractmethod
    async def update_last_viewed_product(self, user_id: str, product_id: int) -> None:
        """Remember the last product a buyer looked at (drives recommendations)."""
        ...
