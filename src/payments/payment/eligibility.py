"""Payment methods and which of them a given order may use.

Cash on delivery is always available. Marketplace (split) payments need the
seller to have finished onboarding with the payment processor; until then the
processor has nowhere to send the seller's share.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from identity.users.port import SellerPaymentProfile


class SettlementKind(Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    MARKETPLACE = "marketplace"


class PaymentMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    subtitle: str = ""
    settlement: SettlementKind = SettlementKind.MARKETPLACE

    @property
    def is_cod(self) -> bool:
        return self.settlement is SettlementKind.CASH_ON_DELIVERY


COD = PaymentMethod(
    code="COD",
    name="COD",
    subtitle="Cash on Delivery",
    settlement=SettlementKind.CASH_ON_DELIVERY,
)
PAYPAL = PaymentMethod(
    code="PAYPAL",
    name="PayPal",
    subtitle="Pay with your PayPal account",
    settlement=SettlementKind.MARKETPLACE,
)

DEFAULT_PAYMENT_METHODS = (COD, PAYPAL)


def resolve_eligible_payment_methods(
    seller_profile: SellerPaymentProfile | None,
    all_methods,
) -> list[PaymentMethod]:
    """Filter ``all_methods`` down to those the seller can accept.

    An onboarded seller accepts every configured method. Otherwise only cash
    on delivery is offered; if COD is not configured at all the result is
    empty and the caller reports that no payment method is available.
    """
    all_methods = list(all_methods)
    if seller_profile is not None and seller_profile.is_onboarded:
        return all_methods
    return [method for method in all_methods if method.is_cod]


def find_method(methods, code: str) -> PaymentMethod | None:
    return next((m for m in methods if m.code == code), None)
