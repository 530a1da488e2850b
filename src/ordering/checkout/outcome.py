"""What a checkout attempt ended with."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ordering.cart.pricing import OrderTotals
from ordering.checkout.attempt import CheckoutState
from ordering.order.order import Order


class FailureKind(Enum):
    """Every way a checkout can fail, with the message shown to the buyer.

    ``retryable`` tells the UI whether to offer a "try again" action.
    """

    VALIDATION = ("validation", "Please check your order details and try again.", True)
    NO_PAYMENT_METHOD = ("no_payment_method", "No payment method is available for this seller.", False)
    PROFILE_UNAVAILABLE = (
        "profile_unavailable",
        "We could not load the seller's payment details. Please try again.",
        True,
    )
    GATEWAY_AUTH = ("gateway_auth", "We could not connect to the payment service. Please try again.", True)
    GATEWAY_TIMEOUT = ("gateway_timeout", "The payment service took too long to respond. Please try again.", True)
    GATEWAY_ORDER = ("gateway_order", "The payment could not be set up. You have not been charged.", True)
    AUTHORIZATION = ("authorization", "The payment was not authorized. You have not been charged.", True)
    USER_CANCELLED = ("user_cancelled", "Payment cancelled.", True)
    CAPTURE = (
        "capture",
        "Your payment was authorized but could not be completed. Any hold on your funds will be released.",
        True,
    )
    CAPTURE_UNKNOWN = (
        "capture_unknown",
        "We could not confirm whether your payment went through. "
        "Please contact support with your payment reference before paying again.",
        False,
    )
    ORDER_PERSIST = ("order_persist", "We could not place your order. Please try again.", True)
    ORDER_PERSIST_AFTER_CAPTURE = (
        "order_persist_after_capture",
        "Your payment went through but we could not record your order. "
        "Please contact support with your payment reference; do not pay again.",
        False,
    )

    def __init__(self, code: str, message: str, retryable: bool) -> None:
        self.code = code
        self.message = message
        self.retryable = retryable


@dataclass(frozen=True)
class CheckoutFailure:
    kind: FailureKind
    detail: str = ""
    gateway_order_id: str | None = None
    field_errors: dict[str, list[str]] | None = None

    @property
    def message(self) -> str:
        return self.kind.message

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


@dataclass(frozen=True)
class CheckoutResult:
    attempt_id: str
    state: CheckoutState
    history: tuple[CheckoutState, ...]
    totals: OrderTotals | None = None
    payment_method: str | None = None
    fell_back_to_cod: bool = False
    order: Order | None = None
    gateway_order_id: str | None = None
    charged_amount: Decimal | None = None
    failure: CheckoutFailure | None = None

    @property
    def committed(self) -> bool:
        return self.state is CheckoutState.COMMITTED

    @property
    def order_id(self) -> str | None:
        return self.order.id if self.order is not None else None

    @property
    def voucher_applied(self) -> bool:
        return self.totals is not None and self.totals.voucher_applied
