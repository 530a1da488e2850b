"""State of a single checkout attempt.

    IDLE -> VALIDATING -> SUBMITTING                                     (COD)
    IDLE -> VALIDATING -> AWAITING_SELLER_PROFILE
         -> AWAITING_PAYMENT_AUTHORIZATION -> CAPTURING -> SUBMITTING    (marketplace)
    SUBMITTING -> COMMITTED

Every non-terminal state may also move to FAILED. A seller without a
merchant account sends the attempt from AWAITING_SELLER_PROFILE straight to
SUBMITTING as cash on delivery.
"""

from enum import Enum
from uuid import uuid4

import structlog

from shared.exceptions import InvalidOperationError

logger = structlog.get_logger(__name__)


class CheckoutState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_SELLER_PROFILE = "awaiting_seller_profile"
    AWAITING_PAYMENT_AUTHORIZATION = "awaiting_payment_authorization"
    CAPTURING = "capturing"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    FAILED = "failed"


_TERMINAL_STATES = frozenset({CheckoutState.COMMITTED, CheckoutState.FAILED})

_VALID_TRANSITIONS = {
    CheckoutState.IDLE: {CheckoutState.VALIDATING},
    CheckoutState.VALIDATING: {
        CheckoutState.SUBMITTING,
        CheckoutState.AWAITING_SELLER_PROFILE,
        CheckoutState.FAILED,
    },
    CheckoutState.AWAITING_SELLER_PROFILE: {
        CheckoutState.AWAITING_PAYMENT_AUTHORIZATION,
        CheckoutState.SUBMITTING,  # Fallback to cash on delivery
        CheckoutState.FAILED,
    },
    CheckoutState.AWAITING_PAYMENT_AUTHORIZATION: {CheckoutState.CAPTURING, CheckoutState.FAILED},
    CheckoutState.CAPTURING: {CheckoutState.SUBMITTING, CheckoutState.FAILED},
    CheckoutState.SUBMITTING: {CheckoutState.COMMITTED, CheckoutState.FAILED},
    CheckoutState.COMMITTED: set(),
    CheckoutState.FAILED: set(),
}


class CheckoutAttempt:
    """Tracks where one checkout attempt is, and everywhere it has been."""

    def __init__(self, buyer_id: str, attempt_id: str | None = None) -> None:
        self.buyer_id = buyer_id
        self.attempt_id = attempt_id or uuid4().hex
        self.state = CheckoutState.IDLE
        self.history: list[CheckoutState] = [CheckoutState.IDLE]

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES

    def _assert_can_transition(self, target: CheckoutState) -> None:
        if target not in _VALID_TRANSITIONS[self.state]:
            raise InvalidOperationError(f"Checkout cannot move from {self.state.value} to {target.value}")

    def advance(self, target: CheckoutState) -> None:
        self._assert_can_transition(target)
        logger.debug(
            "Checkout state changed",
            attempt_id=self.attempt_id,
            buyer_id=self.buyer_id,
            from_state=self.state.value,
            to_state=target.value,
        )
        self.state = target
        self.history.append(target)
