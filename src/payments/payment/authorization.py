"""Buyer approval of a marketplace payment.

Between creating a split order and capturing it, the buyer approves the
payment in the processor's own UI (web checkout or the native SDK sheet).
That step lives outside this core; ``PaymentApprover`` is its boundary.

Cancellation is a normal answer, returned as ``ApprovalOutcome.CANCELLED``.
Anything else that goes wrong is raised: ``GatewayTimeout`` when the step
timed out, ``PaymentAuthorizationError`` otherwise.
"""

from abc import ABC, abstractmethod
from enum import Enum

from payments.gateway.port import MarketplaceOrder


class ApprovalOutcome(Enum):
    APPROVED = "approved"
    CANCELLED = "cancelled"


class PaymentApprover(ABC):
    @abstractmethod
    async def request_approval(self, order: MarketplaceOrder) -> ApprovalOutcome:
        """Present ``order`` to the buyer and wait for their decision."""
        ...


class FakePaymentApprover(PaymentApprover):
    """Answers every approval request with a fixed outcome, or raises."""

    def __init__(self, outcome: ApprovalOutcome = ApprovalOutcome.APPROVED, error: Exception | None = None) -> None:
        self.outcome = outcome
        self.error = error
        self.requests: list[MarketplaceOrder] = []

    async def request_approval(self, order: MarketplaceOrder) -> ApprovalOutcome:
        self.requests.append(order)
        if self.error is not None:
            raise self.error
        return self.outcome
