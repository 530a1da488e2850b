"""Exception taxonomy shared by every SnapBuy bounded context.

Local validation failures carry a field -> messages mapping. Remote failures
are split by collaborator: backend services (orders, users, catalogue,
vouchers, reviews) raise ``ServiceError`` subclasses, the marketplace payment
processor raises ``GatewayError`` subclasses.
"""


class SnapBuyError(Exception):
    """Base class for all SnapBuy errors."""


class ValidationError(SnapBuyError):
    """Input failed local validation. No remote call has been made."""

    def __init__(self, messages: dict[str, list[str]]) -> None:
        self.messages = messages
        super().__init__(messages)

    def first_message(self) -> str:
        for field_messages in self.messages.values():
            if field_messages:
                return field_messages[0]
        return "Invalid input"


class InvalidOperationError(SnapBuyError):
    """The operation is not allowed in the current state or for this actor."""


class CheckoutInProgressError(InvalidOperationError):
    """A checkout is already running for this buyer."""


# ---------------------------------------------------------------------------
# Backend services
# ---------------------------------------------------------------------------
class ServiceError(SnapBuyError):
    """A backend service rejected the request or answered with an error envelope."""

    def __init__(self, message: str, code: int | None = None, service: str | None = None) -> None:
        self.message = message
        self.code = code
        self.service = service
        super().__init__(message)


class ObjectNotFoundError(ServiceError):
    """The requested record does not exist on the backend."""


class ServiceTimeout(ServiceError):
    """The backend did not answer within the configured timeout."""


class ServiceUnavailable(ServiceError):
    """The backend could not be reached at all."""


# ---------------------------------------------------------------------------
# Marketplace payment gateway
# ---------------------------------------------------------------------------
class GatewayError(SnapBuyError):
    """Base class for payment processor failures."""

    retryable = False

    def __init__(self, message: str, status_code: int | None = None, debug_id: str | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.debug_id = debug_id
        super().__init__(message)


class GatewayAuthError(GatewayError):
    """Client-credentials exchange failed or returned a malformed body."""


class GatewayTimeout(GatewayError):
    """The processor did not answer in time. Safe to retry from scratch."""

    retryable = True


class GatewayOrderError(GatewayError):
    """The processor refused to create the split-payment order."""


class CaptureError(GatewayError):
    """The processor refused to capture an approved order."""


class OnboardingError(GatewayError):
    """The processor rejected a seller partner-referral."""


class PaymentAuthorizationError(GatewayError):
    """The buyer-facing approval step failed (not a buyer cancellation)."""
