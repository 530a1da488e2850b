"""Checkout coordinator: turns a buyer's selected cart lines into a paid, persisted order.

Cash on delivery:
    validate -> create order -> clear cart

Marketplace split payment:
    validate -> load seller payment profile -> create split order
             -> buyer approval -> capture -> create order -> clear cart

A marketplace checkout whose voucher covers the whole total has nothing to
charge and goes straight to order creation.

Each step runs only after the previous one succeeded, so capture never
happens without a split order and an order is never created for a payment
that was not captured. Remote failures are not raised to the caller; they end
the attempt as ``CheckoutResult(failure=...)``. The one exception is a second
checkout for a buyer whose first attempt is still running, which raises
``CheckoutInProgressError``.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from identity.shared.phone import validate_phone_number
from identity.users.port import SellerPaymentProfile, UserService
from ordering.backend.port import OrderService, VoucherService
from ordering.cart.cart import Cart, CartLine
from ordering.cart.pricing import OrderTotals, compute_totals
from ordering.cart.vouchers import Voucher
from ordering.checkout.attempt import CheckoutAttempt, CheckoutState
from ordering.checkout.outcome import CheckoutFailure, CheckoutResult, FailureKind
from ordering.order.creation import build_order
from ordering.order.order import Order
from payments.gateway.currency import FixedRateConverter
from payments.gateway.port import MarketplaceGateway, MarketplaceOrder
from payments.payment.authorization import ApprovalOutcome, PaymentApprover
from payments.payment.eligibility import (
    DEFAULT_PAYMENT_METHODS,
    PaymentMethod,
    find_method,
    resolve_eligible_payment_methods,
)
from shared.exceptions import (
    CheckoutInProgressError,
    GatewayAuthError,
    GatewayError,
    GatewayTimeout,
    ServiceError,
    ValidationError,
)
from shared.settings import Settings

logger = structlog.get_logger(__name__)


@dataclass
class CheckoutRequest:
    cart: Cart
    shipping_address: str
    phone_number: str
    payment_method_code: str = "COD"
    voucher: Voucher | None = None


class _CheckoutFailed(Exception):
    """Internal signal: the attempt ended with ``failure``."""

    def __init__(self, failure: CheckoutFailure) -> None:
        self.failure = failure
        super().__init__(failure.kind.code)


class CheckoutCoordinator:
    def __init__(
        self,
        order_service: OrderService,
        user_service: UserService,
        gateway: MarketplaceGateway,
        approver: PaymentApprover,
        voucher_service: VoucherService | None = None,
        methods: Iterable[PaymentMethod] = DEFAULT_PAYMENT_METHODS,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.order_service = order_service
        self.user_service = user_service
        self.gateway = gateway
        self.approver = approver
        self.voucher_service = voucher_service
        self.methods = list(methods)
        self.settings = settings or Settings()
        self.converter = FixedRateConverter.from_settings(self.settings)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._in_flight: set[str] = set()

    def is_in_flight(self, buyer_id: str) -> bool:
        return buyer_id in self._in_flight

    async def checkout(self, request: CheckoutRequest) -> CheckoutResult:
        """Run one checkout attempt to a terminal state.

        Raises ``CheckoutInProgressError`` if this buyer already has an attempt
        running; the running attempt is unaffected.
        """
        buyer_id = request.cart.buyer_id
        if buyer_id in self._in_flight:
            logger.warning("Rejected duplicate checkout", buyer_id=buyer_id)
            raise CheckoutInProgressError(f"A checkout is already in progress for buyer {buyer_id}")

        self._in_flight.add(buyer_id)
        try:
            attempt = CheckoutAttempt(buyer_id)
            with structlog.contextvars.bound_contextvars(checkout_attempt_id=attempt.attempt_id):
                return await self._run(attempt, request)
        finally:
            self._in_flight.discard(buyer_id)

    # -------------------------------------------------------------------
    # Attempt
    # -------------------------------------------------------------------
    async def _run(self, attempt: CheckoutAttempt, request: CheckoutRequest) -> CheckoutResult:
        progress: dict = {}
        try:
            attempt.advance(CheckoutState.VALIDATING)
            lines, method = self._validate(request)
            totals = compute_totals(
                lines,
                {line.key for line in lines},
                voucher=request.voucher,
                shipping_fee=self.settings.shipping_fee,
                now=self._clock(),
            )
            progress["totals"] = totals
            if request.voucher is not None and not totals.voucher_applied:
                logger.info("Voucher not applicable, ignored", voucher_code=request.voucher.code)

            seller_id = lines[0].seller_id
            needs_payment = not method.is_cod and totals.grand_total_minor > 0
            if not method.is_cod and not needs_payment:
                logger.info(
                    "Nothing to charge, skipping payment",
                    payment_method=method.code,
                    voucher_code=totals.voucher_code,
                )
            if needs_payment:
                method = await self._resolve_marketplace_method(attempt, method, seller_id, progress)

            progress["payment_method"] = method.code

            if needs_payment and not method.is_cod:
                await self._collect_payment(attempt, seller_id, totals, progress)
            attempt.advance(CheckoutState.SUBMITTING)

            order = await self._submit(request, lines, totals, progress)
            attempt.advance(CheckoutState.COMMITTED)
        except _CheckoutFailed as exc:
            return self._fail(attempt, exc.failure, progress)

        logger.info(
            "Checkout committed",
            buyer_id=attempt.buyer_id,
            order_id=order.id,
            payment_method=method.code,
            total_amount=str(totals.grand_total),
        )
        request.cart.remove_lines([line.key for line in lines])
        await self._record_voucher_usage(totals, attempt.buyer_id, order.id)

        return CheckoutResult(
            attempt_id=attempt.attempt_id,
            state=attempt.state,
            history=tuple(attempt.history),
            totals=totals,
            payment_method=method.code,
            fell_back_to_cod=progress.get("fell_back_to_cod", False),
            order=order,
            gateway_order_id=progress.get("gateway_order_id"),
            charged_amount=progress.get("charged_amount"),
        )

    def _fail(self, attempt: CheckoutAttempt, failure: CheckoutFailure, progress: dict) -> CheckoutResult:
        attempt.advance(CheckoutState.FAILED)
        if failure.kind is FailureKind.USER_CANCELLED:
            logger.info("Checkout cancelled by buyer", buyer_id=attempt.buyer_id)
        elif failure.kind is not FailureKind.ORDER_PERSIST_AFTER_CAPTURE:
            # Post-capture failures are logged at error level where they happen
            log = logger.error if failure.kind is FailureKind.CAPTURE_UNKNOWN else logger.warning
            log(
                "Checkout failed",
                buyer_id=attempt.buyer_id,
                failure_kind=failure.kind.code,
                detail=failure.detail,
                gateway_order_id=failure.gateway_order_id,
            )
        return CheckoutResult(
            attempt_id=attempt.attempt_id,
            state=attempt.state,
            history=tuple(attempt.history),
            totals=progress.get("totals"),
            payment_method=progress.get("payment_method"),
            fell_back_to_cod=progress.get("fell_back_to_cod", False),
            gateway_order_id=progress.get("gateway_order_id"),
            charged_amount=progress.get("charged_amount") if progress.get("captured") else None,
            failure=failure,
        )

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _validate(self, request: CheckoutRequest) -> tuple[list[CartLine], PaymentMethod]:
        """Check everything that can be checked without a remote call."""
        errors: dict[str, list[str]] = {}

        if not (request.shipping_address or "").strip():
            errors["shipping_address"] = ["Shipping address is required"]

        try:
            validate_phone_number(request.phone_number)
        except ValidationError as exc:
            errors.update(exc.messages)

        lines = request.cart.selected_lines()
        if not lines:
            errors["lines"] = ["Select at least one item to check out"]
        else:
            over_stock = [line for line in lines if line.exceeds_stock()]
            if over_stock:
                errors["quantity"] = [
                    f"Only {line.available_stock} left of {line.product_name or line.product_id}" for line in over_stock
                ]
            if len({line.seller_id for line in lines}) > 1:
                errors.setdefault("lines", []).append("An order can only contain items from one seller")

        method = find_method(self.methods, request.payment_method_code)
        if method is None:
            errors["payment_method"] = [f"Unknown payment method {request.payment_method_code!r}"]

        if errors:
            raise _CheckoutFailed(
                CheckoutFailure(
                    kind=FailureKind.VALIDATION,
                    detail=ValidationError(errors).first_message(),
                    field_errors=errors,
                )
            )
        return lines, method

    async def _resolve_marketplace_method(
        self,
        attempt: CheckoutAttempt,
        method: PaymentMethod,
        seller_id: str,
        progress: dict,
    ) -> PaymentMethod:
        """Keep the marketplace method if the seller can take it, else fall back to COD."""
        attempt.advance(CheckoutState.AWAITING_SELLER_PROFILE)
        profile: SellerPaymentProfile | None = None
        try:
            profile = await self.user_service.get_seller_payment_profile(seller_id)
        except ServiceError as exc:
            logger.warning("Seller payment profile unavailable", seller_id=seller_id, error=str(exc))

        eligible = resolve_eligible_payment_methods(profile, self.methods)
        if profile is not None and profile.is_onboarded and method in eligible:
            progress["seller_profile"] = profile
            return method

        cod = next((m for m in eligible if m.is_cod), None)
        if cod is None:
            kind = FailureKind.PROFILE_UNAVAILABLE if profile is None else FailureKind.NO_PAYMENT_METHOD
            raise _CheckoutFailed(CheckoutFailure(kind=kind, detail=f"Seller {seller_id} cannot accept {method.code}"))

        logger.info("Falling back to cash on delivery", seller_id=seller_id, requested_method=method.code)
        progress["fell_back_to_cod"] = True
        return cod

    async def _collect_payment(
        self,
        attempt: CheckoutAttempt,
        seller_id: str,
        totals: OrderTotals,
        progress: dict,
    ) -> None:
        profile: SellerPaymentProfile = progress["seller_profile"]
        attempt.advance(CheckoutState.AWAITING_PAYMENT_AUTHORIZATION)
        amount = self.converter.convert(totals.grand_total)

        try:
            marketplace_order = await self.gateway.create_split_order(
                gross_amount=amount,
                seller_id=seller_id,
                seller_merchant_id=profile.marketplace_merchant_id,
            )
        except GatewayError as exc:
            raise _CheckoutFailed(CheckoutFailure(kind=_gateway_failure_kind(exc), detail=exc.message)) from exc

        progress["gateway_order_id"] = marketplace_order.gateway_order_id
        progress["charged_amount"] = marketplace_order.gross_amount
        await self._authorize(marketplace_order)

        attempt.advance(CheckoutState.CAPTURING)
        try:
            await self.gateway.capture_order(marketplace_order.gateway_order_id)
        except GatewayError as exc:
            # After a timeout the processor may or may not have moved the funds
            kind = FailureKind.CAPTURE_UNKNOWN if isinstance(exc, GatewayTimeout) else FailureKind.CAPTURE
            raise _CheckoutFailed(
                CheckoutFailure(
                    kind=kind,
                    detail=exc.message,
                    gateway_order_id=marketplace_order.gateway_order_id,
                )
            ) from exc
        progress["captured"] = True

    async def _authorize(self, marketplace_order: MarketplaceOrder) -> None:
        gateway_order_id = marketplace_order.gateway_order_id
        try:
            outcome = await self.approver.request_approval(marketplace_order)
        except GatewayTimeout as exc:
            raise _CheckoutFailed(
                CheckoutFailure(kind=FailureKind.GATEWAY_TIMEOUT, detail=exc.message, gateway_order_id=gateway_order_id)
            ) from exc
        except GatewayError as exc:
            raise _CheckoutFailed(
                CheckoutFailure(kind=FailureKind.AUTHORIZATION, detail=exc.message, gateway_order_id=gateway_order_id)
            ) from exc

        if outcome is ApprovalOutcome.CANCELLED:
            raise _CheckoutFailed(CheckoutFailure(kind=FailureKind.USER_CANCELLED, gateway_order_id=gateway_order_id))

    async def _submit(
        self,
        request: CheckoutRequest,
        lines: list[CartLine],
        totals: OrderTotals,
        progress: dict,
    ) -> Order:
        order = build_order(
            buyer_id=request.cart.buyer_id,
            lines=lines,
            totals=totals,
            shipping_address=request.shipping_address,
            phone_number=request.phone_number,
        )
        try:
            return await self.order_service.create_order(order)
        except Exception as exc:
            detail = exc.message if isinstance(exc, ServiceError) else f"{type(exc).__name__}: {exc}"
            if not progress.get("captured"):
                if isinstance(exc, ServiceError):
                    raise _CheckoutFailed(CheckoutFailure(kind=FailureKind.ORDER_PERSIST, detail=detail)) from exc
                raise

            # Funds are captured, so every failure here needs manual reconciliation
            logger.error(
                "Order not recorded after payment capture",
                gateway_order_id=progress["gateway_order_id"],
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
                amount=str(progress["charged_amount"]),
                currency=self.converter.target_currency,
                error=detail,
                exc_info=not isinstance(exc, ServiceError),
            )
            raise _CheckoutFailed(
                CheckoutFailure(
                    kind=FailureKind.ORDER_PERSIST_AFTER_CAPTURE,
                    detail=detail,
                    gateway_order_id=progress["gateway_order_id"],
                )
            ) from exc

    async def _record_voucher_usage(self, totals: OrderTotals, buyer_id: str, order_id: str) -> None:
        if self.voucher_service is None or not totals.voucher_applied:
            return
        try:
            await self.voucher_service.record_usage(totals.voucher_code, buyer_id, order_id)
        except ServiceError as exc:
            logger.warning(
                "Voucher usage not recorded",
                voucher_code=totals.voucher_code,
                buyer_id=buyer_id,
                order_id=order_id,
                error=exc.message,
            )


def _gateway_failure_kind(exc: GatewayError) -> FailureKind:
    if isinstance(exc, GatewayTimeout):
        return FailureKind.GATEWAY_TIMEOUT
    if isinstance(exc, GatewayAuthError):
        return FailureKind.GATEWAY_AUTH
    return FailureKind.GATEWAY_ORDER

