"""Vouchers: admin-managed discounts a buyer can apply at checkout.

A voucher is either a fixed amount off (``fix``) or a percentage of the
subtotal (``percentage``). It is applicable to an order only when it is
enabled, not expired, and the order subtotal reaches its minimum order value.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import Field, field_validator, model_validator

from shared.money import WireAmount, to_minor
from shared.schemas import WireModel


class VoucherKind(Enum):
    FIXED = "fix"
    PERCENTAGE = "percentage"


class InapplicableReason(Enum):
    DISABLED = "disabled"
    EXPIRED = "expired"
    BELOW_MINIMUM = "below_minimum"


class Voucher(WireModel):
    id: int
    code: str = Field(min_length=1)
    kind: VoucherKind = Field(alias="type")
    value: WireAmount
    min_order_value: WireAmount = Decimal("0")
    expiry_date: datetime
    is_disabled: bool = False
    created_at: datetime | None = None
    can_use: bool | None = None

    @field_validator("expiry_date", "created_at")
    @classmethod
    def _assume_utc(cls, value):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _value_in_range(self):
        if self.kind == VoucherKind.PERCENTAGE and not (0 < self.value <= 100):
            raise ValueError("Percentage vouchers must have 0 < value <= 100")
        if self.kind == VoucherKind.FIXED and self.value <= 0:
            raise ValueError("Fixed vouchers must have a positive value")
        if self.min_order_value < 0:
            raise ValueError("Minimum order value cannot be negative")
        return self

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return now > self.expiry_date

    def inapplicability_reason(self, subtotal, now: datetime | None = None) -> InapplicableReason | None:
        """Why this voucher cannot be applied to ``subtotal``, or None if it can."""
        if self.is_disabled:
            return InapplicableReason.DISABLED
        if self.is_expired(now):
            return InapplicableReason.EXPIRED
        if to_minor(subtotal) < to_minor(self.min_order_value):
            return InapplicableReason.BELOW_MINIMUM
        return None

    def is_applicable(self, subtotal, now: datetime | None = None) -> bool:
        return self.inapplicability_reason(subtotal, now) is None

    def discount_minor(self, subtotal_minor: int, shipping_minor: int) -> int:
        """Discount in minor units, clamped to [0, subtotal + shipping].

        Applicability is not checked here; see ``compute_totals``.
        """
        if self.kind == VoucherKind.PERCENTAGE:
            raw = (Decimal(subtotal_minor) * self.value / 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            discount = int(raw)
        else:
            discount = to_minor(self.value)
        return max(0, min(discount, subtotal_minor + shipping_minor))

    def describe(self) -> str:
        if self.kind == VoucherKind.PERCENTAGE:
            return f"{self.value.normalize():f}%"
        return f"${self.value:.2f}"


def usable_vouchers(vouchers, subtotal, now: datetime | None = None) -> list[Voucher]:
    """The vouchers from ``vouchers`` that can be applied to ``subtotal`` right now."""
    now = now or datetime.now(UTC)
    return [voucher for voucher in vouchers if voucher.is_applicable(subtotal, now)]


def find_voucher(vouchers, code: str) -> Voucher | None:
    """Look up a voucher by code, case-insensitively."""
    wanted = code.strip().upper()
    return next((v for v in vouchers if v.code.upper() == wanted), None)
