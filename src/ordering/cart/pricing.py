"""Order totals: subtotal, shipping, voucher discount and grand total for a cart selection.

Pure and deterministic. All arithmetic is on integer minor units; the Decimal
properties on ``OrderTotals`` exist for callers that render or transmit them.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from ordering.cart.cart import CartLine, LineKey
from ordering.cart.vouchers import Voucher
from shared.money import from_minor, to_minor

DEFAULT_SHIPPING_FEE = Decimal("6.00")


@dataclass(frozen=True)
class OrderTotals:
    subtotal_minor: int = 0
    shipping_fee_minor: int = 0
    discount_minor: int = 0
    grand_total_minor: int = 0
    voucher_code: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return from_minor(self.subtotal_minor)

    @property
    def shipping_fee(self) -> Decimal:
        return from_minor(self.shipping_fee_minor)

    @property
    def discount(self) -> Decimal:
        return from_minor(self.discount_minor)

    @property
    def grand_total(self) -> Decimal:
        return from_minor(self.grand_total_minor)

    @property
    def voucher_applied(self) -> bool:
        return self.voucher_code is not None


def subtotal_minor(lines: Iterable[CartLine], selected: set[LineKey]) -> int:
    return sum(line.line_total_minor for line in lines if line.key in selected)


def compute_totals(
    lines: Iterable[CartLine],
    selected: set[LineKey],
    voucher: Voucher | None = None,
    shipping_fee: Decimal = DEFAULT_SHIPPING_FEE,
    now: datetime | None = None,
) -> OrderTotals:
    """Compute the totals for the selected cart lines.

    An empty selection yields all-zero totals (no shipping is charged for
    nothing). A voucher that is not applicable is ignored, never raised on;
    callers surface ``Voucher.inapplicability_reason`` to the buyer first.
    """
    lines = list(lines)
    subtotal = subtotal_minor(lines, selected)
    if not any(line.key in selected for line in lines):
        return OrderTotals()

    shipping = to_minor(shipping_fee)
    discount = 0
    voucher_code = None
    if voucher is not None and voucher.is_applicable(from_minor(subtotal), now or datetime.now(UTC)):
        discount = voucher.discount_minor(subtotal, shipping)
        voucher_code = voucher.code

    grand_total = max(0, subtotal + shipping - discount)
    return OrderTotals(
        subtotal_minor=subtotal,
        shipping_fee_minor=shipping,
        discount_minor=discount,
        grand_total_minor=grand_total,
        voucher_code=voucher_code,
    )
