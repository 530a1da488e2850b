"""Building the order-creation request from a checkout selection."""

from ordering.cart.cart import CartLine
from ordering.cart.pricing import OrderTotals
from ordering.order.order import (
    UNASSIGNED_ITEM_ID,
    UNASSIGNED_ORDER_ID,
    Order,
    OrderItem,
    OrderStatus,
)
from shared.exceptions import ValidationError


def build_order_item(line: CartLine) -> OrderItem:
    return OrderItem(
        id=UNASSIGNED_ITEM_ID,
        order_id=UNASSIGNED_ORDER_ID,
        product_id=line.product_id,
        product_name=line.product_name,
        product_image_url=line.product_image_url,
        product_note=line.product_note,
        product_variant_id=line.variant_id,
        quantity=line.quantity,
        unit_price=line.unit_price,
        is_reviewed=False,
    )


def build_order(
    buyer_id: str,
    lines: list[CartLine],
    totals: OrderTotals,
    shipping_address: str,
    phone_number: str,
) -> Order:
    """Create an unpersisted, Pending order for one seller's selected lines.

    The id fields carry the order service's placeholders; the service assigns
    real ids when it accepts the order.
    """
    if not lines:
        raise ValidationError({"lines": ["An order needs at least one item"]})

    seller_ids = {line.seller_id for line in lines}
    if len(seller_ids) != 1:
        raise ValidationError({"lines": ["An order can only contain items from one seller"]})

    return Order(
        id=UNASSIGNED_ORDER_ID,
        buyer_id=buyer_id,
        seller_id=seller_ids.pop(),
        total_amount=totals.grand_total,
        shipping_address=shipping_address.strip(),
        phone_number=phone_number.strip(),
        order_items=[build_order_item(line) for line in lines],
        status=OrderStatus.PENDING.value,
    )
