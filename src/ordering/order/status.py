"""Order status changes and presentation.

Sellers and admins move orders through their lifecycle; the checkout only
ever creates Pending orders. Presentation helpers accept any raw status
string, so an unexpected value from the backend renders as a neutral
"Unknown" badge instead of breaking a screen.
"""

from collections import defaultdict
from dataclasses import dataclass

import structlog

from ordering.backend.port import OrderService
from ordering.order.order import Actor, Order, OrderStatus, assert_can_transition
from shared.exceptions import InvalidOperationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatusBadge:
    status: OrderStatus
    label: str
    tone: str


_TONES = {
    OrderStatus.PENDING: "gray",
    OrderStatus.IN_PROGRESS: "orange",
    OrderStatus.COMPLETE: "blue",
    OrderStatus.DELIVERED: "green",
    OrderStatus.CANCELLED: "red",
    OrderStatus.UNKNOWN: "gray",
}


def status_badge(raw: str | None) -> StatusBadge:
    status = OrderStatus.decode(raw)
    label = status.value if status is not OrderStatus.UNKNOWN else "Unknown"
    return StatusBadge(status=status, label=label, tone=_TONES[status])


def group_by_status(orders) -> dict[OrderStatus, list[Order]]:
    """Bucket orders by decoded status, for seller and admin order lists."""
    groups: dict[OrderStatus, list[Order]] = defaultdict(list)
    for order in orders:
        groups[order.state].append(order)
        if order.state is OrderStatus.UNKNOWN:
            logger.warning("Order has unrecognised status", order_id=order.id, status=order.status)
    return dict(groups)


class OrderStatusService:
    """Validates and performs seller/admin status changes against the order service."""

    def __init__(self, order_service: OrderService) -> None:
        self.order_service = order_service

    async def change_status(self, order_id: str, target: OrderStatus, actor: Actor) -> Order:
        order = await self.order_service.get_order_detail(order_id)
        assert_can_transition(order.state, target, actor)

        updated = await self.order_service.update_order_status(order_id, target)
        logger.info(
            "Order status changed",
            order_id=order_id,
            previous=order.status,
            status=target.value,
            actor=actor.value,
        )
        return updated

    async def cancel(self, order_id: str, actor: Actor) -> Order:
        return await self.change_status(order_id, OrderStatus.CANCELLED, actor)

    async def orders_for_seller(self, seller_id: str) -> dict[OrderStatus, list[Order]]:
        return group_by_status(await self.order_service.list_orders_by_seller(seller_id))

    async def orders_in_status(self, status: OrderStatus) -> list[Order]:
        """Admin view of every order in one status."""
        if status is OrderStatus.UNKNOWN:
            raise InvalidOperationError("Cannot list orders with an unknown status")
        return await self.order_service.list_orders_by_status(status)
