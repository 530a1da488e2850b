"""Which of a buyer's purchased items still need a review.

The buyer's order list may carry summary item data, so every order that still
has an unreviewed item is re-fetched in full (concurrently) and the items are
filtered from the detailed copies.

By default the first failed detail fetch is raised. With ``on_error="skip"``
the backlog is built from the orders that did load and the failed order ids
are reported alongside, so the buyer still sees most of their items.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Literal

import structlog

from ordering.backend.port import OrderService
from ordering.order.order import Order, OrderItem
from shared.exceptions import ServiceError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class UnreviewedItem:
    """An order item awaiting review, with the order it belongs to."""

    order_id: str
    item: OrderItem


@dataclass(frozen=True)
class ReviewBacklog:
    items: list[UnreviewedItem] = field(default_factory=list)
    failed_order_ids: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_order_ids

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


async def unreviewed_items(
    buyer_id: str,
    order_service: OrderService,
    on_error: Literal["raise", "skip"] = "raise",
) -> ReviewBacklog:
    if on_error not in ("raise", "skip"):
        raise ValueError(f"on_error must be 'raise' or 'skip', not {on_error!r}")

    orders = await order_service.list_orders_by_buyer(buyer_id)
    pending = [order.id for order in orders if order.has_unreviewed_items()]
    if not pending:
        return ReviewBacklog()

    results = await asyncio.gather(
        *(order_service.get_order_detail(order_id) for order_id in pending),
        return_exceptions=True,
    )

    items: list[UnreviewedItem] = []
    failed: list[str] = []
    for order_id, result in zip(pending, results):
        if isinstance(result, BaseException):
            if on_error == "raise" or not isinstance(result, ServiceError):
                raise result
            logger.warning("Order detail unavailable", buyer_id=buyer_id, order_id=order_id, error=str(result))
            failed.append(order_id)
            continue
        items.extend(_unreviewed(result, order_id))

    return ReviewBacklog(items=items, failed_order_ids=failed)


def _unreviewed(order: Order, order_id: str) -> list[UnreviewedItem]:
    return [UnreviewedItem(order_id=order.id or order_id, item=item) for item in order.unreviewed_items()]
