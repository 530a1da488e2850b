"""Order and OrderItem records, and the order status state machine.

Orders are owned by the remote order service. This module describes their
wire shape and the lifecycle rules enforced before asking the service to
change anything.

State Machine:
    PENDING → IN_PROGRESS → COMPLETE → DELIVERED
    CANCELLED (from PENDING, IN_PROGRESS)

The status is a loosely-typed string on the wire. ``Order.state`` decodes it
into ``OrderStatus``; anything unmapped becomes ``OrderStatus.UNKNOWN`` while
``Order.status`` keeps the raw value for display.
"""

from decimal import Decimal
from enum import Enum

from pydantic import Field

from shared.exceptions import InvalidOperationError
from shared.money import WireAmount
from shared.schemas import WireModel

# The order service assigns ids on creation; these are what it expects before that.
UNASSIGNED_ORDER_ID = "string"
UNASSIGNED_ITEM_ID = 0


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETE = "Complete"  # approved by the seller
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    UNKNOWN = "Unknown"

    @classmethod
    def decode(cls, raw: str | None) -> "OrderStatus":
        """Map a wire status to a member, falling back to UNKNOWN instead of raising."""
        if raw is None:
            return cls.UNKNOWN
        normalized = raw.strip()
        for member in cls:
            if member is not cls.UNKNOWN and member.value.lower() == normalized.lower():
                return member
        # The backend has been seen sending "InProgress" and "Success"
        return _ALIASES.get(normalized.replace(" ", "").replace("_", "").lower(), cls.UNKNOWN)


_ALIASES = {
    "inprogress": OrderStatus.IN_PROGRESS,
    "success": OrderStatus.COMPLETE,
    "approved": OrderStatus.COMPLETE,
    "canceled": OrderStatus.CANCELLED,
}


class Actor(Enum):
    BUYER = "Buyer"
    SELLER = "Seller"
    ADMIN = "Admin"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.COMPLETE, OrderStatus.CANCELLED},
    OrderStatus.COMPLETE: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.UNKNOWN: set(),  # Never transition from a state we cannot read
}

_STATUS_ACTORS = {Actor.SELLER, Actor.ADMIN}


def allowed_transitions(current: OrderStatus) -> set[OrderStatus]:
    return set(_VALID_TRANSITIONS.get(current, set()))


def assert_can_transition(current: OrderStatus, target: OrderStatus, actor: Actor) -> None:
    """Raise ``InvalidOperationError`` unless ``actor`` may move an order from ``current`` to ``target``."""
    if actor not in _STATUS_ACTORS:
        raise InvalidOperationError(f"{actor.value} cannot change order status")
    if target not in _VALID_TRANSITIONS.get(current, set()):
        raise InvalidOperationError(f"Cannot transition from {current.value} to {target.value}")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
class OrderItem(WireModel):
    """A line of an order, with product details snapshotted at checkout."""

    id: int = UNASSIGNED_ITEM_ID
    order_id: str = UNASSIGNED_ORDER_ID
    product_id: int
    product_name: str = ""
    product_image_url: str = ""
    product_note: str = ""
    product_variant_id: int
    quantity: int = Field(ge=1)
    unit_price: WireAmount = Field(ge=0)
    is_reviewed: bool = False

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(WireModel):
    id: str = UNASSIGNED_ORDER_ID
    buyer_id: str
    seller_id: str
    total_amount: WireAmount = Field(ge=0)
    shipping_address: str
    phone_number: str = ""
    order_items: list[OrderItem] = Field(default_factory=list)
    status: str = OrderStatus.PENDING.value

    @property
    def state(self) -> OrderStatus:
        return OrderStatus.decode(self.status)

    @property
    def is_persisted(self) -> bool:
        return self.id != UNASSIGNED_ORDER_ID

    def unreviewed_items(self) -> list[OrderItem]:
        return [item for item in self.order_items if not item.is_reviewed]

    def has_unreviewed_items(self) -> bool:
        return any(not item.is_reviewed for item in self.order_items)

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _VALID_TRANSITIONS.get(self.state, set())

    def is_cancellable(self) -> bool:
        return self.can_transition_to(OrderStatus.CANCELLED)
