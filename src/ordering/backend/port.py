"""Order and voucher service ports (abstract interfaces).

The order service and voucher service are remote backends. These contracts
let the checkout coordinator, the status service and the review workflow run
against ``FakeOrderService`` in tests and ``HttpOrderService`` in production.
"""

from abc import ABC, abstractmethod

from ordering.cart.vouchers import Voucher
from ordering.order.order import Order, OrderStatus


class OrderService(ABC):
    """Abstract order service interface."""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """Persist a new order and return it with service-assigned ids."""
        ...

    @abstractmethod
    async def get_order_detail(self, order_id: str) -> Order:
        """Fetch one order with its full item list."""
        ...

    @abstractmethod
    async def list_orders_by_buyer(self, buyer_id: str) -> list[Order]:
        """List the orders a buyer has placed."""
        ...

    @abstractmethod
    async def list_orders_by_seller(self, seller_id: str) -> list[Order]:
        """List the orders placed with a seller."""
        ...

    @abstractmethod
    async def list_orders_by_status(self, status: OrderStatus) -> list[Order]:
        """List every order currently in ``status`` (admin views)."""
        ...

    @abstractmethod
    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """Set an order's status."""
        ...

    @abstractmethod
    async def update_order_item_reviewed(self, order_item_id: int) -> None:
        """Flag an order item as reviewed."""
        ...


class VoucherService(ABC):
    """Abstract voucher service interface (read side plus usage recording)."""

    @abstractmethod
    async def list_vouchers(self) -> list[Voucher]:
        """List every voucher."""
        ...

    @abstractmethod
    async def list_available_vouchers(self, user_id: str, order_total) -> list[Voucher]:
        """List the vouchers the backend considers usable for this buyer and total."""
        ...

    @abstractmethod
    async def record_usage(self, code: str, user_id: str, order_id: str) -> None:
        """Record that a voucher was redeemed on an order."""
        ...
