"""In-memory fakes of the order and voucher services for development and testing.

The fakes keep their records in dictionaries, record every call in ``calls``
and can be told to fail a method (or a single order's detail fetch) with any
exception, which is how the checkout failure paths are exercised.
"""

from ordering.backend.port import OrderService, VoucherService
from ordering.cart.vouchers import Voucher
from ordering.order.order import Order, OrderStatus
from shared.exceptions import ObjectNotFoundError, ServiceError


class FakeOrderService(OrderService):
    """Configurable fake order service."""

    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.calls: list[dict] = []
        self.failures: dict[str, Exception] = {}
        self.detail_failures: dict[str, Exception] = {}
        self._next_order_number = 1
        self._next_item_id = 1

    def configure(self, method: str, error: Exception | None) -> None:
        """Make ``method`` raise ``error`` (or behave normally again when ``error`` is None)."""
        if error is None:
            self.failures.pop(method, None)
        else:
            self.failures[method] = error

    def fail_detail(self, order_id: str, error: Exception) -> None:
        self.detail_failures[order_id] = error

    def seed(self, order: Order) -> Order:
        """Store an already-persisted order as-is."""
        self.orders[order.id] = order
        return order

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if method in self.failures:
            raise self.failures[method]

    def _get(self, order_id: str) -> Order:
        if order_id not in self.orders:
            raise ObjectNotFoundError("Order not found", code=404, service="order")
        return self.orders[order_id]

    async def create_order(self, order: Order) -> Order:
        self._record("create_order", order=order)

        order_id = f"ord-{self._next_order_number:04d}"
        self._next_order_number += 1
        items = []
        for item in order.order_items:
            items.append(item.model_copy(update={"id": self._next_item_id, "order_id": order_id}))
            self._next_item_id += 1

        persisted = order.model_copy(update={"id": order_id, "order_items": items})
        self.orders[order_id] = persisted
        return persisted

    async def get_order_detail(self, order_id: str) -> Order:
        self._record("get_order_detail", order_id=order_id)
        if order_id in self.detail_failures:
            raise self.detail_failures[order_id]
        return self._get(order_id)

    async def list_orders_by_buyer(self, buyer_id: str) -> list[Order]:
        self._record("list_orders_by_buyer", buyer_id=buyer_id)
        return [order for order in self.orders.values() if order.buyer_id == buyer_id]

    async def list_orders_by_seller(self, seller_id: str) -> list[Order]:
        self._record("list_orders_by_seller", seller_id=seller_id)
        return [order for order in self.orders.values() if order.seller_id == seller_id]

    async def list_orders_by_status(self, status: OrderStatus) -> list[Order]:
        self._record("list_orders_by_status", status=status)
        return [order for order in self.orders.values() if order.state is status]

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        self._record("update_order_status", order_id=order_id, status=status)
        updated = self._get(order_id).model_copy(update={"status": status.value})
        self.orders[order_id] = updated
        return updated

    async def update_order_item_reviewed(self, order_item_id: int) -> None:
        self._record("update_order_item_reviewed", order_item_id=order_item_id)
        for order_id, order in self.orders.items():
            if any(item.id == order_item_id for item in order.order_items):
                items = [
                    item.model_copy(update={"is_reviewed": True}) if item.id == order_item_id else item
                    for item in order.order_items
                ]
                self.orders[order_id] = order.model_copy(update={"order_items": items})
                return
        raise ServiceError("Order item not found", code=404, service="order")


class FakeVoucherService(VoucherService):
    """Configurable fake voucher service."""

    def __init__(self, vouchers: list[Voucher] | None = None) -> None:
        self.vouchers = list(vouchers or [])
        self.usages: list[dict] = []
        self.calls: list[dict] = []
        self.failures: dict[str, Exception] = {}

    def configure(self, method: str, error: Exception | None) -> None:
        if error is None:
            self.failures.pop(method, None)
        else:
            self.failures[method] = error

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if method in self.failures:
            raise self.failures[method]

    async def list_vouchers(self) -> list[Voucher]:
        self._record("list_vouchers")
        return list(self.vouchers)

    async def list_available_vouchers(self, user_id: str, order_total) -> list[Voucher]:
        self._record("list_available_vouchers", user_id=user_id, order_total=order_total)
        return [voucher for voucher in self.vouchers if voucher.is_applicable(order_total)]

    async def record_usage(self, code: str, user_id: str, order_id: str) -> None:
        self._record("record_usage", code=code, user_id=user_id, order_id=order_id)
        self.usages.append({"code": code, "userId": user_id, "orderId": order_id})
