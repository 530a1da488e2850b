"""HTTP adapters for the order and voucher services."""

from pydantic import ValidationError as SchemaError

from ordering.backend.port import OrderService, VoucherService
from ordering.cart.vouchers import Voucher
from ordering.order.order import Order, OrderStatus
from shared.api_client import BackendClient
from shared.exceptions import ServiceError
from shared.money import round2


def _parse(model, data, service: str):
    try:
        return model.model_validate(data)
    except SchemaError as exc:
        raise ServiceError(f"Malformed {model.__name__} from {service} service", service=service) from exc


class HttpOrderService(BackendClient, OrderService):
    service_name = "order"

    async def create_order(self, order: Order) -> Order:
        data = await self.request("POST", "order/api/orders", json=order.to_wire())
        return _parse(Order, data, self.service_name)

    async def get_order_detail(self, order_id: str) -> Order:
        data = await self.request("GET", f"order/api/orders/{order_id}")
        return _parse(Order, data, self.service_name)

    async def list_orders_by_buyer(self, buyer_id: str) -> list[Order]:
        data = await self.request("GET", f"order/api/orders/buyer/{buyer_id}")
        return [_parse(Order, row, self.service_name) for row in data]

    async def list_orders_by_seller(self, seller_id: str) -> list[Order]:
        data = await self.request("GET", f"order/api/orders/seller/{seller_id}")
        return [_parse(Order, row, self.service_name) for row in data]

    async def list_orders_by_status(self, status: OrderStatus) -> list[Order]:
        data = await self.request("GET", f"order/api/orders/status/{status.value}")
        return [_parse(Order, row, self.service_name) for row in data]

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        data = await self.request("PUT", f"order/api/orders/{order_id}/status", json={"status": status.value})
        return _parse(Order, data, self.service_name)

    async def update_order_item_reviewed(self, order_item_id: int) -> None:
        await self.request("PUT", f"order/api/orders/items/{order_item_id}/reviewed", allow_empty=True)


class HttpVoucherService(BackendClient, VoucherService):
    service_name = "voucher"

    async def list_vouchers(self) -> list[Voucher]:
        data = await self.request("GET", "order/api/vouchers")
        return [_parse(Voucher, row, self.service_name) for row in data]

    async def list_available_vouchers(self, user_id: str, order_total) -> list[Voucher]:
        data = await self.request("GET", f"order/api/vouchers/{user_id}/{round2(order_total)}")
        return [_parse(Voucher, row, self.service_name) for row in data]

    async def record_usage(self, code: str, user_id: str, order_id: str) -> None:
        await self.request(
            "POST",
            "order/api/voucherUsages",
            json={"code": code, "userId": user_id, "orderId": order_id},
            allow_empty=True,
        )
