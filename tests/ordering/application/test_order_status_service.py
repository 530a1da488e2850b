"""Tests for seller/admin order status changes."""

import pytest
from ordering.order.order import Actor, OrderStatus
from ordering.order.status import OrderStatusService
from shared.exceptions import InvalidOperationError, ObjectNotFoundError


@pytest.fixture
def status_service(order_service):
    return OrderStatusService(order_service)


class TestChangeStatus:
    async def test_seller_moves_order_forward(self, status_service, order_service, make_order):
        order_service.seed(make_order(status="Pending"))

        updated = await status_service.change_status("ord-1", OrderStatus.IN_PROGRESS, Actor.SELLER)

        assert updated.state is OrderStatus.IN_PROGRESS
        assert order_service.calls_to("update_order_status")[0]["status"] is OrderStatus.IN_PROGRESS

    async def test_invalid_transition_never_reaches_the_service(self, status_service, order_service, make_order):
        order_service.seed(make_order(status="Delivered"))

        with pytest.raises(InvalidOperationError):
            await status_service.cancel("ord-1", Actor.ADMIN)

        assert order_service.calls_to("update_order_status") == []

    async def test_buyer_cannot_change_status(self, status_service, order_service, make_order):
        order_service.seed(make_order(status="Pending"))

        with pytest.raises(InvalidOperationError):
            await status_service.cancel("ord-1", Actor.BUYER)

    async def test_unknown_status_is_frozen(self, status_service, order_service, make_order):
        order_service.seed(make_order(status="Mystery"))

        with pytest.raises(InvalidOperationError):
            await status_service.change_status("ord-1", OrderStatus.IN_PROGRESS, Actor.ADMIN)

    async def test_missing_order(self, status_service):
        with pytest.raises(ObjectNotFoundError):
            await status_service.change_status("nope", OrderStatus.IN_PROGRESS, Actor.SELLER)


class TestSellerDashboard:
    async def test_orders_grouped_by_status(self, status_service, order_service, make_order):
        order_service.seed(make_order(order_id="a", status="Pending"))
        order_service.seed(make_order(order_id="b", status="Delivered"))
        order_service.seed(make_order(order_id="c", seller_id="other", status="Pending"))

        groups = await status_service.orders_for_seller("seller-1")

        assert {status: [o.id for o in orders] for status, orders in groups.items()} == {
            OrderStatus.PENDING: ["a"],
            OrderStatus.DELIVERED: ["b"],
        }


class TestAdminStatusView:
    async def test_orders_in_status(self, status_service, order_service, make_order):
        order_service.seed(make_order(order_id="a", status="Pending"))
        order_service.seed(make_order(order_id="b", seller_id="other", status="Pending"))
        order_service.seed(make_order(order_id="c", status="InProgress"))

        pending = await status_service.orders_in_status(OrderStatus.PENDING)
        in_progress = await status_service.orders_in_status(OrderStatus.IN_PROGRESS)

        assert sorted(order.id for order in pending) == ["a", "b"]
        assert [order.id for order in in_progress] == ["c"]

    async def test_unknown_status_is_rejected(self, status_service, order_service):
        with pytest.raises(InvalidOperationError):
            await status_service.orders_in_status(OrderStatus.UNKNOWN)

        assert order_service.calls_to("list_orders_by_status") == []
