"""Tests for the Order status state machine and defensive status decoding."""

import pytest
from ordering.order.order import Actor, OrderStatus, allowed_transitions, assert_can_transition
from shared.exceptions import InvalidOperationError


class TestDecode:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Pending", OrderStatus.PENDING),
            ("pending", OrderStatus.PENDING),
            ("In Progress", OrderStatus.IN_PROGRESS),
            ("InProgress", OrderStatus.IN_PROGRESS),
            ("Complete", OrderStatus.COMPLETE),
            ("Success", OrderStatus.COMPLETE),
            ("Approved", OrderStatus.COMPLETE),
            ("Delivered", OrderStatus.DELIVERED),
            ("Cancelled", OrderStatus.CANCELLED),
            ("Canceled", OrderStatus.CANCELLED),
        ],
    )
    def test_known_statuses(self, raw, expected):
        assert OrderStatus.decode(raw) is expected

    @pytest.mark.parametrize("raw", ["Shipped", "", "   ", None, "Unknown-ish", "42"])
    def test_unmapped_statuses_are_unknown(self, raw):
        assert OrderStatus.decode(raw) is OrderStatus.UNKNOWN


class TestValidTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.IN_PROGRESS),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.IN_PROGRESS, OrderStatus.COMPLETE),
            (OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED),
            (OrderStatus.COMPLETE, OrderStatus.DELIVERED),
        ],
    )
    def test_seller_can_advance(self, current, target):
        assert_can_transition(current, target, Actor.SELLER)

    def test_admin_can_cancel(self):
        assert_can_transition(OrderStatus.PENDING, OrderStatus.CANCELLED, Actor.ADMIN)


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.COMPLETE),
            (OrderStatus.COMPLETE, OrderStatus.CANCELLED),
            (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.UNKNOWN, OrderStatus.CANCELLED),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidOperationError):
            assert_can_transition(current, target, Actor.SELLER)

    def test_buyer_cannot_change_status(self):
        with pytest.raises(InvalidOperationError, match="Buyer"):
            assert_can_transition(OrderStatus.PENDING, OrderStatus.CANCELLED, Actor.BUYER)

    def test_terminal_states_have_no_transitions(self):
        assert allowed_transitions(OrderStatus.DELIVERED) == set()
        assert allowed_transitions(OrderStatus.CANCELLED) == set()


class TestOrderHelpers:
    def test_state_decodes_raw_status(self, make_order):
        assert make_order(status="InProgress").state is OrderStatus.IN_PROGRESS
        assert make_order(status="Shipped").state is OrderStatus.UNKNOWN

    def test_cancellable(self, make_order):
        assert make_order(status="Pending").is_cancellable() is True
        assert make_order(status="Delivered").is_cancellable() is False

    def test_unreviewed_items(self, make_order):
        order = make_order(reviewed=(True, False, False))
        assert [item.id for item in order.unreviewed_items()] == [2, 3]
        assert make_order(reviewed=(True,)).has_unreviewed_items() is False
