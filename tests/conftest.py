from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from identity.users.port import UserProfile
from ordering.cart.cart import Cart, CartLine
from ordering.order.order import Order, OrderItem

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def make_line():
    def _make(
        product_id=1,
        variant_id=1,
        seller_id="seller-1",
        unit_price="29.99",
        quantity=1,
        available_stock=None,
        product_name="Canvas Tote",
    ):
        return CartLine(
            product_id=product_id,
            variant_id=variant_id,
            seller_id=seller_id,
            unit_price=Decimal(unit_price),
            quantity=quantity,
            product_name=product_name,
            product_image_url=f"https://cdn.test/p/{product_id}.jpg",
            product_note="Brown / M",
            available_stock=available_stock,
        )

    return _make


@pytest.fixture
def make_cart(make_line):
    def _make(buyer_id="buyer-1", lines=None, select_all=True):
        cart = Cart(buyer_id, lines=lines if lines is not None else [make_line(quantity=2)])
        if select_all:
            cart.select_all()
        return cart

    return _make


@pytest.fixture
def make_order():
    def _make(order_id="ord-1", buyer_id="buyer-1", seller_id="seller-1", reviewed=(False,), status="Pending"):
        items = [
            OrderItem(
                id=index + 1,
                order_id=order_id,
                product_id=100 + index,
                product_name=f"Product {index}",
                product_variant_id=1,
                quantity=1,
                unit_price=Decimal("10.00"),
                is_reviewed=is_reviewed,
            )
            for index, is_reviewed in enumerate(reviewed)
        ]
        return Order(
            id=order_id,
            buyer_id=buyer_id,
            seller_id=seller_id,
            total_amount=Decimal("10.00") * len(items) + Decimal("6.00"),
            shipping_address="1 Market St, Springfield",
            phone_number="+1 555 0100",
            order_items=items,
            status=status,
        )

    return _make


@pytest.fixture
def seller_onboarded():
    return UserProfile(id="seller-1", name="Tote Co", email="sales@toteco.test", paypal_merchant_id="MERCHANT123")


@pytest.fixture
def seller_not_onboarded():
    return UserProfile(id="seller-1", name="Tote Co", email="sales@toteco.test", paypal_merchant_id="")


@pytest.fixture
def buyer_profile():
    return UserProfile(id="buyer-1", name="Ada Buyer", email="ada@buyer.test")
