"""Tests for the client-side cart: lines, quantities and selection."""

from decimal import Decimal

import pytest
from ordering.cart.cart import Cart, CartLine, LineKey
from pydantic import ValidationError as SchemaError
from shared.exceptions import ValidationError


class TestCartLine:
    def test_line_total_in_minor_units(self, make_line):
        assert make_line(unit_price="29.99", quantity=2).line_total_minor == 5998

    def test_key(self, make_line):
        assert make_line(product_id=3, variant_id=9).key == LineKey(3, 9)

    def test_quantity_must_be_positive(self):
        with pytest.raises(SchemaError):
            CartLine(product_id=1, variant_id=1, seller_id="s", unit_price=Decimal("1"), quantity=0)

    def test_price_cannot_be_negative(self):
        with pytest.raises(SchemaError):
            CartLine(product_id=1, variant_id=1, seller_id="s", unit_price=Decimal("-1"), quantity=1)

    def test_exceeds_stock(self, make_line):
        assert make_line(quantity=3, available_stock=2).exceeds_stock() is True
        assert make_line(quantity=2, available_stock=2).exceeds_stock() is False
        assert make_line(quantity=99).exceeds_stock() is False


class TestCart:
    def test_adding_same_variant_merges_quantity(self, make_line):
        cart = Cart("buyer-1")
        cart.add_line(make_line(quantity=1))
        cart.add_line(make_line(quantity=2))

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_update_quantity(self, make_line):
        line = make_line()
        cart = Cart("buyer-1", lines=[line])

        cart.update_quantity(line.key, 4)

        assert cart.get(line.key).quantity == 4

    def test_update_quantity_rejects_zero(self, make_line):
        line = make_line()
        cart = Cart("buyer-1", lines=[line])
        with pytest.raises(ValidationError) as exc:
            cart.update_quantity(line.key, 0)
        assert "quantity" in exc.value.messages

    def test_remove_line_also_deselects(self, make_line):
        line = make_line()
        cart = Cart("buyer-1", lines=[line], selected=[line.key])

        cart.remove_line(line.key)

        assert cart.is_empty()
        assert cart.selected == set()

    def test_remove_unknown_line(self):
        with pytest.raises(ValidationError):
            Cart("buyer-1").remove_line(LineKey(1, 1))

    def test_selection(self, make_line):
        first, second = make_line(product_id=1), make_line(product_id=2)
        cart = Cart("buyer-1", lines=[first, second])

        cart.select(first.key)
        assert cart.selected_lines() == [first]

        cart.select_all()
        assert cart.selected_lines() == [first, second]

        cart.deselect(second.key)
        assert cart.selected_lines() == [first]

    def test_cannot_select_missing_line(self):
        with pytest.raises(ValidationError):
            Cart("buyer-1").select(LineKey(5, 5))

    def test_remove_lines_ignores_missing_keys(self, make_line):
        first, second = make_line(product_id=1), make_line(product_id=2)
        cart = Cart("buyer-1", lines=[first, second], selected=[first.key, second.key])

        cart.remove_lines([first.key, LineKey(42, 42)])

        assert cart.lines == [second]
        assert cart.selected == {second.key}
