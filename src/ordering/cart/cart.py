"""Client-side shopping cart: the lines a buyer has collected and which of them are selected.

The cart only lives on the buyer's device until checkout. A committed checkout
removes the lines it ordered; everything else stays in the cart.
"""

from decimal import Decimal
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from shared.exceptions import ValidationError
from shared.money import to_minor


class LineKey(NamedTuple):
    product_id: int
    variant_id: int


class CartLine(BaseModel):
    """A product variant in the cart, with the price and stock known when it was added."""

    model_config = ConfigDict(frozen=True)

    product_id: int
    variant_id: int
    seller_id: str = Field(min_length=1)
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)
    product_name: str = ""
    product_image_url: str = ""
    product_note: str = ""  # variant description, e.g. "Brown / M"
    available_stock: int | None = Field(default=None, ge=0)

    @property
    def key(self) -> LineKey:
        return LineKey(self.product_id, self.variant_id)

    @property
    def line_total_minor(self) -> int:
        return to_minor(self.unit_price) * self.quantity

    def exceeds_stock(self) -> bool:
        return self.available_stock is not None and self.quantity > self.available_stock


class Cart:
    """Mutable cart held by one buyer session."""

    def __init__(self, buyer_id: str, lines=None, selected=None) -> None:
        self.buyer_id = buyer_id
        self._lines: dict[LineKey, CartLine] = {}
        for line in lines or []:
            self.add_line(line)
        self.selected: set[LineKey] = set(selected or ())

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get(self, key: LineKey) -> CartLine | None:
        return self._lines.get(key)

    def add_line(self, line: CartLine) -> CartLine:
        """Add a line, or increase the quantity if the same variant is already in the cart."""
        existing = self._lines.get(line.key)
        if existing:
            line = existing.model_copy(update={"quantity": existing.quantity + line.quantity})
        self._lines[line.key] = line
        return line

    def replace_line(self, line: CartLine) -> None:
        if line.key not in self._lines:
            raise ValidationError({"line": ["Item not found in cart"]})
        self._lines[line.key] = line

    def update_quantity(self, key: LineKey, quantity: int) -> CartLine:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        line = self._lines.get(key)
        if line is None:
            raise ValidationError({"line": ["Item not found in cart"]})
        updated = line.model_copy(update={"quantity": quantity})
        self._lines[key] = updated
        return updated

    def remove_line(self, key: LineKey) -> None:
        if self._lines.pop(key, None) is None:
            raise ValidationError({"line": ["Item not found in cart"]})
        self.selected.discard(key)

    def remove_lines(self, keys) -> None:
        for key in list(keys):
            self._lines.pop(key, None)
            self.selected.discard(key)

    def select(self, key: LineKey) -> None:
        if key not in self._lines:
            raise ValidationError({"line": ["Item not found in cart"]})
        self.selected.add(key)

    def deselect(self, key: LineKey) -> None:
        self.selected.discard(key)

    def select_all(self) -> None:
        self.selected = set(self._lines)

    def selected_lines(self) -> list[CartLine]:
        return [line for key, line in self._lines.items() if key in self.selected]

    def is_empty(self) -> bool:
        return not self._lines
