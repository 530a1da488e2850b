"""Product service port and the product snapshot it returns.

The checkout only reads from the catalogue: the current price, stock and
images of the products in a cart.
"""

from abc import ABC, abstractmethod

from pydantic import Field

from shared.money import WireAmount
from shared.schemas import WireModel


class VariantSnapshot(WireModel):
    id: int
    description: str = ""
    stock: int = Field(default=0, ge=0)
    price: WireAmount | None = Field(default=None, ge=0)  # overrides the product price when set


class ProductSnapshot(WireModel):
    id: int
    name: str
    seller_id: str
    base_price: WireAmount = Field(ge=0)
    images: list[str] = Field(default_factory=list)
    variants: list[VariantSnapshot] = Field(default_factory=list)

    def variant(self, variant_id: int) -> VariantSnapshot | None:
        return next((v for v in self.variants if v.id == variant_id), None)

    def price_for(self, variant_id: int):
        variant = self.variant(variant_id)
        if variant is not None and variant.price is not None:
            return variant.price
        return self.base_price

    @property
    def cover_image(self) -> str:
        return self.images[0] if self.images else ""


class ProductService(ABC):
    @abstractmethod
    async def get_product(self, product_id: int) -> ProductSnapshot:
        """Fetch the current snapshot of one product."""
        ...
