"""In-memory product service for development and testing."""

from catalogue.product.port import ProductService, ProductSnapshot
from shared.exceptions import ObjectNotFoundError


class FakeProductService(ProductService):
    def __init__(self, products: list[ProductSnapshot] | None = None) -> None:
        self.products = {product.id: product for product in products or []}
        self.calls: list[dict] = []
        self.failures: dict[int, Exception] = {}

    def fail_product(self, product_id: int, error: Exception) -> None:
        self.failures[product_id] = error

    async def get_product(self, product_id: int) -> ProductSnapshot:
        self.calls.append({"method": "get_product", "product_id": product_id})
        if product_id in self.failures:
            raise self.failures[product_id]
        if product_id not in self.products:
            raise ObjectNotFoundError("Product not found", code=404, service="product")
        return self.products[product_id]
