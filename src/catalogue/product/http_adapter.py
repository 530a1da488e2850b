"""HTTP adapter for the product service."""

from pydantic import ValidationError as SchemaError

from catalogue.product.port import ProductService, ProductSnapshot
from shared.api_client import BackendClient
from shared.exceptions import ServiceError


class HttpProductService(BackendClient, ProductService):
    service_name = "product"

    async def get_product(self, product_id: int) -> ProductSnapshot:
        data = await self.request("GET", f"product/api/products/{product_id}")
        try:
            return ProductSnapshot.model_validate(data)
        except SchemaError as exc:
            raise ServiceError("Malformed product from product service", service=self.service_name) from exc
