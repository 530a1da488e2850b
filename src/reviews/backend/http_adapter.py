"""HTTP adapter for the review service."""

from pydantic import ValidationError as SchemaError

from reviews.backend.port import ReviewService
from reviews.review.review import ProductReview, ReviewRequest
from shared.api_client import BackendClient
from shared.exceptions import ServiceError


class HttpReviewService(BackendClient, ReviewService):
    service_name = "review"

    def _parse(self, data) -> ProductReview:
        try:
            return ProductReview.model_validate(data)
        except SchemaError as exc:
            raise ServiceError("Malformed review from review service", service=self.service_name) from exc

    async def submit_review(self, request: ReviewRequest) -> ProductReview:
        data = await self.request("POST", "product/api/productReviews", json=request.to_wire())
        return self._parse(data)

    async def list_product_reviews(self, product_id: int) -> list[ProductReview]:
        data = await self.request("GET", f"product/api/productReviews/product/{product_id}")
        return [self._parse(row) for row in data]
