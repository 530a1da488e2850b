"""In-memory review service for development and testing."""

from reviews.backend.port import ReviewService
from reviews.review.review import ProductReview, ReviewRequest


class FakeReviewService(ReviewService):
    def __init__(self) -> None:
        self.reviews: list[ProductReview] = []
        self.calls: list[dict] = []
        self.failures: dict[str, Exception] = {}

    def configure(self, method: str, error: Exception | None) -> None:
        if error is None:
            self.failures.pop(method, None)
        else:
            self.failures[method] = error

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if method in self.failures:
            raise self.failures[method]

    async def submit_review(self, request: ReviewRequest) -> ProductReview:
        self._record("submit_review", request=request)
        review = ProductReview.model_validate(
            {**request.to_wire(), "id": len(self.reviews) + 1}
        )
        self.reviews.append(review)
        return review

    async def list_product_reviews(self, product_id: int) -> list[ProductReview]:
        self._record("list_product_reviews", product_id=product_id)
        return [review for review in self.reviews if review.product_id == product_id]
