"""Review service port (abstract interface)."""

from abc import ABC, abstractmethod

from reviews.review.review import ProductReview, ReviewRequest


class ReviewService(ABC):
    @abstractmethod
    async def submit_review(self, request: ReviewRequest) -> ProductReview:
        """Post a new review and return it as stored."""
        ...

    @abstractmethod
    async def list_product_reviews(self, product_id: int) -> list[ProductReview]:
        """List the reviews written for a product."""
        ...
