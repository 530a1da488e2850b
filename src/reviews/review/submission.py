"""Submitting a review for a purchased item.

The review is posted first and the order item flagged as reviewed second.
``is_reviewed`` only ever goes from false to true, so an item that is
already reviewed is rejected up front.
"""

import structlog

from ordering.backend.port import OrderService
from reviews.backend.port import ReviewService
from reviews.review.eligibility import UnreviewedItem
from reviews.review.review import MAX_STARS, MIN_STARS, ProductReview, ReviewRequest
from shared.exceptions import InvalidOperationError, ServiceError, ValidationError

logger = structlog.get_logger(__name__)


class ReviewSubmission:
    def __init__(self, review_service: ReviewService, order_service: OrderService) -> None:
        self.review_service = review_service
        self.order_service = order_service

    async def submit(
        self,
        entry: UnreviewedItem,
        buyer_id: str,
        stars: int,
        comment: str = "",
        images=(),
    ) -> ProductReview:
        if isinstance(stars, bool) or not isinstance(stars, int) or not MIN_STARS <= stars <= MAX_STARS:
            raise ValidationError({"star_number": [f"Rating must be between {MIN_STARS} and {MAX_STARS} stars"]})

        item = entry.item
        if item.is_reviewed:
            raise InvalidOperationError(f"Order item {item.id} has already been reviewed")

        review = await self.review_service.submit_review(
            ReviewRequest(
                order_id=entry.order_id,
                product_id=item.product_id,
                star_number=stars,
                review_comment=comment.strip(),
                product_review_images=list(images),
                product_note=item.product_note,
                user_id=buyer_id,
            )
        )

        try:
            await self.order_service.update_order_item_reviewed(item.id)
        except ServiceError:
            logger.error(
                "Review posted but item not marked reviewed",
                review_id=review.id,
                order_id=entry.order_id,
                order_item_id=item.id,
            )
            raise

        logger.info("Review submitted", review_id=review.id, order_id=entry.order_id, product_id=item.product_id)
        return review
