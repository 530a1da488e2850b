"""Tests for submitting a review and marking the item reviewed."""

import pytest
from reviews.review.eligibility import UnreviewedItem, unreviewed_items
from reviews.review.submission import ReviewSubmission
from shared.exceptions import InvalidOperationError, ServiceError, ValidationError


@pytest.fixture
def submission(review_service, order_service):
    return ReviewSubmission(review_service, order_service)


async def _first_entry(order_service, make_order):
    order_service.seed(make_order(order_id="ord-a", reviewed=(False,)))
    backlog = await unreviewed_items("buyer-1", order_service)
    return backlog.items[0]


class TestReviewSubmission:
    async def test_posts_review_then_marks_item(self, submission, review_service, order_service, make_order):
        entry = await _first_entry(order_service, make_order)

        review = await submission.submit(entry, "buyer-1", stars=5, comment="  Sturdy and roomy ", images=["https://x/1.jpg"])

        request = review_service.calls[0]["request"]
        assert request.order_id == "ord-a"
        assert request.product_id == entry.item.product_id
        assert request.star_number == 5
        assert request.review_comment == "Sturdy and roomy"
        assert review.product_review_images == ["https://x/1.jpg"]
        assert order_service.calls_to("update_order_item_reviewed") == [
            {"method": "update_order_item_reviewed", "order_item_id": entry.item.id}
        ]
        assert len(await unreviewed_items("buyer-1", order_service)) == 0

    @pytest.mark.parametrize("stars", [0, 6, -1, 4.5, True])
    async def test_star_range(self, submission, review_service, order_service, make_order, stars):
        entry = await _first_entry(order_service, make_order)

        with pytest.raises(ValidationError):
            await submission.submit(entry, "buyer-1", stars=stars)

        assert review_service.calls == []

    async def test_reviewed_item_rejected(self, submission, review_service, make_order):
        order = make_order(reviewed=(True,))
        entry = UnreviewedItem(order_id=order.id, item=order.order_items[0])

        with pytest.raises(InvalidOperationError):
            await submission.submit(entry, "buyer-1", stars=4)

        assert review_service.calls == []

    async def test_review_rejected_leaves_item_unreviewed(self, submission, review_service, order_service, make_order):
        entry = await _first_entry(order_service, make_order)
        review_service.configure("submit_review", ServiceError("profanity", service="review"))

        with pytest.raises(ServiceError):
            await submission.submit(entry, "buyer-1", stars=1)

        assert order_service.calls_to("update_order_item_reviewed") == []

    async def test_marking_failure_propagates(self, submission, review_service, order_service, make_order):
        entry = await _first_entry(order_service, make_order)
        order_service.configure("update_order_item_reviewed", ServiceError("down", service="order"))

        with pytest.raises(ServiceError):
            await submission.submit(entry, "buyer-1", stars=3)

        assert len(review_service.reviews) == 1
