import pytest
from ordering.backend.fake_adapter import FakeOrderService
from reviews.backend.fake_adapter import FakeReviewService


@pytest.fixture
def order_service():
    return FakeOrderService()


@pytest.fixture
def review_service():
    return FakeReviewService()
