"""Product reviews as the review service sends and receives them."""

from pydantic import Field, field_validator

from identity.users.port import UserProfile
from shared.schemas import WireModel

MIN_STARS = 1
MAX_STARS = 5

# Image entries the review service sometimes emits instead of URLs
_PLACEHOLDER_IMAGE_MARKER = "ProductService.Models.Entities"


class ReviewRequest(WireModel):
    id: int = 0
    order_id: str
    product_id: int
    star_number: int = Field(ge=MIN_STARS, le=MAX_STARS)
    review_comment: str = ""
    product_review_images: list[str] = Field(default_factory=list)
    product_note: str = ""
    user_id: str


class ProductReview(WireModel):
    id: int
    product_id: int
    star_number: float
    order_id: str
    product_note: str = ""
    user_id: str
    review_comment: str = ""
    product_review_images: list[str] = Field(default_factory=list)
    user: UserProfile | None = None

    @field_validator("product_review_images", mode="before")
    @classmethod
    def _drop_placeholder_images(cls, value):
        if not isinstance(value, list):
            return []
        return [url for url in value if isinstance(url, str) and _PLACEHOLDER_IMAGE_MARKER not in url]

    @property
    def reviewer_name(self) -> str:
        return self.user.name if self.user and self.user.name else "Anonymous"
