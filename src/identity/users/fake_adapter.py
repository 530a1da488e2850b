"""In-memory user service for development and testing."""

from identity.users.port import UserProfile, UserService
from shared.exceptions import ObjectNotFoundError


class FakeUserService(UserService):
    def __init__(self, users: list[UserProfile] | None = None) -> None:
        self.users = {user.id: user for user in users or []}
        self.calls: list[dict] = []
        self.failures: dict[str, Exception] = {}

    def fail_user(self, user_id: str, error: Exception) -> None:
        self.failures[user_id] = error

    async def get_user(self, user_id: str) -> UserProfile:
        self.calls.append({"method": "get_user", "user_id": user_id})
        if user_id in self.failures:
            raise self.failures[user_id]
        if user_id not in self.users:
            raise ObjectNotFoundError("User not found", code=404, service="user")
        return self.users[user_id]

    async def update_last_viewed_product(self, user_id: str, product_id: int) -> None:
        self.calls.append({"method": "update_last_viewed_product", "user_id": user_id, "product_id": product_id})
        user = await self.get_user(user_id)
        self.users[user_id] = user.model_copy(update={"last_product_id": product_id})
