"""HTTP adapter for the user service."""

from pydantic import ValidationError as SchemaError

from identity.users.port import UserProfile, UserService
from shared.api_client import BackendClient
from shared.exceptions import ServiceError


class HttpUserService(BackendClient, UserService):
    service_name = "user"

    async def get_user(self, user_id: str) -> UserProfile:
        data = await self.request("GET", f"user/api/users/{user_id}")
        try:
            return UserProfile.model_validate(data)
        except SchemaError as exc:
            raise ServiceError("Malformed user from user service", service=self.service_name) from exc

    async def update_last_viewed_product(self, user_id: str, product_id: int) -> None:
        await self.request("PUT", f"user/api/users/lastProduct/{user_id}/{product_id}", allow_empty=True)
