"""Base client for the SnapBuy backend services.

Every backend endpoint answers with the same envelope::

    {"result": 1, "data": {...}, "error": null}
    {"result": 0, "data": null, "error": {"code": 404, "message": "Order not found"}}
    {"result": 0, "data": null, "error": "Internal Server Error"}

``BackendClient.request`` unwraps ``data`` or raises a ``ServiceError``
subclass. Transport failures are mapped to ``ServiceTimeout`` /
``ServiceUnavailable`` so callers never see raw httpx exceptions.
"""

from typing import Any

import httpx
import structlog

from shared.exceptions import ObjectNotFoundError, ServiceError, ServiceTimeout, ServiceUnavailable

logger = structlog.get_logger(__name__)


class BackendClient:
    """Thin async wrapper around an ``httpx.AsyncClient`` bound to the API base URL."""

    service_name = "backend"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        allow_empty: bool = False,
    ) -> Any:
        try:
            response = await self.client.request(method, endpoint, json=json)
        except httpx.TimeoutException as exc:
            logger.warning("Backend request timed out", service=self.service_name, endpoint=endpoint)
            raise ServiceTimeout(f"{self.service_name} timed out", service=self.service_name) from exc
        except httpx.TransportError as exc:
            logger.warning("Backend unreachable", service=self.service_name, endpoint=endpoint, error=str(exc))
            raise ServiceUnavailable(f"{self.service_name} unavailable", service=self.service_name) from exc

        try:
            body = response.json() if response.content else {}
        except ValueError as exc:
            raise ServiceError(
                f"{self.service_name} returned a non-JSON body",
                code=response.status_code,
                service=self.service_name,
            ) from exc

        error = body.get("error") if isinstance(body, dict) else None
        if error and not isinstance(error, dict):
            # Some endpoints send the error as a bare string
            error = {"message": str(error)}
        data = body.get("data") if isinstance(body, dict) else None

        if response.status_code == 404:
            message = (error or {}).get("message") or "Not found"
            raise ObjectNotFoundError(message, code=404, service=self.service_name)

        if response.is_error or error:
            message = (error or {}).get("message") or f"{self.service_name} request failed"
            code = (error or {}).get("code", response.status_code)
            logger.warning(
                "Backend request failed",
                service=self.service_name,
                endpoint=endpoint,
                status_code=response.status_code,
                code=code,
                message=message,
            )
            raise ServiceError(message, code=code, service=self.service_name)

        if data is None and not allow_empty:
            raise ServiceError(
                f"{self.service_name} returned no data",
                code=response.status_code,
                service=self.service_name,
            )
        return data
