"""
User Directory Client
=====================
Users live in a hosted mock data API, not in this process. This client wraps
its REST surface:

- GET    <base>        list users
- GET    <base>/<id>   fetch one user
- POST   <base>        create a user
- PUT    <base>/<id>   update a user
- DELETE <base>/<id>   delete a user

Transport failures and non-2xx responses become UpstreamError, a 404 on an
individual user becomes UserNotFoundError. There are no retries.
"""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from staffhub.core.config import settings
from staffhub.core.exceptions import UpstreamError, UserNotFoundError
from staffhub.core.logging_config import logger


def strip_password(record: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a directory record without its password field"""
    return {key: value for key, value in record.items() if key != "password"}


class UserDirectory:
    """Async client for the hosted user collection"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.USER_DIRECTORY_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.USER_DIRECTORY_TIMEOUT
        self.transport = transport

    def _url(self, user_id: Optional[str] = None) -> str:
        if user_id is None:
            return self.base_url
        return f"{self.base_url}/{quote(str(user_id), safe='')}"

    async def _request(
        self,
        method: str,
        user_id: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = self._url(user_id)
        start = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, json=payload)
        except httpx.HTTPError as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.log_upstream_call(method, url, None, duration_ms, error=str(e))
            raise UpstreamError() from e

        duration_ms = (time.perf_counter() - start) * 1000
        logger.log_upstream_call(method, url, response.status_code, duration_ms)

        if response.status_code == 404 and user_id is not None:
            raise UserNotFoundError(user_id)
        if response.is_error:
            raise UpstreamError(upstream_status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("User directory returned malformed data") from e

    async def list_users(self) -> List[Dict[str, Any]]:
        data = await self._request("GET")
        if not isinstance(data, list):
            raise UpstreamError("User directory returned malformed data")
        return data

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        data = await self._request("GET", str(user_id))
        if not isinstance(data, dict):
            raise UpstreamError("User directory returned malformed data")
        return data

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Case-insensitive lookup over the full listing (the directory has no query API)"""
        wanted = email.strip().lower()
        for user in await self.list_users():
            if str(user.get("email") or "").lower() == wanted:
                return user
        return None

    async def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", payload=data)

    async def update_user(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", str(user_id), payload=data)

    async def delete_user(self, user_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", str(user_id))


# Singleton instance
user_directory = UserDirectory()


def get_user_directory() -> UserDirectory:
    """FastAPI dependency; overridden in tests"""
    return user_directory
