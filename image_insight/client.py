"""Async client for the Image Insight HTTP API.

Callers hold an :class:`ApiSession` returned by ``signup``/``login`` and pass it
to every authenticated call; the client itself keeps no auth state.

    async with ImageInsightClient("http://localhost:3000/api") as client:
        session = await client.login("me@example.com", "secret123")
        result = await client.analyze_image(session, image_base64)
        history = await client.get_history(session)
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class ApiClientError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass(frozen=True)
class ApiSession:
    token: Optional[str] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


ANONYMOUS = ApiSession()


class ImageInsightClient:
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, http: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._http = http
        self._owns_http = http is None

    async def __aenter__(self) -> "ImageInsightClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.close()
        self._http = None

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None:
            self._http = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_http = True
        return self._http

    async def _request(self, method: str, path: str, session: Optional[ApiSession] = None, json: Optional[dict] = None, failure: str = "Request failed") -> Dict[str, Any]:
        headers = {}
        if session is not None:
            if not session.is_authenticated:
                raise ApiClientError("Not authenticated", status=401)
            headers["Authorization"] = f"Bearer {session.token}"

        try:
            async with self._session().request(method, f"{self.base_url}{path}", json=json, headers=headers, timeout=self.timeout) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = None
                status = response.status
        except asyncio.TimeoutError as e:
            raise ApiClientError("Request timed out") from e
        except aiohttp.ClientError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiClientError(failure) from e

        if not isinstance(payload, dict) or not payload.get("success") or status >= 400:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiClientError(message or failure, status=status)
        return payload

    def _session_from(self, payload: Dict[str, Any]) -> ApiSession:
        token = payload.get("token")
        if not token:
            raise ApiClientError("Server did not return a token")
        return ApiSession(token=token, user=payload.get("user") or {})

    async def signup(self, email: str, password: str) -> ApiSession:
        payload = await self._request("POST", "/auth/signup", json={"email": email, "password": password}, failure="Signup failed")
        return self._session_from(payload)

    async def login(self, email: str, password: str) -> ApiSession:
        payload = await self._request("POST", "/auth/login", json={"email": email, "password": password}, failure="Login failed")
        return self._session_from(payload)

    async def logout(self, session: ApiSession) -> ApiSession:
        # Tokens are stateless; dropping the session is all logout means
        return ANONYMOUS

    async def me(self, session: ApiSession) -> Dict[str, Any]:
        payload = await self._request("GET", "/auth/me", session=session, failure="Failed to load user")
        return payload["user"]

    async def analyze_image(self, session: ApiSession, image_base64: str) -> Dict[str, Any]:
        payload = await self._request("POST", "/analyze", session=session, json={"imageBase64": image_base64}, failure="Analysis failed")
        return payload["data"]

    async def get_history(self, session: ApiSession) -> List[Dict[str, Any]]:
        payload = await self._request("GET", "/history", session=session, failure="Failed to get history")
        return payload["data"]

    async def get_history_item(self, session: ApiSession, record_id: str) -> Dict[str, Any]:
        payload = await self._request("GET", f"/history/{record_id}", session=session, failure="Failed to get history item")
        return payload["data"]

    async def delete_history_item(self, session: ApiSession, record_id: str) -> None:
        await self._request("DELETE", f"/history/{record_id}", session=session, failure="Failed to delete history item")

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/health")
