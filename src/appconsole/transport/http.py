"""
REST HTTP client for the administration backend (/api/v1).

Responses are wrapped as {"code": 200, "message": "...", "data": <payload>}.
"""

import json
import logging
from typing import Any, Optional, Type, TypeVar

import httpx
import pydantic

from appconsole.config import DEFAULT_BASE_URL
from appconsole.errors import AuthError, ConnectionError, ConsoleError
from appconsole.session_store import MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
USER_AGENT = "appconsole/0.1.0"

M = TypeVar("M", bound=pydantic.BaseModel)


def parse_payload(model: Type[M], data: Any) -> M:
    """Validate a response payload, raising ConsoleError when it does not fit the model."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConsoleError(
            "invalid_response",
            f"unexpected {model.__name__} payload: {e.error_count()} validation error(s)",
            {"model": model.__name__},
        ) from e


def parse_payload_list(model: Type[M], data: Any) -> list[M]:
    """Validate a list payload; a missing payload is an empty list."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConsoleError(
            "invalid_response",
            f"expected a list of {model.__name__}, got {type(data).__name__}",
            {"model": model.__name__},
        )
    return [parse_payload(model, item) for item in data]


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        store: Optional[SessionStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self.store: SessionStore = store if store is not None else MemorySessionStore()
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}{API_PREFIX}",
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _auth_headers(self, authenticated: bool) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        token = self.store.get_token() if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _unwrap(json_data: Any) -> Any:
        """Unwrap the backend envelope: { "code": 200, "message": "...", "data": <actual_data> }"""
        if not (isinstance(json_data, dict) and "code" in json_data and "message" in json_data):
            return json_data
        data = json_data.get("data")
        if isinstance(data, str) and "from cache" in str(json_data["message"]):
            # Cached listings carry their payload as serialized JSON text.
            return json.loads(data)
        return data

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text[:200]
        if isinstance(body, dict):
            return body.get("error") or body.get("message") or resp.text[:200]
        return resp.text[:200]

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        params: Optional[dict[str, str]] = None,
        authenticated: bool = True,
    ) -> Any:
        try:
            resp = await self._client.request(
                method, path, json=body, params=params, headers=self._auth_headers(authenticated),
            )
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, path, e)
            raise ConnectionError(f"{method} {path} failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        if resp.status_code == 401 and authenticated:
            # The stored token is no longer accepted; force a fresh login.
            self.store.clear()
            raise AuthError(f"HTTP 401: {self._error_message(resp)}", code="unauthorized")
        if resp.status_code >= 400:
            raise ConsoleError(
                "http_error",
                f"HTTP {resp.status_code}: {self._error_message(resp)}",
                {"status": resp.status_code},
            )
        if not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError as e:
            raise ConsoleError(
                "invalid_response",
                f"{method} {path}: response is not JSON (is the base URL the backend?)",
                {"status": resp.status_code},
            ) from e
        return self._unwrap(body)

    async def get(self, path: str, params: Optional[dict[str, str]] = None, authenticated: bool = True) -> Any:
        return await self._request("GET", path, params=params, authenticated=authenticated)

    async def post(self, path: str, body: Optional[Any] = None, authenticated: bool = True) -> Any:
        return await self._request("POST", path, body=body, authenticated=authenticated)

    async def put(self, path: str, body: Optional[Any] = None, authenticated: bool = True) -> Any:
        return await self._request("PUT", path, body=body, authenticated=authenticated)

    async def delete(self, path: str, params: Optional[dict[str, str]] = None, authenticated: bool = True) -> Any:
        return await self._request("DELETE", path, params=params, authenticated=authenticated)

    async def close(self) -> None:
        await self._client.aclose()
