"""
Auth module — username/password login against /auth.

The token is written to the session store and read back before login()
returns, so a caller can redirect straight to a protected view.
"""

import logging
from typing import Any

from appconsole.transport.http import HttpClient
from appconsole.errors import AuthError, ConsoleError

logger = logging.getLogger(__name__)


class Auth:
    def __init__(self, http: HttpClient):
        self._http = http

    async def login(self, username: str, password: str) -> dict[str, Any]:
        """Log in and store the session token. Returns {"token": ..., "user": {...}}."""
        try:
            result = await self._http.post(
                "/auth/login", {"username": username, "password": password}, authenticated=False,
            )
        except ConsoleError as e:
            raise AuthError(f"Login failed: {e}") from e
        token = (result or {}).get("token")
        if not token:
            raise AuthError("Login failed: no token in response")
        self._http.store.set_token(token)
        logger.info("logged in as %s", username)
        return result

    async def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        try:
            return await self._http.post(
                "/auth/register",
                {"username": username, "email": email, "password": password},
                authenticated=False,
            )
        except ConsoleError as e:
            raise AuthError(f"Registration failed: {e}") from e

    def logout(self) -> None:
        self._http.store.clear()

    def is_authenticated(self) -> bool:
        return self._http.store.has_valid_token()
