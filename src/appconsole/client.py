"""
AdminConsole / AsyncAdminConsole — main clients.
"""

import asyncio
from typing import Any, Optional

import httpx

from appconsole.apps import ApplicationsAPI
from appconsole.auth import Auth
from appconsole.config import DEFAULT_BASE_URL
from appconsole.gate import MountScope, Navigator, Notifier, SessionGate, SessionState
from appconsole.members import MembersAPI
from appconsole.session_store import MemorySessionStore, SessionStore
from appconsole.system import SystemAPI
from appconsole.transport.http import HttpClient


class AsyncAdminConsole:
    """Async administration client (primary)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session_store: Optional[SessionStore] = None,
        access_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        if session_store is None:
            session_store = MemorySessionStore(access_token)
        elif access_token:
            session_store.set_token(access_token)
        self.session_store = session_store

        self.http = HttpClient(base_url=base_url, store=session_store, transport=transport, timeout=timeout)
        self.auth = Auth(self.http)
        self.system = SystemAPI(self.http)
        self.apps = ApplicationsAPI(self.http)
        self.members = MembersAPI(self.http)

    @property
    def base_url(self) -> str:
        return self.http.base_url

    def gate(
        self,
        scope: Optional[MountScope] = None,
        navigator: Optional[Navigator] = None,
        notifier: Optional[Notifier] = None,
    ) -> SessionGate:
        """A session gate for one mount of a protected view."""
        return SessionGate(
            self.session_store, self.system, scope=scope, navigator=navigator, notifier=notifier,
        )

    async def session_state(self) -> SessionState:
        return await self.gate().resolve()

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncAdminConsole":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class AdminConsole:
    """Sync wrapper around AsyncAdminConsole. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncAdminConsole(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def auth(self) -> Auth:
        return self._async.auth

    @property
    def session_store(self) -> SessionStore:
        return self._async.session_store

    def login(self, username: str, password: str) -> dict[str, Any]:
        return self._run(self._async.auth.login(username, password))

    def logout(self) -> None:
        self._async.auth.logout()

    def session_state(self) -> SessionState:
        return self._run(self._async.session_state())

    def init_status(self) -> bool:
        return self._run(self._async.system.get_init_status()).initialized

    def list_apps(self) -> list:
        return self._run(self._async.apps.list())

    def versions(self, app_id: int) -> list:
        return self._run(self._async.apps.versions(app_id))

    def release(self, app_id: int, version: str, changelog_md: str, baseline: Optional[str] = None) -> Any:
        return self._run(self._async.apps.release(app_id, version, changelog_md, baseline=baseline))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
