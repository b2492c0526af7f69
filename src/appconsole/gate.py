"""
Session gate for protected views.

Every protected command resolves exactly one of NEEDS_INIT, NEEDS_LOGIN or
READY before it renders anything:

    token present                        -> READY        (no network call)
    no token, init status initialized    -> NEEDS_LOGIN  (navigate to login)
    no token, init status not initialized -> NEEDS_INIT  (navigate to init)
    no token, init status check fails    -> NEEDS_INIT   (plus one notice)

A resolution that completes after its MountScope was unmounted is dropped:
no navigation, notice, state change or render happens.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from appconsole.errors import SessionResolutionFailure
from appconsole.models.system import InitStatus
from appconsole.session_store import SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

Navigator = Callable[["View"], None]
Notifier = Callable[[str], None]


class SessionState(str, Enum):
    RESOLVING = "resolving"
    NEEDS_INIT = "needs_init"
    NEEDS_LOGIN = "needs_login"
    READY = "ready"


class View(str, Enum):
    INIT = "init"
    LOGIN = "login"


class InitStatusProvider(Protocol):
    async def get_init_status(self) -> InitStatus: ...


class MountScope:
    """Liveness flag for one mount of a view. Unmounting is final."""

    def __init__(self) -> None:
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def unmount(self) -> None:
        self._alive = False

    def __enter__(self) -> MountScope:
        return self

    def __exit__(self, *exc: object) -> None:
        self.unmount()


def _log_navigation(view: View) -> None:
    logger.info("redirect to %s view", view.value)


def _log_notice(message: str) -> None:
    logger.warning(message)


class SessionGate:
    def __init__(
        self,
        store: SessionStore,
        init_status: InitStatusProvider,
        scope: Optional[MountScope] = None,
        navigator: Optional[Navigator] = None,
        notifier: Optional[Notifier] = None,
    ):
        self._store = store
        self._init_status = init_status
        self._scope = scope or MountScope()
        self._navigate = navigator or _log_navigation
        self._notify = notifier or _log_notice
        self._state = SessionState.RESOLVING
        self._pending: Optional[asyncio.Future[SessionState]] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def scope(self) -> MountScope:
        return self._scope

    async def resolve(self) -> SessionState:
        """Resolve once per mount. Concurrent callers share the same resolution."""
        if self._state is not SessionState.RESOLVING:
            return self._state
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._resolve())
        return await asyncio.shield(self._pending)

    async def guard(self, render: Callable[[], Awaitable[T]]) -> Optional[T]:
        """Run render() only if the session is READY and the mount is still alive."""
        state = await self.resolve()
        if state is not SessionState.READY or not self._scope.alive:
            return None
        return await render()

    async def _resolve(self) -> SessionState:
        if not self._scope.alive:
            return self._discard()

        # Token check never suspends and runs before any network call.
        if self._store.has_valid_token():
            return self._enter(SessionState.READY)

        try:
            status = await self._init_status.get_init_status()
        except Exception as e:
            if not self._scope.alive:
                return self._discard()
            failure = SessionResolutionFailure(f"Failed to check system status: {e}", cause=e)
            logger.debug("init status check failed", exc_info=e)
            self._notify(str(failure))
            return self._enter(SessionState.NEEDS_INIT)

        if not self._scope.alive:
            return self._discard()
        if status.initialized:
            return self._enter(SessionState.NEEDS_LOGIN)
        return self._enter(SessionState.NEEDS_INIT)

    def _enter(self, state: SessionState) -> SessionState:
        self._state = state
        logger.debug("session resolved: %s", state.value)
        if state is SessionState.NEEDS_INIT:
            self._navigate(View.INIT)
        elif state is SessionState.NEEDS_LOGIN:
            self._navigate(View.LOGIN)
        return state

    def _discard(self) -> SessionState:
        logger.debug("view unmounted before session resolved; dropping result")
        return SessionState.RESOLVING
