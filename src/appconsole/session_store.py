"""
Session token storage.

A token's presence is treated as a valid session: there is no local expiry or
signature check. Reads and writes are synchronous so a login can confirm the
token is visible before redirecting.
"""

from pathlib import Path
from typing import Optional, Protocol

from appconsole.config import load_config, save_config
from appconsole.errors import AuthError


class SessionStore(Protocol):
    def get_token(self) -> Optional[str]: ...

    def has_valid_token(self) -> bool: ...

    def set_token(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStore:
    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def has_valid_token(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        self._token = token
        _confirm_written(self, token)

    def clear(self) -> None:
        self._token = None


class FileSessionStore:
    """Keeps the token under "access_token" in the console config file."""

    def __init__(self, path: Optional[Path] = None):
        self._path = path

    def get_token(self) -> Optional[str]:
        return load_config(self._path).get("access_token") or None

    def has_valid_token(self) -> bool:
        return self.get_token() is not None

    def set_token(self, token: str) -> None:
        cfg = load_config(self._path)
        save_config({**cfg, "access_token": token}, self._path)
        _confirm_written(self, token)

    def clear(self) -> None:
        cfg = load_config(self._path)
        cfg.pop("access_token", None)
        save_config(cfg, self._path)


def _confirm_written(store: SessionStore, token: str) -> None:
    if not token or store.get_token() != token:
        raise AuthError("session token was not stored")
