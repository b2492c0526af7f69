"""
System REST API — initialization status, first administrator, telemetry.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from appconsole.errors import ValidationError
from appconsole.models.system import AuditLogEntry, CacheStats, InitStatus, PerformanceStats
from appconsole.transport.http import HttpClient, parse_payload, parse_payload_list

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def validate_admin_form(
    username: str, email: str, password: str, confirm_password: Optional[str] = None,
) -> None:
    """Raise ValidationError for the first field that breaks the init form rules."""
    if not username or len(username) < 3:
        raise ValidationError("username must be at least 3 characters", field="username")
    if not email or not EMAIL_PATTERN.fullmatch(email):
        raise ValidationError("enter a valid email address", field="email")
    if not password or len(password) < 6:
        raise ValidationError("password must be at least 6 characters", field="password")
    if confirm_password is not None and confirm_password != password:
        raise ValidationError("passwords do not match", field="confirmPassword")


class SystemAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def get_init_status(self) -> InitStatus:
        """Whether an administrator exists. Unauthenticated."""
        data = await self._http.get("/system/init-status", authenticated=False)
        return parse_payload(InitStatus, data or {})

    async def init_admin(
        self, username: str, email: str, password: str, confirm_password: Optional[str] = None,
    ) -> dict[str, Any]:
        """Create the first administrator account."""
        validate_admin_form(username, email, password, confirm_password)
        return await self._http.post(
            "/system/init",
            {"username": username, "email": email, "password": password},
            authenticated=False,
        )

    async def audit_logs(self) -> list[AuditLogEntry]:
        data = await self._http.get("/system/audit-logs")
        return parse_payload_list(AuditLogEntry, data)

    async def performance_stats(self) -> PerformanceStats:
        return parse_payload(PerformanceStats, await self._http.get("/system/performance/stats") or {})

    async def reset_performance_stats(self) -> None:
        await self._http.post("/system/performance/reset")

    async def cache_stats(self) -> CacheStats:
        return parse_payload(CacheStats, await self._http.get("/system/cache/stats") or {})

    async def clear_cache(self) -> None:
        await self._http.delete("/system/cache/clear")
