"""
Applications REST API — /apps and /apps/{id}/versions.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from appconsole.changelog import validate_changelog
from appconsole.errors import ConsoleError, ValidationError
from appconsole.models.app import Application, AppVersion, CreateVersionRequest
from appconsole.transport.http import HttpClient, parse_payload, parse_payload_list
from appconsole.versioning import check_release

logger = logging.getLogger(__name__)

APP_NAME_PATTERN = re.compile(r"[a-zA-Z0-9\u4e00-\u9fa5_-]+")
# Baseline for an application that has never been released.
INITIAL_BASELINE = "0.0.0"


def validate_app_form(name: str, description: str = "") -> None:
    if not name or len(name) < 2:
        raise ValidationError("application name must be at least 2 characters", field="name")
    if len(name) > 20:
        raise ValidationError("application name is limited to 20 characters", field="name")
    if not APP_NAME_PATTERN.fullmatch(name):
        raise ValidationError(
            "application name may only contain letters, digits, CJK characters, '_' and '-'",
            field="name",
        )
    if description and len(description) > 200:
        raise ValidationError("description is limited to 200 characters", field="description")


class ApplicationsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self) -> list[Application]:
        data = await self._http.get("/apps")
        if data is None:
            raise ConsoleError("invalid_response", "empty /apps payload")
        return parse_payload_list(Application, data)

    async def get(self, app_id: int) -> Application:
        return parse_payload(Application, await self._http.get(f"/apps/{app_id}"))

    async def create(self, name: str, description: str = "") -> Application:
        validate_app_form(name, description)
        data = await self._http.post("/apps", {"name": name, "description": description})
        return parse_payload(Application, data)

    async def delete(self, app_id: int) -> None:
        await self._http.delete(f"/apps/{app_id}")

    async def versions(self, app_id: int) -> list[AppVersion]:
        data = await self._http.get(f"/apps/{app_id}/versions")
        return parse_payload_list(AppVersion, data)

    async def release(
        self, app_id: int, version: str, changelog_md: str, baseline: Optional[str] = None,
    ) -> AppVersion:
        """
        Publish a new version.

        The candidate must be a strict upgrade of the baseline (the app's
        latestVersion unless given). Rejections raise before anything is sent.
        """
        if baseline is None:
            app = await self.get(app_id)
            baseline = app.latest_version or INITIAL_BASELINE
        check_release(version, baseline).raise_for_rejection()
        validate_changelog(changelog_md)

        request = CreateVersionRequest(version=version, changelog_md=changelog_md)
        data = await self._http.post(f"/apps/{app_id}/versions", request.model_dump(by_alias=True))
        logger.info("released app %s version %s (was %s)", app_id, version, baseline)
        return parse_payload(AppVersion, data)
