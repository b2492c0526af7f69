"""
Member levels REST API — /member/levels.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Union

import pydantic

from appconsole.errors import ValidationError
from appconsole.models.member import MemberLevel
from appconsole.transport.http import HttpClient, parse_payload_list


def default_permissions() -> str:
    return json.dumps(
        {"features": ["basic"], "limits": {"api_calls": 1000, "storage": "1GB"}, "restrictions": []},
        indent=2,
    )


def normalize_levels(levels: Iterable[Union[MemberLevel, dict[str, Any]]]) -> list[MemberLevel]:
    """Check each level's permissions JSON and renumber levels 1..n in order."""
    result = []
    for index, raw in enumerate(levels, start=1):
        try:
            level = raw if isinstance(raw, MemberLevel) else MemberLevel.model_validate(raw)
        except pydantic.ValidationError as e:
            raise ValidationError(f"level {index}: {e.errors()[0]['msg']}", field="levels") from e
        if not level.name:
            raise ValidationError(f"level {index}: name is required", field="name")
        try:
            permissions = json.loads(level.permissions)
        except json.JSONDecodeError as e:
            raise ValidationError(f"level {level.name!r}: permissions are not valid JSON ({e.msg})", field="permissions") from e
        if not isinstance(permissions, dict):
            raise ValidationError(f"level {level.name!r}: permissions must be a JSON object", field="permissions")
        result.append(level.model_copy(update={"level": index}))
    return result


class MembersAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def levels(self) -> list[MemberLevel]:
        data = await self._http.get("/member/levels")
        if isinstance(data, dict):
            data = data.get("levels", [])
        return parse_payload_list(MemberLevel, data)

    async def update_levels(self, levels: Iterable[Union[MemberLevel, dict[str, Any]]]) -> list[MemberLevel]:
        normalized = normalize_levels(levels)
        payload = [level.model_dump(by_alias=True, exclude_none=True) for level in normalized]
        data = await self._http.put("/member/levels", {"levels": payload})
        return parse_payload_list(MemberLevel, data)
