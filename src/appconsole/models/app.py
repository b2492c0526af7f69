"""
Application and release models — /apps and /apps/{id}/versions.
"""

from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class AppVersion(BaseModel):
    """A published release of an application."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    app_id: int = Field(alias="appId")
    version: str
    changelog_md: str = Field("", alias="changelogMd")
    changelog_html: str = Field("", alias="changelogHtml")
    created_at: str = Field("", alias="createdAt")


class Application(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str = ""
    latest_version: str = Field("", alias="latestVersion")
    status: Literal["active", "maintenance", "deprecated"] = "active"
    api_key: str = Field("", alias="apiKey")
    created_at: str = Field("", alias="createdAt")
    updated_at: str = Field("", alias="updatedAt")
    versions: Optional[list[AppVersion]] = None


class CreateVersionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str
    changelog_md: str = Field(alias="changelogMd")
