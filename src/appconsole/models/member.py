"""
Member level models — /member/levels.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MemberLevel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    app_id: Optional[int] = Field(None, alias="appId")
    name: str
    level: int
    permissions: str = "{}"
    created_at: str = Field("", alias="createdAt")
