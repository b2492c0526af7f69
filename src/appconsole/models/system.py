"""
System models — init status, audit log, performance and cache telemetry.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class InitStatus(BaseModel):
    initialized: bool = False


class AuditLogEntry(BaseModel):
    """One row of /system/audit-logs. Display only."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    user_id: str = Field("", alias="userId")
    user_name: str = Field("", alias="userName")
    action: str = ""
    entity_type: Optional[str] = Field(None, alias="entityType")
    entity_id: Optional[str] = Field(None, alias="entityId")
    entity_name: Optional[str] = Field(None, alias="entityName")
    details: Optional[Any] = None
    ip_address: str = Field("", alias="ipAddress")
    timestamp: Optional[str] = None
    status: str = "success"
    created_at: str = Field("", alias="createdAt")

    @property
    def actor(self) -> str:
        return self.user_name or self.user_id

    @property
    def target(self) -> str:
        return " ".join(p for p in (self.entity_type, self.entity_name) if p)


class PerformanceStats(BaseModel):
    """Request timing counters; the backend may add keys, they are kept as extras."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_requests: Optional[int] = Field(None, alias="totalRequests")
    average_response_time: Optional[float] = Field(None, alias="averageResponseTime")
    slow_requests: Optional[int] = Field(None, alias="slowRequests")
    error_count: Optional[int] = Field(None, alias="errorCount")


class CacheStats(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_keys: Optional[int] = Field(None, alias="totalKeys")
    memory_usage: Optional[str] = Field(None, alias="memoryUsage")
    hit_rate: Optional[float] = Field(None, alias="hitRate")
