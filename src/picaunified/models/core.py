"""Request-side data models for the unified API."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class RequestOptions:
    """Per-call extras merged on top of the computed request.

    Passthrough headers and query parameters are applied last, so they win
    over anything the client computed (including the connection header).
    """

    passthrough_headers: Dict[str, str] = field(default_factory=dict)
    passthrough_query: Dict[str, str] = field(default_factory=dict)


class ListFilter(BaseModel):
    """Structured filter for list operations.

    Known fields are sent under their camelCase names. Any extra field is
    treated as a field filter and sent as-is.
    """

    created_after: Optional[datetime] = Field(None, alias="createdAfter")
    created_before: Optional[datetime] = Field(None, alias="createdBefore")
    updated_after: Optional[datetime] = Field(None, alias="updatedAfter")
    updated_before: Optional[datetime] = Field(None, alias="updatedBefore")
    limit: Optional[int] = Field(None, ge=1)
    cursor: Optional[str] = None
    sort_by: Optional[str] = Field(None, alias="sortBy")
    sort_order: Optional[str] = Field(None, alias="sortOrder", pattern="^(asc|desc)$")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class UnifiedEntity(BaseModel):
    """Base shape of a unified resource record.

    Unified models share identifiers and timestamps; everything else is
    resource-specific and kept as extra fields.
    """

    id: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, extra="allow")
