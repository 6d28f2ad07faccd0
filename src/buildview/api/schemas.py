from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every failed v3 call."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field("error", alias="@type")
    error_type: str
    error_message: str
    resource_type: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"


class ReadinessResponse(BaseModel):
    status: str = "ok"
    store: str = "up"
