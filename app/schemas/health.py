"""Pydantic schema for the health check response."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Body of GET /health. Not wrapped in the API envelope so probes stay simple."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: Literal["dev", "prod"] = Field(description="APP_ENV of the running service")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against the configured database",
    )
    version: str = Field(default="1.0.0", description="API version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Server time of the check")
