"""Health probe response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = Field(
        default="ok", description="degraded when the database is unreachable"
    )
    environment: str
    database: Literal["connected", "disconnected"]
    discord_configured: bool = Field(
        description="Bot token and guild id are set, so role lookups can run",
    )
