"""Liveness probe: database reachability plus Discord bot configuration."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sakuraboard.core.config import AccessConfig, Settings, get_access_config, get_settings
from sakuraboard.core.database import check_db_connected, get_db
from sakuraboard.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    config: Annotated[AccessConfig, Depends(get_access_config)],
) -> HealthResponse:
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        discord_configured=bool(config.bot_token and config.guild_id),
    )
