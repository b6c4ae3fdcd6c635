"""Map service exceptions to HTTP responses with a consistent {"detail": ...} body."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from sakuraboard.services.board import BoardNotFoundError, BoardValidationError
from sakuraboard.services.discord_client import DiscordApiError, DiscordNotFoundError
from sakuraboard.services.tuner_exam import TunerExamStateError

logger = logging.getLogger(__name__)


async def board_not_found_handler(request: Request, exc: BoardNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


async def board_validation_handler(request: Request, exc: BoardValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message},
    )


async def tuner_exam_state_handler(request: Request, exc: TunerExamStateError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})


async def discord_error_handler(request: Request, exc: DiscordApiError) -> JSONResponse:
    """Discord failures on pass-through calls (member list, moderation)."""
    if isinstance(exc, DiscordNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})
    logger.error(
        "Discord request failed",
        extra={"path": request.url.path, "status_code": exc.status_code, "reason": exc.message[:500]},
    )
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": exc.message})


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Generic 500; the request's session is closed (and rolled back) by get_db."""
    logger.exception("Database error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BoardNotFoundError, board_not_found_handler)
    app.add_exception_handler(BoardValidationError, board_validation_handler)
    app.add_exception_handler(TunerExamStateError, tuner_exam_state_handler)
    app.add_exception_handler(DiscordApiError, discord_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
