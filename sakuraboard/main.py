"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sakuraboard.api.exception_handlers import setup_exception_handlers
from sakuraboard.api.v1 import router as api_router
from sakuraboard.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

app = FastAPI(
    title="SakuraBoard API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# The credential travels as a cookie, so the frontend origin must be explicit.
allowed_origins = [settings.FRONTEND_URL]
if settings.TUNER_FRONTEND_URL:
    allowed_origins.append(settings.TUNER_FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "SakuraBoard API"}
