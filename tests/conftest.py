"""Test environment: the app module builds its engine at import, so point it at SQLite first."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")
os.environ.setdefault("TUNER_FRONTEND_URL", "http://tuner.test")
