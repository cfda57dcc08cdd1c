"""Centralized configuration constants for the package.

Service settings come from the environment; model constants live in
small classes grouped by concern.
"""

from __future__ import annotations

import os

# Environment mode
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

# CORS configuration
# In production, restrict to specific origins; in development, allow localhost
_cors_origins_env = os.environ.get("CORS_ORIGINS", "")
if _cors_origins_env:
    CORS_ORIGINS: list[str] = [origin.strip() for origin in _cors_origins_env.split(",")]
elif IS_PRODUCTION:
    # Production requires explicit CORS_ORIGINS to be set
    CORS_ORIGINS = []
else:
    # Development defaults
    CORS_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]

# Load the built-in sample games into the store at startup
LOAD_SAMPLE_GAMES = os.environ.get("LOAD_SAMPLE_GAMES", "1") not in ("0", "false", "no")

DEFAULT_HOST = os.environ.get("GAMETREE_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.environ.get("GAMETREE_PORT", "8000"))


class TreeConfig:
    """Constants for building extensive-form trees."""

    CHANCE_PLAYER_NAME = "Chance"
    DEFAULT_NUM_ACTIONS = 2


class NormalFormConfig:
    """Constants for deriving the strategic form."""

    # Profile counts above this get a warning in summaries
    PROFILE_COUNT_WARNING_THRESHOLD = 100
    # Enumerating all contingencies over HTTP is refused above this
    ENUMERATION_LIMIT = 10_000
    # Outcome tables are never built above this
    MATERIALIZE_LIMIT = 1_000_000


class StoreConfig:
    """Constants for the in-memory game store."""

    GAME_ID_LENGTH = 8
