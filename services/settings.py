"""
Runtime settings.

Values are read from the environment after loading the project's `.env` file.

Environment variables (all optional):
- EXCLUDED_DEVELOPMENTS: comma-separated development names dropped from
  campaign rollups (default: "Internal Test")
- EXCLUDED_PLATFORMS: comma-separated campaign platforms dropped before
  grouping (default: "Audience Network")
- CORS_ORIGINS: comma-separated allowed origins for the API (default: "*")
- LOG_LEVEL: logging level name (default: "INFO")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_EXCLUDED_DEVELOPMENTS = ("Internal Test",)
DEFAULT_EXCLUDED_PLATFORMS = ("Audience Network",)

# Look for .env in the project root
env_path = Path(__file__).parent.parent / ".env"


def _split_csv(value: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    excluded_developments: Tuple[str, ...] = DEFAULT_EXCLUDED_DEVELOPMENTS
    excluded_platforms: Tuple[str, ...] = DEFAULT_EXCLUDED_PLATFORMS
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load `.env` (without overriding real environment variables) and build Settings."""

    load_dotenv(dotenv_path=env_path)

    return Settings(
        excluded_developments=_split_csv(
            os.getenv("EXCLUDED_DEVELOPMENTS"), DEFAULT_EXCLUDED_DEVELOPMENTS
        ),
        excluded_platforms=_split_csv(
            os.getenv("EXCLUDED_PLATFORMS"), DEFAULT_EXCLUDED_PLATFORMS
        ),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS"), ("*",)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


__all__ = [
    "DEFAULT_EXCLUDED_DEVELOPMENTS",
    "DEFAULT_EXCLUDED_PLATFORMS",
    "Settings",
    "load_settings",
]
