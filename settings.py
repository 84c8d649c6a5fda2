"""
settings.py — Runtime configuration for the dish cards server.

This is the only module that reads environment variables. A `.env` file in
the project root is loaded when present; variables already set in the
environment take precedence.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from card_database import parse_int
from card_layout import ORDERINGS

PROJECT_ROOT = Path(__file__).resolve().parent
ENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_IMG_SOURCE = "/static/images"
DEFAULT_ORDERING = "hint"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8083


@dataclass(frozen=True)
class Settings:
    img_source: str
    ordering: str
    host: str
    port: int
    log_level: str


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else default


def get_settings(env_path: Optional[Path] = ENV_PATH) -> Settings:
    """Build settings from the environment (and `.env`, if any)."""
    if env_path is not None and env_path.exists():
        load_dotenv(env_path, override=False)

    ordering = (_getenv("CARD_ORDERING", DEFAULT_ORDERING) or DEFAULT_ORDERING).lower()
    if ordering not in ORDERINGS:
        raise ValueError(
            f"CARD_ORDERING must be one of {', '.join(ORDERINGS)}, got {ordering!r}"
        )

    port_raw = _getenv("PORT", str(DEFAULT_PORT))
    try:
        port = parse_int(port_raw)
    except (TypeError, ValueError):
        raise ValueError(f"PORT must be an integer, got {port_raw!r}") from None

    return Settings(
        img_source=_getenv("IMG_SOURCE", DEFAULT_IMG_SOURCE) or DEFAULT_IMG_SOURCE,
        ordering=ordering,
        host=_getenv("HOST", DEFAULT_HOST) or DEFAULT_HOST,
        port=port,
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
