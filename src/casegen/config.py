"""
Process configuration for the casegen relay.

Values come from the environment, after loading a ``.env`` file from the
working directory if one exists. Settings are read once at startup and passed
explicitly to the app.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from casegen.error import ConfigError
from casegen.provider import DEFAULT_MODEL

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    model: str = DEFAULT_MODEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Builds Settings from ``environ`` (defaults to ``os.environ`` plus .env)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    api_key = (environ.get("GOOGLE_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError(
            "GOOGLE_API_KEY not found. Create a .env file in the project root "
            "and add your Google AI Studio API key: GOOGLE_API_KEY=YOUR_API_KEY_HERE"
        )

    port_raw = environ.get("PORT") or str(DEFAULT_PORT)
    try:
        port = int(port_raw)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {port_raw!r}")

    return Settings(
        google_api_key=api_key,
        model=environ.get("GEMINI_MODEL") or DEFAULT_MODEL,
        host=environ.get("HOST") or DEFAULT_HOST,
        port=port,
        log_level=environ.get("LOG_LEVEL") or "INFO",
    )
