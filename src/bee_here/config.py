"""Configuration loaded from the environment and an optional ``.env`` file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .utils.logger import debug_detail, get_logger

LOGGER = get_logger("config")

DEFAULT_TIMEOUT = 30.0

ENV_TEMPLATE = """
# Base URL of the attendance REST service (trailing slash optional)
API_URL=""

# JWT issued by the login view
BEE_HERE_TOKEN=""

# Seconds before a request is abandoned; 0 waits forever
REQUEST_TIMEOUT=30
""".lstrip()


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


@dataclass
class Config:
    # Names mirror .env keys for clarity
    API_URL: str
    BEE_HERE_TOKEN: str
    REQUEST_TIMEOUT: Optional[float]


def ensure_env_file(path: Path) -> None:
    """Create a commented ``.env`` template if missing (no overwrite)."""
    if path.exists():
        return
    path.write_text(ENV_TEMPLATE, encoding="utf-8")
    LOGGER.info("Created default .env at %s; please review.", path)


def normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"API_URL must be an http(s) URL, got {url!r}")
    return url if url.endswith("/") else url + "/"


def getenv_float(name: str, default: float) -> Optional[float]:
    """Return a float setting; ``0`` or a negative value means no limit."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    return value if value > 0 else None


def load_config(
    env_file: Optional[Path | str] = None,
    *,
    api_url: Optional[str] = None,
    token: Optional[str] = None,
) -> Config:
    """Load settings; explicit arguments win over the environment and ``.env``."""
    path = Path(env_file or os.getenv("ENV_FILE", ".env"))
    load_dotenv(dotenv_path=path)

    base_url = api_url or os.getenv("API_URL")
    if not base_url:
        raise ConfigError(f"API_URL is not set (checked the environment and {path})")

    bearer = token if token is not None else os.getenv("BEE_HERE_TOKEN", "")
    if not bearer:
        LOGGER.warning("BEE_HERE_TOKEN is empty; the service will reject the requests.")

    config = Config(
        API_URL=normalize_base_url(base_url),
        BEE_HERE_TOKEN=bearer,
        REQUEST_TIMEOUT=getenv_float("REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
    )
    debug_detail(f"Using API_URL={config.API_URL} timeout={config.REQUEST_TIMEOUT}")
    return config
