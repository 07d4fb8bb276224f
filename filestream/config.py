"""Configuration management for the file streaming service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .common.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_FRONTEND_DIR,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from .utils import ConfigError, get_io_buffer_size, parse_log_level

ENV_DATA_ROOT = "FILESTREAM_DATA_ROOT"
ENV_FRONTEND_DIR = "FILESTREAM_FRONTEND_DIR"
ENV_HOST = "FILESTREAM_HOST"
ENV_PORT = "FILESTREAM_PORT"
ENV_LOG_LEVEL = "FILESTREAM_LOG_LEVEL"


def _env_path() -> Path:
    return Path.cwd() / ".env"


@dataclass(frozen=True)
class Config:
    """Service configuration."""

    data_root: Path
    frontend_dir: Path
    host: str
    port: int
    buffer_size: int
    log_level: int


def _parse_port(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for {ENV_PORT}.") from exc
    if not 0 < parsed < 65536:
        raise ConfigError(f"{ENV_PORT} must be between 1 and 65535.")
    return parsed


def _resolve_dir(value: str) -> Path:
    return Path(value).expanduser().resolve()


def load_config(env_file: Optional[Path] = None) -> Config:
    """
    Load and validate configuration from the environment.

    Values already present in the environment take precedence over the
    ``.env`` file.

    Args:
        env_file: Optional ``.env`` path; defaults to ``./.env``.

    Returns:
        Config instance.
    """
    env_file = env_file or _env_path()
    if env_file.exists():
        load_dotenv(env_file)

    data_root = os.getenv(ENV_DATA_ROOT, DEFAULT_DATA_ROOT).strip()
    frontend_dir = os.getenv(ENV_FRONTEND_DIR, DEFAULT_FRONTEND_DIR).strip()
    host = os.getenv(ENV_HOST, DEFAULT_HOST).strip()
    port = os.getenv(ENV_PORT, str(DEFAULT_PORT)).strip()
    log_level = os.getenv(ENV_LOG_LEVEL, "INFO")

    if not data_root:
        raise ConfigError(f"{ENV_DATA_ROOT} must not be empty.")

    return Config(
        data_root=_resolve_dir(data_root),
        frontend_dir=_resolve_dir(frontend_dir or DEFAULT_FRONTEND_DIR),
        host=host or DEFAULT_HOST,
        port=_parse_port(port),
        buffer_size=get_io_buffer_size(),
        log_level=parse_log_level(log_level),
    )
