"""
Configuration for the LogBin client.

Settings come from the environment, optionally seeded from a .env file.
"""
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "http://localhost:8080"


@dataclass(frozen=True)
class ClientConfig:
    """Runtime settings for watching and sending to channels"""
    server: str = DEFAULT_SERVER
    disconnect_grace_ms: int = 3000
    separator_gap_ms: int = 3000
    retry_ms: int = 3000
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    log_dir: Path = Path("app_log")
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def load_config(env_file: Optional[str] = None) -> ClientConfig:
    """
    Build a ClientConfig from the environment

    Args:
        env_file: Optional path to a .env file (default: search from cwd)

    Returns:
        ClientConfig with defaults for anything unset or invalid
    """
    load_dotenv(env_file)

    return ClientConfig(
        server=os.getenv("LOGBIN_SERVER", DEFAULT_SERVER).rstrip("/"),
        disconnect_grace_ms=_int_env("LOGBIN_DISCONNECT_GRACE_MS", 3000),
        separator_gap_ms=_int_env("LOGBIN_SEPARATOR_GAP_MS", 3000),
        retry_ms=_int_env("LOGBIN_RETRY_MS", 3000),
        connect_timeout=_float_env("LOGBIN_CONNECT_TIMEOUT", 10.0),
        read_timeout=_float_env("LOGBIN_READ_TIMEOUT", 30.0),
        log_dir=Path(os.getenv("LOGBIN_LOG_DIR", "app_log")),
        log_level=os.getenv("LOGBIN_LOG_LEVEL", "INFO").upper(),
    )
