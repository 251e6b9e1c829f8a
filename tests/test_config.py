"""
Unit tests for configuration loading
"""
import os
from pathlib import Path

import pytest

from logbin.config import DEFAULT_SERVER, ClientConfig, load_config

ENV_VARS = [
    "LOGBIN_SERVER",
    "LOGBIN_DISCONNECT_GRACE_MS",
    "LOGBIN_SEPARATOR_GAP_MS",
    "LOGBIN_RETRY_MS",
    "LOGBIN_CONNECT_TIMEOUT",
    "LOGBIN_READ_TIMEOUT",
    "LOGBIN_LOG_DIR",
    "LOGBIN_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep load_dotenv from picking up a stray .env
    monkeypatch.chdir(tmp_path)


def test_defaults(tmp_path):
    config = load_config(str(tmp_path / "missing.env"))
    assert config == ClientConfig()
    assert config.server == DEFAULT_SERVER
    assert config.disconnect_grace_ms == 3000
    assert config.separator_gap_ms == 3000


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("LOGBIN_SERVER", "https://logbin.example/")
    monkeypatch.setenv("LOGBIN_DISCONNECT_GRACE_MS", "500")
    monkeypatch.setenv("LOGBIN_READ_TIMEOUT", "45.5")
    monkeypatch.setenv("LOGBIN_LOG_DIR", "/tmp/logbin-logs")
    monkeypatch.setenv("LOGBIN_LOG_LEVEL", "debug")

    config = load_config(str(tmp_path / "missing.env"))

    assert config.server == "https://logbin.example"
    assert config.disconnect_grace_ms == 500
    assert config.read_timeout == 45.5
    assert config.log_dir == Path("/tmp/logbin-logs")
    assert config.log_level == "DEBUG"


def test_invalid_numbers_fall_back(monkeypatch, tmp_path):
    monkeypatch.setenv("LOGBIN_RETRY_MS", "soon")
    monkeypatch.setenv("LOGBIN_CONNECT_TIMEOUT", "fast")

    config = load_config(str(tmp_path / "missing.env"))

    assert config.retry_ms == 3000
    assert config.connect_timeout == 10.0


def test_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("LOGBIN_SEPARATOR_GAP_MS=1000\n")

    try:
        config = load_config(str(env_file))
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("LOGBIN_SEPARATOR_GAP_MS", None)

    assert config.separator_gap_ms == 1000
