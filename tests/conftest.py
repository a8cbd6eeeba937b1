"""Pytest configuration and fixtures for storefill tests."""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from storefill.config import reset_config_cache


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Generator[Path]:
    """Point every test at its own (absent) config file and clear env overrides."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("STOREFILL_CONFIG", str(config_path))
    for name in (
        "STOREFILL_LIBRARY_PATH",
        "STOREFILL_THRESHOLD",
        "STOREFILL_FALLBACK_URL",
        "STOREFILL_SCHEME",
        "STOREFILL_EMBEDDING_PROVIDER",
        "STOREFILL_EMBEDDING_MODEL",
        "STOREFILL_EMBEDDING_TIMEOUT",
        "STOREFILL_MAX_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)

    reset_config_cache()
    yield config_path
    reset_config_cache()
