"""Integration tests for CLI execution."""

import os
import subprocess
import sys
from pathlib import Path

# Project root for running tests
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "storefill", *args],
        cwd=PROJECT_ROOT,
        env={**os.environ, "PYTHONPATH": "src"},
        capture_output=True,
        text=True,
    )


def test_cli_shows_help() -> None:
    """Test that CLI shows help when --help flag used."""
    result = run_cli("--help")

    assert result.returncode == 0
    assert "Resolve placeholder images of generated storefronts" in result.stdout
    assert "resolve" in result.stdout
    assert "library" in result.stdout


def test_cli_init_config(isolated_config) -> None:
    """Test init-config writes the config file named by STOREFILL_CONFIG."""
    result = run_cli("init-config")

    assert result.returncode == 0
    assert isolated_config.exists()


def test_cli_library_summary_for_missing_file(tmp_path) -> None:
    """Test the library command fails cleanly for a missing file."""
    result = run_cli("library", "-l", str(tmp_path / "missing.json"))

    assert result.returncode == 1
    assert "Cannot read image library" in result.stderr
