"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config loader at an empty temporary location."""
    config_path = tmp_path / "config.yaml"
    monkeypatch.setenv("TODOTXT_CONFIG", str(config_path))
    return config_path
