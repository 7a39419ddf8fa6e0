#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the export2tex test suite."""

import logging
from pathlib import Path

import pytest

from export2tex.options import TexExportSettings


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")


@pytest.fixture
def settings() -> TexExportSettings:
    """Default export settings."""
    return TexExportSettings()


@pytest.fixture
def minimal_preamble() -> str:
    """A preamble missing every required package."""
    return "\\documentclass{article}\n\\usepackage{graphicx}\n"


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty directory with no settings file above it.

    ``HOME`` is pointed at the directory as well so home-directory settings
    files of the machine running the tests are never discovered.

    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("EXPORT2TEX_CONFIG", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handler changes made by the CLI's logging setup."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
