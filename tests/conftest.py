"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from formatdiff.config import reset_config
from tests.fakes import FakeRunner


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def temp_workspace():
    """Create a temporary workspace directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def isolated_environment(temp_workspace, monkeypatch):
    """Isolate tests from system environment."""
    monkeypatch.chdir(temp_workspace)

    env_vars_to_clear = [
        "CLANG_FORMAT_DIFF",
        "PYTHON",
        "FORMATDIFF_BASE",
        "FORMATDIFF_STYLE",
        "FORMATDIFF_STRIP",
        "FORMATDIFF_PATHS",
        "FORMATDIFF_PROBE_TIMEOUT",
        "FORMATDIFF_LOG_FORMAT",
        "FORMATDIFF_COMMAND_NAMES",
        "FORMATDIFF_SCRIPT_NAME",
        "FORMATDIFF_REQUIRED_MODULES",
    ]

    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)

    reset_config()
    yield temp_workspace
    reset_config()
