"""Fixtures for CLI integration tests."""

from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from an empty workspace with a clean environment.

    Returns:
        Path: Path to the workspace root
    """
    workspace = tmp_path / "test_workspace"
    workspace.mkdir()
    monkeypatch.chdir(workspace)
    monkeypatch.delenv("CNDL_DIR", raising=False)
    monkeypatch.delenv("CNDL_BRANCH", raising=False)
    return workspace


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the CLI's logging setup so its captured stream is not reused."""
    yield
    structlog.reset_defaults()
