"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from cndl.core import Repository
from cndl.storage import ObjectStore, RefStore


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """Create an initialized repository in a temporary workspace."""
    return Repository.init(tmp_path)


@pytest.fixture
def repo_dir(repo: Repository) -> Path:
    """Path to the temporary .cndl directory."""
    return repo.root


@pytest.fixture
def store(repo_dir: Path) -> ObjectStore:
    """Create an ObjectStore instance."""
    return ObjectStore(repo_dir)


@pytest.fixture
def refs(repo_dir: Path) -> RefStore:
    """Create a RefStore instance."""
    return RefStore(repo_dir)


@pytest.fixture
def sample_series() -> list:
    """A short, regular price series."""
    return [
        (1000, 100.0),
        (2000, 100.25),
        (3000, 100.25),
        (4000, 99.875),
        (5000, 101.5),
    ]
