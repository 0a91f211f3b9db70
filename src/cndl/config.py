"""Runtime configuration for cndl.

Environment variables are read here only; everything else receives a
``CndlConfig`` or explicit arguments.
"""

import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from cndl.constants import DEFAULT_BRANCH, REPO_DIR
from cndl.errors import ConfigError

ENV_REPO_DIR = "CNDL_DIR"
ENV_BRANCH = "CNDL_BRANCH"

_BRANCH_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


@dataclass(frozen=True)
class CndlConfig:
    """Validated runtime configuration.

    Attributes:
        repo_dir: Name of the repository directory inside the workspace.
        branch: Branch advanced by ``commit`` when none is given.
    """

    repo_dir: str = REPO_DIR
    branch: str = DEFAULT_BRANCH

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CndlConfig":
        """Build config from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            A validated config object.

        Raises:
            ConfigError: If a value is invalid.
        """
        env = os.environ if environ is None else environ
        return cls(
            repo_dir=validate_repo_dir(env.get(ENV_REPO_DIR, REPO_DIR)),
            branch=validate_branch(env.get(ENV_BRANCH, DEFAULT_BRANCH)),
        )


def validate_repo_dir(value: str) -> str:
    """Check that a repository directory name is a single path component."""
    value = value.strip()
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ConfigError(
            f"Invalid {ENV_REPO_DIR} value: '{value}'. "
            "Expected a single directory name such as '.cndl'."
        )
    return value


def validate_branch(value: str) -> str:
    """Check that a branch name is usable as a ref leaf."""
    value = value.strip()
    if not _BRANCH_PATTERN.match(value) or value in (".", ".."):
        raise ConfigError(
            f"Invalid branch name: '{value}'. "
            "Use letters, digits, '.', '_' or '-'."
        )
    return value
