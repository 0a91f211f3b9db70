"""Repository handle.

A ``Repository`` is constructed once from an explicit workspace root and
passed to every operation. Nothing below the CLI looks at the process
working directory.
"""

from pathlib import Path
from typing import Union

from cndl.constants import OBJECTS_DIR, REFS_DIR, REPO_DIR
from cndl.errors import RepositoryNotFoundError
from cndl.logging_config import get_logger
from cndl.storage import CommitManager, ObjectStore, RefStore

logger = get_logger(__name__)

PathLike = Union[str, Path]


class Repository:
    """On-disk cndl repository rooted at ``<workspace>/<dir_name>``.

    Attributes:
        workspace_root: Directory containing the repository directory
        root: Repository directory (``.cndl`` by default)
    """

    def __init__(self, workspace_root: PathLike, dir_name: str = REPO_DIR) -> None:
        self.workspace_root = Path(workspace_root)
        self.root = self.workspace_root / dir_name
        self._objects = None
        self._refs = None
        self._commits = None

    @classmethod
    def init(cls, workspace_root: PathLike, dir_name: str = REPO_DIR) -> "Repository":
        """Create the repository layout (idempotent) and return a handle."""
        repo = cls(workspace_root, dir_name)
        (repo.root / OBJECTS_DIR).mkdir(parents=True, exist_ok=True)
        (repo.root / REFS_DIR).mkdir(parents=True, exist_ok=True)
        logger.debug("repository_initialized", root=str(repo.root))
        return repo

    @classmethod
    def open(cls, workspace_root: PathLike, dir_name: str = REPO_DIR) -> "Repository":
        """Return a handle to an existing repository.

        Raises:
            RepositoryNotFoundError: If the layout is missing
        """
        repo = cls(workspace_root, dir_name)
        if not repo.exists():
            raise RepositoryNotFoundError(
                f"Not a cndl repository (no {dir_name}/ found in {repo.workspace_root})"
            )
        return repo

    def exists(self) -> bool:
        return (self.root / OBJECTS_DIR).is_dir() and (self.root / REFS_DIR).is_dir()

    @property
    def objects(self) -> ObjectStore:
        if self._objects is None:
            self._objects = ObjectStore(self.root)
        return self._objects

    @property
    def refs(self) -> RefStore:
        if self._refs is None:
            self._refs = RefStore(self.root)
        return self._refs

    @property
    def commits(self) -> CommitManager:
        if self._commits is None:
            self._commits = CommitManager(self.objects, self.refs)
        return self._commits

    def __repr__(self) -> str:
        return f"Repository({str(self.root)!r})"
