"""Operations exposed to callers, each addressed by repository path.

Every call re-reads the repository; only the :class:`GitRepo` handle may be
reused, through a :class:`RepoRegistry` the caller owns.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from branchbin import lifecycle, risks
from branchbin.git import GitError, GitRepo
from branchbin.lifecycle import BranchFailure, DeleteOutcome, PurgeOutcome
from branchbin.risks import BranchWarning
from branchbin.status import BranchRecord, interpret_all

logger = logging.getLogger(__name__)

# Branch name used in outcomes for failures that hit the whole repository
ALL_BRANCHES = "*"


class RepoRegistry:
    """Cache of open repositories keyed by resolved path."""

    def __init__(self) -> None:
        self._repos: dict[Path, GitRepo] = {}

    @staticmethod
    def _key(path: Path) -> Path:
        return Path(path).expanduser().resolve()

    def get(self, path: Path) -> GitRepo:
        key = self._key(path)
        if key not in self._repos:
            self._repos[key] = GitRepo(key)
        return self._repos[key]

    def forget(self, path: Path) -> None:
        self._repos.pop(self._key(path), None)

    def clear(self) -> None:
        self._repos.clear()

    def __contains__(self, path: Path) -> bool:
        return self._key(path) in self._repos

    def __len__(self) -> int:
        return len(self._repos)


def _open(path: Path, registry: Optional[RepoRegistry]) -> GitRepo:
    if registry is not None:
        return registry.get(path)
    return GitRepo(path)


def list_branches(path: Path, registry: Optional[RepoRegistry] = None) -> list[BranchRecord]:
    """Get the status of every local branch, sorted by name.

    Raises:
        RepositoryAccessError: If the repository cannot be opened or queried
    """
    repo = _open(path, registry)
    raws = repo.read_branches()
    current = repo.get_current_branch_name()
    return interpret_all(raws, current)


def list_warnings(
    path: Path, branch_names: Iterable[str], registry: Optional[RepoRegistry] = None
) -> list[BranchWarning]:
    """Get the risks of soft-deleting each of ``branch_names``.

    Raises:
        RepositoryAccessError: If the repository cannot be opened or queried
    """
    return risks.branch_warnings(_open(path, registry), branch_names)


def soft_delete(
    path: Path, branch_names: Iterable[str], registry: Optional[RepoRegistry] = None
) -> DeleteOutcome:
    """Move branches into the recycle bin.

    Never raises for git problems; a repository that cannot be used shows up
    as a single failure for ``*``.
    """
    try:
        return lifecycle.soft_delete(_open(path, registry), branch_names)
    except GitError as err:
        logger.error("Soft delete in %s failed: %s", path, err)
        return DeleteOutcome(errors=[BranchFailure(ALL_BRANCHES, err.message)])


def purge(path: Path, registry: Optional[RepoRegistry] = None) -> PurgeOutcome:
    """Permanently delete everything in the recycle bin, with the same failure policy as :func:`soft_delete`."""
    try:
        return lifecycle.purge(_open(path, registry))
    except GitError as err:
        logger.error("Purge in %s failed: %s", path, err)
        return PurgeOutcome(errors=[BranchFailure(ALL_BRANCHES, err.message)])


def recycle_bin(path: Path, registry: Optional[RepoRegistry] = None) -> list[str]:
    """Get the names of all branches currently in the recycle bin."""
    return lifecycle.recycled_branches(_open(path, registry))


def validate_repository(path: Path) -> bool:
    """Check whether ``path`` is a usable repository. Never raises."""
    return GitRepo.is_valid(path)
