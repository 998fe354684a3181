"""Soft delete and purge of branches through the recycle bin.

Both operations work branch by branch in request order. A failure on one
branch is recorded and the rest are still processed.

The ``repo`` argument is anything with the :class:`~branchbin.git.GitRepo`
methods ``local_branch_names``, ``rename_branch`` and
``force_delete_branch``.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from branchbin.git import BranchOperationError
from branchbin.recycle import allocate_prefix, is_recycled, recycled_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BranchFailure:
    branch: str
    message: str


@dataclass
class DeleteOutcome:
    """Result of a soft delete."""

    moved: list[str] = field(default_factory=list)
    errors: list[BranchFailure] = field(default_factory=list)
    prefix: str = ""

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class PurgeOutcome:
    """Result of emptying the recycle bin."""

    deleted: list[str] = field(default_factory=list)
    errors: list[BranchFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def recycled_branches(repo) -> list[str]:
    """Get every branch currently in the recycle bin, all generations."""
    return [name for name in repo.local_branch_names() if is_recycled(name)]


def soft_delete(repo, branch_names: Iterable[str]) -> DeleteOutcome:
    """Move branches into the recycle bin by renaming them.

    ``feature/x`` becomes ``<prefix>/feature/x``; renaming it back restores
    the branch exactly as it was.
    """
    # Recomputed on every call, never cached
    prefix = allocate_prefix(repo.local_branch_names())
    outcome = DeleteOutcome(prefix=prefix)

    for name in branch_names:
        target = recycled_name(prefix, name)
        try:
            repo.rename_branch(name, target)
        except BranchOperationError as err:
            logger.warning("Could not move %s to %s: %s", name, target, err.message)
            outcome.errors.append(BranchFailure(name, err.message))
            continue
        logger.info("Moved %s to %s", name, target)
        outcome.moved.append(name)

    return outcome


def purge(repo) -> PurgeOutcome:
    """Permanently delete every branch in the recycle bin."""
    outcome = PurgeOutcome()

    for name in recycled_branches(repo):
        try:
            # Being in the bin already says the branch is meant to go, merged or not
            repo.force_delete_branch(name)
        except BranchOperationError as err:
            logger.warning("Could not delete %s: %s", name, err.message)
            outcome.errors.append(BranchFailure(name, err.message))
            continue
        logger.info("Deleted %s", name)
        outcome.deleted.append(name)

    return outcome
