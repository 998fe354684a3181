"""Git repository operations."""

import logging
from pathlib import Path
from typing import NamedTuple

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)

# NUL cannot occur in a ref name, an ISO date or a commit subject line
FIELD_SEPARATOR = "\x00"

BRANCH_FIELDS = (
    "%(refname:short)",
    "%(upstream:short)",
    "%(upstream:track)",
    "%(committerdate:iso-strict)",
    "%(subject)",
)
TRACKING_FIELDS = BRANCH_FIELDS[:3]


class RawBranch(NamedTuple):
    """One unparsed line of the branch listing."""

    name: str
    upstream: str
    track: str
    date: str
    subject: str


class GitError(Exception):
    """Git operation error."""

    def __init__(self, message: str) -> None:
        """Initialize error.

        Args:
            message: Error message
        """
        super().__init__(message)
        self.message = message


class RepositoryAccessError(GitError):
    """The path is not a usable repository, or git cannot be queried at all."""


class BranchOperationError(GitError):
    """A rename or delete of a single branch failed."""

    def __init__(self, branch: str, message: str) -> None:
        super().__init__(message)
        self.branch = branch


def _command_message(err: GitCommandError) -> str:
    """Pull the most useful line out of a failed git command."""
    stderr = (err.stderr or "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip()
    stderr = stderr.strip("'").strip()
    return stderr or str(err)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        self.path = Path(path)
        try:
            self.repo: Repo = Repo(self.path)
            if self.repo.bare:
                raise RepositoryAccessError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise RepositoryAccessError(f"Failed to open repository: {err}") from err

    @staticmethod
    def is_valid(path: Path) -> bool:
        """Check whether a path refers to a usable (non-bare) repository."""
        try:
            GitRepo(path)
        except (GitError, OSError) as err:
            logger.debug("%s is not a usable repository: %s", path, err)
            return False
        return True

    def _for_each_ref(self, fields: tuple[str, ...]) -> list[list[str]]:
        """Run one for-each-ref over local branches and split it into rows.

        Rows that do not have exactly ``len(fields)`` columns or have an empty
        branch name are skipped, so a single garbled line never hides the
        rest of the listing.
        """
        fmt = "%00".join(fields)
        try:
            output = self.repo.git.for_each_ref(f"--format={fmt}", "refs/heads/")
        except GitCommandError as err:
            raise RepositoryAccessError(f"Failed to list branches: {_command_message(err)}") from err

        rows = []
        # Only \n ends a row; subjects may hold other line-break characters
        for line in output.split("\n"):
            if not line:
                continue
            parts = line.split(FIELD_SEPARATOR)
            if len(parts) != len(fields) or not parts[0]:
                logger.warning("Skipping unparseable branch line: %r", line)
                continue
            rows.append(parts)
        return rows

    def read_branches(self) -> list[RawBranch]:
        """Get name, upstream, tracking state, date and subject of every local branch."""
        return [RawBranch(*row) for row in self._for_each_ref(BRANCH_FIELDS)]

    def read_tracking(self) -> dict[str, tuple[str, str]]:
        """Get ``{branch: (upstream, track)}`` for every local branch."""
        return {name: (upstream, track) for name, upstream, track in self._for_each_ref(TRACKING_FIELDS)}

    def local_branch_names(self) -> list[str]:
        """Get the names of all local branches."""
        return [row[0] for row in self._for_each_ref(BRANCH_FIELDS[:1])]

    def get_current_branch_name(self) -> str:
        """Get current branch name."""
        try:
            try:
                return self.repo.active_branch.name
            except TypeError:
                # Detached HEAD, no branch is current
                return ""
        except (GitCommandError, ValueError) as err:
            raise RepositoryAccessError(f"Failed to get current branch: {err}") from err

    def rename_branch(self, old: str, new: str) -> None:
        """Rename a local branch, keeping its history and upstream config."""
        try:
            self.repo.git.branch("-m", old, new)
        except GitCommandError as err:
            raise BranchOperationError(old, _command_message(err)) from err

    def force_delete_branch(self, name: str) -> None:
        """Delete a local branch even if it is not fully merged."""
        try:
            self.repo.git.branch("-D", name)
        except GitCommandError as err:
            raise BranchOperationError(name, _command_message(err)) from err
