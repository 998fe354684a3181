"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator, Optional

import pytest
from git import Actor, Repo

from branchbin.git import BranchOperationError

AUTHOR = Actor("Test User", "test@example.com")


def commit_file(repo: Repo, path: Path, name: str, content: str, message: str) -> None:
    """Write a file and commit it on the current branch."""
    test_file = path / name
    test_file.parent.mkdir(parents=True, exist_ok=True)
    test_file.write_text(content)
    repo.index.add([name])
    repo.index.commit(message, author=AUTHOR, committer=AUTHOR)


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Local branches:
        main            tracking origin/main, up to date, checked out
        feature/synced  tracking, up to date
        feature/ahead   tracking, 2 unpushed commits
        feature/behind  tracking, 1 commit behind
        feature/gone    tracking, upstream deleted on the remote
        feature/local   never pushed

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    local_repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    local_repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    commit_file(local_repo, local_path, "README.md", "# Test Repository", "Initial commit")
    # Whatever the default branch is called, make it main
    local_repo.git.branch("-M", "main")

    local_repo.create_remote("origin", url=str(remote_path))
    local_repo.git.push("-u", "origin", "main")

    def create_branch(name: str, commits: int = 1, push: bool = True) -> None:
        """Create a branch off main with some commits, optionally pushed with tracking."""
        local_repo.git.checkout("main")
        local_repo.git.checkout("-b", name)
        for i in range(commits):
            commit_file(local_repo, local_path, f"{name}.txt", f"{name} content {i}", f"Add {name} ({i})")
        if push:
            local_repo.git.push("-u", "origin", name)

    create_branch("feature/synced")

    create_branch("feature/ahead")
    commit_file(local_repo, local_path, "feature/ahead.txt", "more", "Unpushed one")
    commit_file(local_repo, local_path, "feature/ahead.txt", "even more", "Unpushed two")

    create_branch("feature/behind", commits=2)
    create_branch("feature/gone")
    create_branch("feature/local", push=False)

    local_repo.git.checkout("main")
    local_repo.git.branch("-f", "feature/behind", "feature/behind~1")
    local_repo.git.push("origin", ":feature/gone")

    yield local_path, remote_path

    # Cleanup is handled by pytest's tmp_path fixture


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    """Path of the local repository from ``test_env``."""
    local_path, _ = test_env
    return local_path


class FakeRepo:
    """In-memory stand-in for GitRepo's branch operations."""

    def __init__(self, branches: list[str], fail_on: tuple[str, ...] = (), tracking: Optional[dict[str, tuple[str, str]]] = None) -> None:
        self.branches = list(branches)
        self.fail_on = set(fail_on)
        self.tracking = tracking or {}
        self.calls: list[tuple[str, ...]] = []

    def local_branch_names(self) -> list[str]:
        self.calls.append(("list",))
        return list(self.branches)

    def read_tracking(self) -> dict[str, tuple[str, str]]:
        self.calls.append(("tracking",))
        return dict(self.tracking)

    def rename_branch(self, old: str, new: str) -> None:
        self.calls.append(("rename", old, new))
        if old in self.fail_on:
            raise BranchOperationError(old, f"a branch named '{new}' already exists")
        if old not in self.branches:
            raise BranchOperationError(old, f"no branch named '{old}'")
        self.branches[self.branches.index(old)] = new

    def force_delete_branch(self, name: str) -> None:
        self.calls.append(("delete", name))
        if name in self.fail_on:
            raise BranchOperationError(name, f"cannot delete branch '{name}'")
        self.branches.remove(name)


@pytest.fixture
def fake_repo_factory():
    """Build FakeRepo instances."""
    return FakeRepo
