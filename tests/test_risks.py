"""Tests for pre-delete warnings."""

from pathlib import Path

from branchbin.git import GitRepo
from branchbin.risks import NO_TRACKING, UPSTREAM_GONE, branch_warnings


def test_no_tracking_single_reason(fake_repo_factory) -> None:
    repo = fake_repo_factory([], tracking={"local": ("", "")})
    warnings = branch_warnings(repo, ["local"])
    assert len(warnings) == 1
    assert warnings[0].reasons == [NO_TRACKING]


def test_gone_single_reason(fake_repo_factory) -> None:
    """Test that a gone upstream produces only the gone reason."""
    repo = fake_repo_factory([], tracking={"old": ("origin/old", "[gone]")})
    warnings = branch_warnings(repo, ["old"])
    assert warnings[0].reasons == [UPSTREAM_GONE]


def test_unpushed_commits(fake_repo_factory) -> None:
    repo = fake_repo_factory([], tracking={"a": ("origin/a", "[ahead 1, behind 4]"), "b": ("origin/b", "[ahead 3]")})
    warnings = branch_warnings(repo, ["a", "b"])
    assert warnings[0].reasons == ["1 unpushed commit that exist only locally"]
    assert warnings[1].reasons == ["3 unpushed commits that exist only locally"]


def test_safe_branches_are_omitted(fake_repo_factory) -> None:
    repo = fake_repo_factory(
        [],
        tracking={"synced": ("origin/synced", ""), "behind": ("origin/behind", "[behind 2]"), "local": ("", "")},
    )
    warnings = branch_warnings(repo, ["synced", "behind", "local"])
    assert [w.name for w in warnings] == ["local"]


def test_unknown_branch_is_local_only(fake_repo_factory) -> None:
    repo = fake_repo_factory([], tracking={})
    assert branch_warnings(repo, ["ghost"])[0].reasons == [NO_TRACKING]


def test_warnings_follow_input_order(fake_repo_factory) -> None:
    repo = fake_repo_factory([], tracking={"a": ("", ""), "b": ("", "")})
    assert [w.name for w in branch_warnings(repo, ["b", "a"])] == ["b", "a"]


def test_single_query(fake_repo_factory) -> None:
    repo = fake_repo_factory([], tracking={"a": ("", "")})
    branch_warnings(repo, ["a", "b", "c"])
    assert repo.calls == [("tracking",)]


def test_warnings_real_repo(test_repo: Path) -> None:
    repo = GitRepo(test_repo)
    names = ["main", "feature/synced", "feature/ahead", "feature/behind", "feature/gone", "feature/local"]
    warnings = {w.name: w.reasons for w in branch_warnings(repo, names)}
    assert warnings == {
        "feature/ahead": ["2 unpushed commits that exist only locally"],
        "feature/gone": [UPSTREAM_GONE],
        "feature/local": [NO_TRACKING],
    }
