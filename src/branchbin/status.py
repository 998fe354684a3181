"""Branch status interpretation.

Turns the raw per-branch rows read from git into classified
:class:`BranchRecord` objects with a human-readable summary.
"""

import locale
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple, Optional

from branchbin.git import RawBranch
from branchbin.recycle import is_recycled

_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")


class BranchStatus(Enum):
    """Branch synchronization status relative to its upstream."""

    UP_TO_DATE = "up-to-date"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    NO_UPSTREAM = "no-upstream"
    UPSTREAM_GONE = "gone"


class TrackInfo(NamedTuple):
    ahead: int
    behind: int
    gone: bool


@dataclass(frozen=True)
class BranchRecord:
    """Status of a single local branch at query time."""

    name: str
    is_current: bool
    tracking_branch: Optional[str]
    ahead: int
    behind: int
    upstream_gone: bool
    last_commit_date: str
    last_commit_subject: str
    status: BranchStatus
    status_text: str
    is_recycled: bool


def parse_track(descriptor: str) -> TrackInfo:
    """Parse a git ``%(upstream:track)`` descriptor.

    Understands the empty string, ``[ahead N]``, ``[behind N]``,
    ``[ahead N, behind M]`` and ``[gone]``. Anything missing counts as zero.
    """
    ahead_match = _AHEAD_RE.search(descriptor)
    behind_match = _BEHIND_RE.search(descriptor)
    return TrackInfo(
        ahead=int(ahead_match.group(1)) if ahead_match else 0,
        behind=int(behind_match.group(1)) if behind_match else 0,
        gone="gone" in descriptor,
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def status_text(tracking_branch: Optional[str], ahead: int, behind: int, gone: bool = False) -> str:
    """Generate the human-readable status summary for a branch."""
    if gone:
        return "Remote branch deleted"
    if not tracking_branch:
        return "No remote tracking branch (local only)"
    if ahead == 0 and behind == 0:
        return "Up to date with remote"

    parts = []
    if ahead > 0:
        parts.append(_plural(ahead, "unpushed commit"))
    if behind > 0:
        parts.append(f"{_plural(behind, 'commit')} behind remote")
    return ", ".join(parts)


def classify(tracking_branch: Optional[str], ahead: int, behind: int, gone: bool = False) -> BranchStatus:
    """Classify a branch by the same precedence as :func:`status_text`."""
    if gone:
        return BranchStatus.UPSTREAM_GONE
    if not tracking_branch:
        return BranchStatus.NO_UPSTREAM
    if ahead and behind:
        return BranchStatus.DIVERGED
    if ahead:
        return BranchStatus.AHEAD
    if behind:
        return BranchStatus.BEHIND
    return BranchStatus.UP_TO_DATE


def interpret(raw: RawBranch, current: str = "") -> BranchRecord:
    """Build a :class:`BranchRecord` from one raw branch row."""
    track = parse_track(raw.track)
    # A vanished upstream is not a usable comparison target
    tracking_branch = raw.upstream if raw.upstream and not track.gone else None
    if tracking_branch is None:
        ahead, behind = 0, 0
    else:
        ahead, behind = track.ahead, track.behind

    return BranchRecord(
        name=raw.name,
        is_current=bool(current) and raw.name == current,
        tracking_branch=tracking_branch,
        ahead=ahead,
        behind=behind,
        upstream_gone=track.gone,
        last_commit_date=raw.date,
        last_commit_subject=raw.subject,
        status=classify(tracking_branch, ahead, behind, track.gone),
        status_text=status_text(tracking_branch, ahead, behind, track.gone),
        is_recycled=is_recycled(raw.name),
    )


def interpret_all(raws: Iterable[RawBranch], current: str = "") -> list[BranchRecord]:
    """Interpret every row and sort by branch name, locale-aware and ignoring case."""
    records = [interpret(raw, current) for raw in raws]
    return sorted(records, key=lambda record: (locale.strxfrm(record.name.casefold()), record.name))
