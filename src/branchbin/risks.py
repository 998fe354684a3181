"""Risk warnings shown before branches are moved to the recycle bin."""

from dataclasses import dataclass, field
from typing import Iterable

from branchbin.status import parse_track

NO_TRACKING = "No remote tracking branch: this branch is local only and has never been pushed"
UPSTREAM_GONE = "Remote tracking branch has been deleted"


@dataclass
class BranchWarning:
    name: str
    reasons: list[str] = field(default_factory=list)


def unpushed_reason(ahead: int) -> str:
    return f"{ahead} unpushed commit{'s' if ahead > 1 else ''} that exist only locally"


def branch_warnings(repo, branch_names: Iterable[str]) -> list[BranchWarning]:
    """Collect the risks of deleting each branch, skipping branches with none.

    Uses a single fresh ``read_tracking`` query on ``repo``. A branch that is
    not in the listing is reported as having no remote tracking branch.
    """
    tracking = repo.read_tracking()

    warnings = []
    for name in branch_names:
        upstream, track = tracking.get(name, ("", ""))
        reasons = []
        if not upstream:
            reasons.append(NO_TRACKING)
        else:
            info = parse_track(track)
            if info.gone:
                reasons.append(UPSTREAM_GONE)
            elif info.ahead > 0:
                reasons.append(unpushed_reason(info.ahead))

        if reasons:
            warnings.append(BranchWarning(name, reasons))

    return warnings
