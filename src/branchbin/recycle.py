"""Recycle bin naming.

Soft-deleted branches live under ``recyclebin/``. Git stores refs like
files, so a branch literally named ``recyclebin`` blocks every
``recyclebin/...`` name; in that case the next free generation
(``recyclebin2``, ``recyclebin3``, ...) is used instead.
"""

import re
from typing import Iterable

RECYCLE_BIN_PREFIX = "recyclebin"

_GENERATION_RE = re.compile(rf"^{RECYCLE_BIN_PREFIX}[0-9]+/")


def is_recycled(name: str) -> bool:
    """Check whether a branch name lives in any recycle bin generation."""
    return name.startswith(f"{RECYCLE_BIN_PREFIX}/") or _GENERATION_RE.match(name) is not None


def allocate_prefix(existing_names: Iterable[str]) -> str:
    """Find a recycle bin prefix that no existing branch is named exactly."""
    names = set(existing_names)
    prefix = RECYCLE_BIN_PREFIX
    counter = 1
    while prefix in names:
        counter += 1
        prefix = f"{RECYCLE_BIN_PREFIX}{counter}"
    return prefix


def recycled_name(prefix: str, name: str) -> str:
    """Name a branch gets when moved into the bin under ``prefix``."""
    return f"{prefix}/{name}"
