"""Folder tree of branches, split on ``/``."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from branchbin.status import BranchRecord


@dataclass
class BranchNode:
    """A folder (``record`` is None) or a branch leaf."""

    name: str
    record: Optional[BranchRecord] = None
    children: list["BranchNode"] = field(default_factory=list)

    def child(self, name: str) -> Optional["BranchNode"]:
        for node in self.children:
            if node.name == name and node.record is None:
                return node
        return None


def build_tree(records: Iterable[BranchRecord]) -> BranchNode:
    """Group branch records into nested folders by their ``/`` segments.

    Children keep the order of ``records``; pass them sorted.
    """
    root = BranchNode(name="")
    for record in records:
        *folders, leaf = record.name.split("/")
        node = root
        for folder in folders:
            existing = node.child(folder)
            if existing is None:
                existing = BranchNode(name=folder)
                node.children.append(existing)
            node = existing
        node.children.append(BranchNode(name=leaf, record=record))
    return root
