"""Assignment Diff — minimal add/remove operations between two user-id sets.

Invariants:
    - to_remove = current − desired; to_add = desired − current
    - to_add and to_remove are disjoint and contain no duplicates
    - Applying to_remove then to_add to current yields exactly desired
    - Equal inputs produce an empty diff (re-running a reconciliation is a no-op)

Design Decisions:
    - Pure function over sets: AssignmentService does the IO around it
    - Output order follows first appearance in the inputs: log lines and tests
      stay deterministic even though the inputs are sets semantically
"""

from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID


@dataclass(frozen=True)
class AssignmentDiff:
    """Operations required to turn the current assignment set into the desired one."""
    to_add: tuple[UUID, ...] = field(default_factory=tuple)
    to_remove: tuple[UUID, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    @property
    def operation_count(self) -> int:
        return len(self.to_add) + len(self.to_remove)


def _unique(ids: Iterable[UUID]) -> list[UUID]:
    seen: set[UUID] = set()
    out: list[UUID] = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


def diff_assignments(
    current: Iterable[UUID], desired: Iterable[UUID],
) -> AssignmentDiff:
    """Compute the set difference in both directions."""
    current_ids = _unique(current)
    desired_ids = _unique(desired)
    current_set = set(current_ids)
    desired_set = set(desired_ids)
    return AssignmentDiff(
        to_add=tuple(i for i in desired_ids if i not in current_set),
        to_remove=tuple(i for i in current_ids if i not in desired_set),
    )


def apply_diff(current: Iterable[UUID], diff: AssignmentDiff) -> set[UUID]:
    """Resulting id set after applying diff to current (removals first)."""
    result = set(current) - set(diff.to_remove)
    result |= set(diff.to_add)
    return result
