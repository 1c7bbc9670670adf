"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TodoId, UserId, EventId, AssignmentId wrap UUIDs
    - Priority is bounded 1–5 (1 = highest), default 3
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TodoId = NewType("TodoId", UUID)
UserId = NewType("UserId", UUID)
EventId = NewType("EventId", UUID)
AssignmentId = NewType("AssignmentId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

PRIORITY_HIGHEST = 1
PRIORITY_LOWEST = 5
DEFAULT_PRIORITY = 3


# ─── Enums ───────────────────────────────────────────────────────

class RecurrencePattern(str, Enum):
    """Event recurrence — maps to events.recurrence_pattern."""
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def parse_sort(
    sort: str, allowed: frozenset[str], default_field: str,
) -> tuple[str, SortDirection]:
    """Split "-field"/"field" into (field, direction). Unknown fields fall back to default."""
    key = sort.strip().lower()
    direction = SortDirection.DESC if key.startswith("-") else SortDirection.ASC
    field = key.lstrip("-+")
    if field not in allowed:
        return default_field, direction
    return field, direction
