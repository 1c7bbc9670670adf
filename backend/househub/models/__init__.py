"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Todo and User own their Assignment rows; Event stands alone

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from househub.models.todo import Todo  # noqa: F401
from househub.models.user import User  # noqa: F401
from househub.models.assignment import Assignment  # noqa: F401
from househub.models.event import Event  # noqa: F401
