"""Todo ORM — a household task, optionally assigned to one or more users.

Invariants:
    - id is UUID primary key
    - title is non-nullable, <= 200 chars
    - priority is 1..5 (1 = highest), defaults to 3
    - completed_at is set iff is_completed is true (enforced by TodoService, not the DB)
    - assignments are deleted with the todo (ON DELETE CASCADE on todo_users.todo_id)

Design Decisions:
    - lazy="raise" on assignments: every query states what it loads
      (see TodoService._with_users)
    - passive_deletes=True: the database cascade removes todo_users rows,
      the ORM does not load them first
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from househub.db.base import Base


class Todo(Base):
    """Todo entity — owns its Assignment rows."""
    __tablename__ = "todos"
    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 5", name="ck_todos_priority_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    # Relationships
    assignments: Mapped[list["Assignment"]] = relationship(
        "Assignment", back_populates="todo",
        cascade="all, delete-orphan", passive_deletes=True, lazy="raise",
    )

    @property
    def users(self) -> list["User"]:
        """Assigned users, in assignment order. Requires assignments + user loaded."""
        # SQLite hands back naive datetimes; every stored value is UTC
        ordered = sorted(
            self.assignments, key=lambda a: a.assigned_at.replace(tzinfo=None),
        )
        return [a.user for a in ordered]
