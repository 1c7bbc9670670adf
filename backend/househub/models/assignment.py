"""Assignment ORM — join row linking one Todo to one User.

Invariants:
    - (todo_id, user_id) is unique: a user is assigned to a todo at most once
    - Both FKs are ON DELETE CASCADE: deleting either side removes the row
    - assigned_at is server-assigned UTC
    - Rows are created only by AssignmentService.assign

Design Decisions:
    - Surrogate UUID id plus a unique pair constraint (not a composite PK):
      the row can be addressed on its own when returned to callers
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from househub.db.base import Base


class Assignment(Base):
    """Todo↔User assignment."""
    __tablename__ = "todo_users"
    __table_args__ = (
        UniqueConstraint("todo_id", "user_id", name="uq_todo_users_todo_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    todo_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("todos.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    todo: Mapped["Todo"] = relationship(
        "Todo", back_populates="assignments", lazy="raise",
    )
    user: Mapped["User"] = relationship(
        "User", back_populates="assignments", lazy="raise",
    )
