"""Assignment Service — Todo↔User links and set reconciliation.

Invariants:
    - A (todo, user) pair exists at most once: pre-checked, then enforced by
      uq_todo_users_todo_user; a lost race surfaces as AlreadyAssignedError
    - assign() inserts inside a SAVEPOINT, so a duplicate never poisons the
      caller's enclosing transaction
    - unassign() never raises for a missing pair, it returns False
    - reconcile() removes before it adds; afterwards the todo's user set equals
      the desired set exactly

Design Decisions:
    - The set arithmetic lives in core.assignment_diff (pure); this class does the IO
    - No commits here: callers (TodoService, routes) own the transaction
"""

import logging
from datetime import datetime, timezone
from typing import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from househub.core.assignment_diff import AssignmentDiff, diff_assignments
from househub.core.errors import AlreadyAssignedError, InvalidReferenceError
from househub.models.assignment import Assignment
from househub.models.todo import Todo
from househub.models.user import User

logger = logging.getLogger(__name__)


def with_users():
    """Loader option populating Todo.assignments and each Assignment.user."""
    return selectinload(Todo.assignments).selectinload(Assignment.user)


class AssignmentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _pair_exists(self, todo_id: UUID, user_id: UUID) -> bool:
        result = await self.db.execute(
            select(Assignment.id).where(
                Assignment.todo_id == todo_id, Assignment.user_id == user_id,
            ),
        )
        return result.first() is not None

    async def assign(self, todo_id: UUID, user_id: UUID) -> Assignment:
        if await self._pair_exists(todo_id, user_id):
            raise AlreadyAssignedError(todo_id, user_id)
        if await self.db.get(Todo, todo_id) is None:
            raise InvalidReferenceError("Todo", str(todo_id), "todo_id")
        if await self.db.get(User, user_id) is None:
            raise InvalidReferenceError("User", str(user_id), "user_id")

        assignment = Assignment(
            todo_id=todo_id, user_id=user_id,
            assigned_at=datetime.now(timezone.utc),
        )
        try:
            async with self.db.begin_nested():
                self.db.add(assignment)
        except IntegrityError as e:
            raise AlreadyAssignedError(todo_id, user_id) from e

        logger.info(
            f"Assigned user {user_id} to todo {todo_id}",
            extra={"todo_id": str(todo_id), "user_id": str(user_id)},
        )
        return assignment

    async def unassign(self, todo_id: UUID, user_id: UUID) -> bool:
        result = await self.db.execute(
            delete(Assignment).where(
                Assignment.todo_id == todo_id, Assignment.user_id == user_id,
            ),
        )
        removed = result.rowcount > 0
        if removed:
            logger.info(
                f"Unassigned user {user_id} from todo {todo_id}",
                extra={"todo_id": str(todo_id), "user_id": str(user_id)},
            )
        return removed

    async def list_users_for_todo(self, todo_id: UUID) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(Assignment, Assignment.user_id == User.id)
            .where(Assignment.todo_id == todo_id)
            .order_by(Assignment.assigned_at, User.id),
        )
        return list(result.scalars().all())

    async def list_todos_for_user(self, user_id: UUID) -> list[Todo]:
        result = await self.db.execute(
            select(Todo)
            .join(Assignment, Assignment.todo_id == Todo.id)
            .where(Assignment.user_id == user_id)
            .options(with_users())
            .order_by(Todo.created_at, Todo.id)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    async def get_assignment(
        self, todo_id: UUID, user_id: UUID,
    ) -> Assignment | None:
        result = await self.db.execute(
            select(Assignment)
            .where(Assignment.todo_id == todo_id, Assignment.user_id == user_id)
            .options(selectinload(Assignment.todo), selectinload(Assignment.user))
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def reconcile(
        self, todo_id: UUID, desired_user_ids: Iterable[UUID],
    ) -> AssignmentDiff:
        """Make the todo's assigned users exactly desired_user_ids."""
        current = [u.id for u in await self.list_users_for_todo(todo_id)]
        diff = diff_assignments(current, desired_user_ids)

        for user_id in diff.to_remove:
            await self.unassign(todo_id, user_id)
        for user_id in diff.to_add:
            try:
                await self.assign(todo_id, user_id)
            except AlreadyAssignedError:
                continue

        if not diff.is_empty:
            logger.info(
                f"Reconciled todo {todo_id}: +{len(diff.to_add)} -{len(diff.to_remove)}",
                extra={
                    "todo_id": str(todo_id),
                    "added": [str(i) for i in diff.to_add],
                    "removed": [str(i) for i in diff.to_remove],
                },
            )
        return diff
