"""Todo Service — todo CRUD, completion lifecycle, and assignment reconciliation.

Invariants:
    - completed_at is non-null iff is_completed is true (apply_completion)
    - create/update/delete each run in ONE transaction: the todo row and its
      todo_users rows commit together or not at all
    - update with assigned_user_ids=None leaves assignments alone;
      a list (even empty) replaces them exactly
    - Every returned todo has assignments + users loaded (reloaded after writes)

Design Decisions:
    - Reload with populate_existing after writes: the identity map may hold a
      stale assignments collection after bulk unassign / savepoint inserts
    - Delete loads users first so the caller gets a full pre-deletion snapshot
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from househub.core.domain_types import SortDirection, parse_sort
from househub.core.errors import (
    AlreadyAssignedError, RequestValidationError, ResourceNotFoundError,
)
from househub.infrastructure.database import transaction
from househub.models.assignment import Assignment
from househub.models.todo import Todo
from househub.schemas.todo import TodoCreate, TodoUpdate
from househub.services.assignment_service import AssignmentService, with_users
from househub.services.mapping import merge_todo_update, todo_from_create

logger = logging.getLogger(__name__)

TODO_SORT_FIELDS = frozenset({
    "created_at", "updated_at", "due_date", "priority", "title",
})


@dataclass
class TodoListQuery:
    """Optional filters for TodoService.list_all. None fields are ignored."""
    is_completed: bool | None = None
    priority: int | None = None
    category: str | None = None
    assigned_user_id: UUID | None = None
    search: str | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None
    sort: str = "created_at"
    limit: int | None = None
    offset: int = 0


def apply_completion(todo: Todo, is_completed: bool | None, now: datetime) -> None:
    """Completion timestamp rule.

    True and unset → now; False → cleared; True and already set → kept;
    None (flag absent) → untouched.
    """
    if is_completed is None:
        return
    todo.is_completed = is_completed
    if is_completed:
        if todo.completed_at is None:
            todo.completed_at = now
    else:
        todo.completed_at = None


class TodoService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assignments = AssignmentService(db)

    async def _load(self, todo_id: UUID) -> Todo | None:
        result = await self.db.execute(
            select(Todo)
            .where(Todo.id == todo_id)
            .options(with_users())
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def list_all(self, query: TodoListQuery | None = None) -> list[Todo]:
        query = query or TodoListQuery()
        stmt = (
            select(Todo)
            .options(with_users())
            .execution_options(populate_existing=True)
        )
        if query.is_completed is not None:
            stmt = stmt.where(Todo.is_completed == query.is_completed)
        if query.priority is not None:
            stmt = stmt.where(Todo.priority == query.priority)
        if query.category:
            stmt = stmt.where(Todo.category == query.category)
        if query.assigned_user_id is not None:
            stmt = stmt.where(Todo.assignments.any(
                Assignment.user_id == query.assigned_user_id,
            ))
        if query.search:
            pattern = f"%{query.search.strip()}%"
            stmt = stmt.where(or_(
                Todo.title.ilike(pattern), Todo.description.ilike(pattern),
            ))
        if query.due_before is not None:
            stmt = stmt.where(Todo.due_date < query.due_before)
        if query.due_after is not None:
            stmt = stmt.where(Todo.due_date > query.due_after)

        field, direction = parse_sort(query.sort, TODO_SORT_FIELDS, "created_at")
        column = getattr(Todo, field)
        stmt = stmt.order_by(
            column.desc() if direction == SortDirection.DESC else column.asc(),
            Todo.id,
        )
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, todo_id: UUID) -> Todo:
        todo = await self._load(todo_id)
        if todo is None:
            raise ResourceNotFoundError("Todo", str(todo_id))
        return todo

    async def create(self, request: TodoCreate | None) -> Todo:
        if request is None:
            raise RequestValidationError("Todo payload is required")

        async with transaction(self.db, "create_todo"):
            todo = todo_from_create(request, datetime.now(timezone.utc))
            self.db.add(todo)
            await self.db.flush()

            for user_id in dict.fromkeys(request.assigned_user_ids or []):
                try:
                    await self.assignments.assign(todo.id, user_id)
                except AlreadyAssignedError:
                    continue

            todo = await self._load(todo.id)

        logger.info(f"Todo created: {todo.id}", extra={"todo_id": str(todo.id)})
        return todo

    async def update(self, todo_id: UUID, request: TodoUpdate) -> Todo:
        async with transaction(self.db, "update_todo"):
            todo = await self.db.get(Todo, todo_id)
            if todo is None:
                raise ResourceNotFoundError("Todo", str(todo_id))

            now = datetime.now(timezone.utc)
            merge_todo_update(todo, request, now)
            apply_completion(todo, request.is_completed, now)
            await self.db.flush()

            if request.assigned_user_ids is not None:
                await self.assignments.reconcile(todo.id, request.assigned_user_ids)

            todo = await self._load(todo.id)

        return todo

    async def delete(self, todo_id: UUID) -> Todo:
        """Hard delete. Returns the todo (with its users) as it was before deletion."""
        async with transaction(self.db, "delete_todo"):
            todo = await self.get_by_id(todo_id)
            await self.db.delete(todo)
            await self.db.flush()

        logger.info(f"Todo deleted: {todo_id}", extra={"todo_id": str(todo_id)})
        return todo
