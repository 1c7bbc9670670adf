"""Todo Routes — todo CRUD plus per-todo assignment endpoints.

Invariants:
    - Route handlers validate via Pydantic and delegate to services; no SQL here
    - Every todo returned carries its assigned users
    - PUT and PATCH share partial-update semantics (PUT only requires a title)
    - Assignment writes run inside transaction(); AssignmentService never commits
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from househub.config import get_settings
from househub.core.errors import ResourceNotFoundError
from househub.infrastructure.database import get_db, transaction
from househub.schemas.todo import (
    AssignmentResponse, TodoCreate, TodoReplace, TodoResponse, TodoUpdate,
    UnassignResponse,
)
from househub.schemas.user import UserResponse
from househub.services.assignment_service import AssignmentService
from househub.services.todo_service import TodoListQuery, TodoService

router = APIRouter(prefix="/api/v1/todos", tags=["todos"])
_settings = get_settings()


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    is_completed: bool | None = Query(None),
    priority: int | None = Query(None, ge=1, le=5),
    category: str | None = Query(None, max_length=50),
    assigned_user_id: UUID | None = Query(None),
    search: str | None = Query(None, max_length=200),
    due_before: datetime | None = Query(None),
    due_after: datetime | None = Query(None),
    sort: str = Query("created_at", description="field or -field"),
    limit: int | None = Query(None, ge=1, le=_settings.max_page_size),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List todos with their assigned users."""
    todos = await TodoService(db).list_all(TodoListQuery(
        is_completed=is_completed, priority=priority, category=category,
        assigned_user_id=assigned_user_id, search=search,
        due_before=due_before, due_after=due_after,
        sort=sort, limit=limit, offset=offset,
    ))
    return [TodoResponse.model_validate(t) for t in todos]


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(todo_id: UUID, db: AsyncSession = Depends(get_db)):
    todo = await TodoService(db).get_by_id(todo_id)
    return TodoResponse.model_validate(todo)


@router.post(
    "", response_model=TodoResponse, status_code=status.HTTP_201_CREATED,
)
async def create_todo(body: TodoCreate, db: AsyncSession = Depends(get_db)):
    """Create a todo, optionally assigning users in the same transaction."""
    todo = await TodoService(db).create(body)
    return TodoResponse.model_validate(todo)


@router.put("/{todo_id}", response_model=TodoResponse)
async def replace_todo(
    todo_id: UUID, body: TodoReplace, db: AsyncSession = Depends(get_db),
):
    todo = await TodoService(db).update(todo_id, body)
    return TodoResponse.model_validate(todo)


@router.patch("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: UUID, body: TodoUpdate, db: AsyncSession = Depends(get_db),
):
    """Partial update. assigned_user_ids, when present, replaces all assignments."""
    todo = await TodoService(db).update(todo_id, body)
    return TodoResponse.model_validate(todo)


@router.delete("/{todo_id}", response_model=TodoResponse)
async def delete_todo(todo_id: UUID, db: AsyncSession = Depends(get_db)):
    """Delete a todo and its assignments. Returns the deleted todo."""
    todo = await TodoService(db).delete(todo_id)
    return TodoResponse.model_validate(todo)


# ─── Assignments ─────────────────────────────────────────────────

@router.get("/{todo_id}/users", response_model=list[UserResponse])
async def list_todo_users(todo_id: UUID, db: AsyncSession = Depends(get_db)):
    await TodoService(db).get_by_id(todo_id)
    users = await AssignmentService(db).list_users_for_todo(todo_id)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/{todo_id}/users/{user_id}", response_model=AssignmentResponse)
async def get_assignment(
    todo_id: UUID, user_id: UUID, db: AsyncSession = Depends(get_db),
):
    assignment = await AssignmentService(db).get_assignment(todo_id, user_id)
    if assignment is None:
        raise ResourceNotFoundError("Assignment", f"{todo_id}/{user_id}")
    return AssignmentResponse.model_validate(assignment)


@router.post(
    "/{todo_id}/users/{user_id}", response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_user(
    todo_id: UUID, user_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Assign one user. 409 if already assigned, 400 if either side is missing."""
    service = AssignmentService(db)
    async with transaction(db, "assign_user"):
        await service.assign(todo_id, user_id)
    assignment = await service.get_assignment(todo_id, user_id)
    return AssignmentResponse.model_validate(assignment)


@router.delete("/{todo_id}/users/{user_id}", response_model=UnassignResponse)
async def unassign_user(
    todo_id: UUID, user_id: UUID, db: AsyncSession = Depends(get_db),
):
    async with transaction(db, "unassign_user"):
        removed = await AssignmentService(db).unassign(todo_id, user_id)
    return UnassignResponse(removed=removed)
