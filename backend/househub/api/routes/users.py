"""User Routes — household member CRUD and per-user todo listing.

Invariants:
    - /by-email is declared before /{user_id} so it is never parsed as an id
    - Duplicate email → 409 from the service, not a route-level check
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from househub.config import get_settings
from househub.infrastructure.database import get_db
from househub.schemas.todo import TodoResponse
from househub.schemas.user import UserCreate, UserResponse, UserUpdate
from househub.services.assignment_service import AssignmentService
from househub.services.user_service import UserListQuery, UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])
_settings = get_settings()


@router.get("", response_model=list[UserResponse])
async def list_users(
    is_active: bool | None = Query(None),
    city: str | None = Query(None, max_length=100),
    search: str | None = Query(None, max_length=100),
    sort: str = Query("created_at", description="field or -field"),
    limit: int | None = Query(None, ge=1, le=_settings.max_page_size),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    users = await UserService(db).list_all(UserListQuery(
        is_active=is_active, city=city, search=search,
        sort=sort, limit=limit, offset=offset,
    ))
    return [UserResponse.model_validate(u) for u in users]


@router.get("/by-email", response_model=UserResponse)
async def get_user_by_email(
    email: str = Query(..., min_length=1, max_length=255),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).get_by_email(email)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).get_by_id(user_id)
    return UserResponse.model_validate(user)


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await UserService(db).create(body)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID, body: UserUpdate, db: AsyncSession = Depends(get_db),
):
    """Partial update — omitted or null fields keep their stored value."""
    user = await UserService(db).update(user_id, body)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    """Delete a user; their assignments go with them."""
    user = await UserService(db).delete(user_id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/todos", response_model=list[TodoResponse])
async def list_user_todos(user_id: UUID, db: AsyncSession = Depends(get_db)):
    await UserService(db).get_by_id(user_id)
    todos = await AssignmentService(db).list_todos_for_user(user_id)
    return [TodoResponse.model_validate(t) for t in todos]
