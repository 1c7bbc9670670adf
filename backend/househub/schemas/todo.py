"""Todo Schemas — create/update/replace requests and the populated todo response.

Invariants:
    - title: 1-200 chars, stripped (required on create and replace)
    - description <= 1000 chars, category <= 50 chars
    - priority 1-5, defaults to 3 on create
    - assigned_user_ids on update: None = leave assignments alone,
      [] = unassign everyone (full replacement)
    - Datetimes normalized to UTC

Design Decisions:
    - TodoReplace subclasses TodoUpdate: PUT goes through the same partial-update
      path as PATCH, it only insists on a title
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from househub.core.domain_types import (
    DEFAULT_PRIORITY, PRIORITY_HIGHEST, PRIORITY_LOWEST,
)
from househub.schemas import to_utc
from househub.schemas.user import UserResponse


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


class TodoCreate(BaseModel):
    """Todo creation — title required, optional initial assignees."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "2L, semi-skimmed",
                "due_date": "2026-11-01T18:00:00Z",
                "priority": 2,
                "category": "Groceries",
                "assigned_user_ids": [],
            }
        }
    )

    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    due_date: datetime | None = None
    priority: int = Field(DEFAULT_PRIORITY, ge=PRIORITY_HIGHEST, le=PRIORITY_LOWEST)
    category: str | None = Field(None, max_length=50)
    assigned_user_ids: list[UUID] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)


class TodoUpdate(BaseModel):
    """Partial todo update — None means "leave unchanged"."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    is_completed: bool | None = None
    due_date: datetime | None = None
    priority: int | None = Field(None, ge=PRIORITY_HIGHEST, le=PRIORITY_LOWEST)
    category: str | None = Field(None, max_length=50)
    assigned_user_ids: list[UUID] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_title(v)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)


class TodoReplace(TodoUpdate):
    """PUT body — same fields as TodoUpdate, title mandatory."""
    title: str = Field(min_length=1, max_length=200)


class TodoResponse(BaseModel):
    """Todo response — includes assigned users."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    is_completed: bool
    created_at: datetime
    updated_at: datetime
    due_date: datetime | None = None
    priority: int
    category: str | None = None
    completed_at: datetime | None = None
    users: list[UserResponse] = []


class TodoSummary(BaseModel):
    """Todo without its users — embedded in assignment responses."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    is_completed: bool
    due_date: datetime | None = None
    priority: int
    category: str | None = None


class AssignmentResponse(BaseModel):
    """One Todo↔User assignment with both sides populated."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    todo_id: UUID
    user_id: UUID
    assigned_at: datetime
    todo: TodoSummary | None = None
    user: UserResponse | None = None


class UnassignResponse(BaseModel):
    removed: bool
