"""Request → Entity Mapping — explicit field-by-field construction and merge.

Invariants:
    - *_from_create builds a new entity; every persisted field is listed by name
    - merge_*_update copies only fields whose request value is not None
    - No function here touches timestamps other than the `now` it is handed,
      and none touches relationships (assignments are AssignmentService's job)
    - completed_at is never set here (TodoService.apply_completion owns it)
"""

from datetime import datetime

from househub.models.event import Event
from househub.models.todo import Todo
from househub.models.user import User
from househub.schemas.event import EventCreate, EventUpdate
from househub.schemas.todo import TodoCreate, TodoUpdate
from househub.schemas.user import UserCreate, UserUpdate


def _merge(target, request, fields: tuple[str, ...]) -> list[str]:
    """Copy non-None request fields onto target. Returns the names copied."""
    changed = []
    for name in fields:
        value = getattr(request, name)
        if value is None:
            continue
        setattr(target, name, value)
        changed.append(name)
    return changed


# ─── Todo ────────────────────────────────────────────────────────

_TODO_MERGE_FIELDS = (
    "title", "description", "is_completed", "due_date", "priority", "category",
)


def todo_from_create(request: TodoCreate, now: datetime) -> Todo:
    return Todo(
        title=request.title,
        description=request.description,
        due_date=request.due_date,
        priority=request.priority,
        category=request.category,
        is_completed=False,
        completed_at=None,
        created_at=now,
        updated_at=now,
    )


def merge_todo_update(todo: Todo, request: TodoUpdate, now: datetime) -> list[str]:
    changed = _merge(todo, request, _TODO_MERGE_FIELDS)
    todo.updated_at = now
    return changed


# ─── User ────────────────────────────────────────────────────────

_USER_MERGE_FIELDS = (
    "first_name", "last_name", "email", "phone_number", "date_of_birth",
    "gender", "address", "city", "postal_code", "country", "is_active",
)


def user_from_create(request: UserCreate, now: datetime) -> User:
    return User(
        first_name=request.first_name,
        last_name=request.last_name or "",
        email=request.email,
        phone_number=request.phone_number,
        date_of_birth=request.date_of_birth,
        gender=request.gender,
        address=request.address,
        city=request.city,
        postal_code=request.postal_code,
        country=request.country,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def merge_user_update(user: User, request: UserUpdate, now: datetime) -> list[str]:
    changed = _merge(user, request, _USER_MERGE_FIELDS)
    user.updated_at = now
    return changed


# ─── Event ───────────────────────────────────────────────────────

_EVENT_MERGE_FIELDS = (
    "title", "description", "start_date", "end_date", "location",
    "is_all_day", "category", "color", "is_recurring",
    "recurrence_end_date", "has_reminder", "reminder_minutes_before",
    "priority",
)


def event_from_create(request: EventCreate, now: datetime) -> Event:
    return Event(
        title=request.title,
        description=request.description,
        start_date=request.start_date,
        end_date=request.end_date,
        location=request.location,
        is_all_day=request.is_all_day,
        category=request.category,
        color=request.color,
        is_recurring=request.is_recurring,
        recurrence_pattern=(
            request.recurrence_pattern.value if request.recurrence_pattern else None
        ),
        recurrence_end_date=request.recurrence_end_date,
        has_reminder=request.has_reminder,
        reminder_minutes_before=request.reminder_minutes_before,
        priority=request.priority,
        created_at=now,
        updated_at=now,
    )


def merge_event_update(event: Event, request: EventUpdate, now: datetime) -> list[str]:
    changed = _merge(event, request, _EVENT_MERGE_FIELDS)
    if request.recurrence_pattern is not None:
        event.recurrence_pattern = request.recurrence_pattern.value
        changed.append("recurrence_pattern")
    event.updated_at = now
    return changed
