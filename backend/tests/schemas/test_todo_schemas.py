"""Todo schemas — request validation at the API boundary.

Invariants:
    - title required on create/replace, stripped, 1-200 chars
    - priority 1-5, default 3
    - assigned_user_ids: None (leave alone) is distinct from [] (clear)
"""

from datetime import datetime, timezone, timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from househub.schemas.todo import TodoCreate, TodoReplace, TodoUpdate


def test_create_defaults():
    todo = TodoCreate(title="Buy milk")
    assert todo.priority == 3
    assert todo.assigned_user_ids is None
    assert todo.description is None


def test_create_strips_title():
    assert TodoCreate(title="  Buy milk ").title == "Buy milk"


def test_create_rejects_blank_title():
    with pytest.raises(ValidationError):
        TodoCreate(title="   ")


def test_create_rejects_long_title():
    with pytest.raises(ValidationError):
        TodoCreate(title="x" * 201)


@pytest.mark.parametrize("priority", [0, 6])
def test_priority_out_of_range(priority):
    with pytest.raises(ValidationError):
        TodoCreate(title="t", priority=priority)


def test_description_max_length():
    with pytest.raises(ValidationError):
        TodoCreate(title="t", description="x" * 1001)


def test_due_date_normalized_to_utc():
    paris = timezone(timedelta(hours=2))
    todo = TodoCreate(title="t", due_date=datetime(2026, 11, 1, 20, 0, tzinfo=paris))
    assert todo.due_date == datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc)
    assert todo.due_date.utcoffset() == timedelta(0)


def test_naive_due_date_taken_as_utc():
    todo = TodoCreate(title="t", due_date=datetime(2026, 11, 1, 18, 0))
    assert todo.due_date.tzinfo is not None


def test_update_all_optional():
    update = TodoUpdate()
    assert update.title is None
    assert update.is_completed is None
    assert update.assigned_user_ids is None


def test_update_empty_list_is_kept():
    assert TodoUpdate(assigned_user_ids=[]).assigned_user_ids == []


def test_update_parses_uuid_strings():
    uid = uuid4()
    assert TodoUpdate(assigned_user_ids=[str(uid)]).assigned_user_ids == [uid]


def test_replace_requires_title():
    with pytest.raises(ValidationError):
        TodoReplace(is_completed=True)
    assert TodoReplace(title="x").title == "x"
