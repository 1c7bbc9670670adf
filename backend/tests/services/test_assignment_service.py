"""Assignment Service — pair uniqueness, reference checks and reconciliation.

Invariants:
    - Assigning an existing pair → AlreadyAssignedError, count stays 1
    - Missing todo / user → InvalidReferenceError naming the field
    - unassign of a missing pair returns False
    - reconcile issues the minimal operations and lands on the desired set
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from househub.core.errors import AlreadyAssignedError, InvalidReferenceError
from househub.infrastructure.database import transaction
from househub.models.assignment import Assignment
from househub.services.assignment_service import AssignmentService


@pytest.fixture
def assignments(test_db):
    return AssignmentService(test_db)


async def _count(db, todo_id) -> int:
    return await db.scalar(
        select(func.count()).select_from(Assignment).where(Assignment.todo_id == todo_id),
    )


async def test_assign_creates_row(assignments, test_db, milk, amy):
    async with transaction(test_db):
        assignment = await assignments.assign(milk.id, amy.id)
    assert assignment.todo_id == milk.id
    assert assignment.user_id == amy.id
    assert assignment.assigned_at is not None


async def test_assign_twice_conflicts(assignments, test_db, milk, amy):
    todo_id, user_id = milk.id, amy.id
    async with transaction(test_db):
        await assignments.assign(todo_id, user_id)

    with pytest.raises(AlreadyAssignedError):
        async with transaction(test_db):
            await assignments.assign(todo_id, user_id)
    assert await _count(test_db, todo_id) == 1


async def test_lost_race_on_insert_is_still_a_conflict(assignments, test_db, milk, amy, monkeypatch):
    todo_id, user_id = milk.id, amy.id
    async with transaction(test_db):
        await assignments.assign(todo_id, user_id)

    async def pair_missing(*_):
        return False

    monkeypatch.setattr(assignments, "_pair_exists", pair_missing)
    with pytest.raises(AlreadyAssignedError) as exc:
        async with transaction(test_db):
            await assignments.assign(todo_id, user_id)
    assert exc.value.http_status == 409
    assert await _count(test_db, todo_id) == 1


async def test_assign_unknown_todo(assignments, amy):
    with pytest.raises(InvalidReferenceError) as exc:
        await assignments.assign(uuid4(), amy.id)
    assert exc.value.field == "todo_id"


async def test_assign_unknown_user(assignments, milk):
    with pytest.raises(InvalidReferenceError) as exc:
        await assignments.assign(milk.id, uuid4())
    assert exc.value.field == "user_id"


async def test_unassign(assignments, test_db, milk, amy):
    async with transaction(test_db):
        await assignments.assign(milk.id, amy.id)
    async with transaction(test_db):
        assert await assignments.unassign(milk.id, amy.id) is True
    async with transaction(test_db):
        assert await assignments.unassign(milk.id, amy.id) is False
    assert await _count(test_db, milk.id) == 0


async def test_unassign_never_assigned_returns_false(assignments, milk):
    assert await assignments.unassign(milk.id, uuid4()) is False


async def test_lists_both_directions(assignments, test_db, milk, household):
    alice, bob = household[0], household[1]
    async with transaction(test_db):
        await assignments.assign(milk.id, alice.id)
        await assignments.assign(milk.id, bob.id)

    users = await assignments.list_users_for_todo(milk.id)
    assert {u.id for u in users} == {alice.id, bob.id}

    todos = await assignments.list_todos_for_user(alice.id)
    assert [t.id for t in todos] == [milk.id]
    assert {u.id for u in todos[0].users} == {alice.id, bob.id}

    assert await assignments.list_users_for_todo(uuid4()) == []
    assert await assignments.list_todos_for_user(household[3].id) == []


async def test_get_assignment_populates_both_sides(assignments, test_db, milk, amy):
    async with transaction(test_db):
        await assignments.assign(milk.id, amy.id)
    found = await assignments.get_assignment(milk.id, amy.id)
    assert found.todo.title == "Buy milk"
    assert found.user.first_name == "Amy"
    assert await assignments.get_assignment(milk.id, uuid4()) is None


async def test_reconcile_swaps_minimal_set(assignments, test_db, milk, household):
    a, b, c, d = household
    async with transaction(test_db):
        await assignments.reconcile(milk.id, [a.id, b.id, c.id])

    async with transaction(test_db):
        diff = await assignments.reconcile(milk.id, [b.id, c.id, d.id])

    assert diff.to_remove == (a.id,)
    assert diff.to_add == (d.id,)
    users = await assignments.list_users_for_todo(milk.id)
    assert {u.id for u in users} == {b.id, c.id, d.id}


async def test_reconcile_same_list_twice_is_noop(assignments, test_db, milk, household):
    ids = [u.id for u in household[:2]]
    async with transaction(test_db):
        first = await assignments.reconcile(milk.id, ids)
    async with transaction(test_db):
        second = await assignments.reconcile(milk.id, ids)
    assert first.operation_count == 2
    assert second.is_empty
    assert await _count(test_db, milk.id) == 2


async def test_reconcile_to_empty_clears(assignments, test_db, milk, household):
    async with transaction(test_db):
        await assignments.reconcile(milk.id, [u.id for u in household])
    async with transaction(test_db):
        diff = await assignments.reconcile(milk.id, [])
    assert len(diff.to_remove) == 4
    assert await _count(test_db, milk.id) == 0
