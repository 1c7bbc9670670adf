"""Service test fixtures — seeded household members and todos.

Invariants:
    - Seeds are written through the services, so every fixture leaves test_db
      committed with no open transaction (safe to mix with `client`)
"""

import pytest

from househub.schemas.todo import TodoCreate
from househub.schemas.user import UserCreate
from househub.services.todo_service import TodoService
from househub.services.user_service import UserService


@pytest.fixture
def user_service(test_db):
    return UserService(test_db)


@pytest.fixture
def todo_service(test_db):
    return TodoService(test_db)


@pytest.fixture
async def amy(user_service):
    return await user_service.create(UserCreate(first_name="Amy", email="amy@househub.dev"))


@pytest.fixture
async def household(user_service):
    """Four members: A, B, C, D (in creation order)."""
    users = []
    for name in ("Alice", "Bob", "Chloe", "Dan"):
        users.append(await user_service.create(UserCreate(first_name=name)))
    return users


@pytest.fixture
async def milk(todo_service):
    return await todo_service.create(TodoCreate(title="Buy milk"))
