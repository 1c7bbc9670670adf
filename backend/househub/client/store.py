"""HouseHub Store — immutable client state, a pure reducer, and an async store.

Invariants:
    - HouseHubState is frozen; reduce() never mutates its input
    - Started(flag) sets exactly that loading flag and clears error
    - Every success action clears the flag of the operation it completes;
      Failed(flag, message) clears the flag and records the message
    - todos / users are keyed by id and keep insertion order
    - Removing a user clears the selection if it was theirs and drops them
      from every cached todo's users

Design Decisions:
    - Actions as frozen dataclasses + a single reduce(): the whole state
      transition table is testable without HTTP
    - HouseHubStore swallows ApiError into state.error (the UI reads it), and
      returns None from the failed operation
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Awaitable, Callable, Mapping, TypeVar, Union
from uuid import UUID

from househub.client.api import ApiError, HouseHubClient
from househub.schemas.todo import TodoCreate, TodoResponse, TodoUpdate
from househub.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadingFlag(str, Enum):
    """Names of the HouseHubState loading flags."""
    APP = "app_is_loading"
    TODO_LOADING = "todo_is_loading"
    TODO_CREATION = "todo_creation_pending"
    TODO_UPDATING = "todo_updating_pending"
    TODO_DELETION = "todo_deletion_pending"
    USER_LOADING = "user_is_loading"
    USER_CREATION = "user_creation_pending"
    USER_UPDATING = "user_updating_pending"
    USER_DELETION = "user_deletion_pending"


@dataclass(frozen=True)
class HouseHubState:
    todos: Mapping[UUID, TodoResponse] = field(default_factory=dict)
    users: Mapping[UUID, UserResponse] = field(default_factory=dict)
    selected_user_id: UUID | None = None
    app_is_loading: bool = True
    todo_is_loading: bool = False
    todo_creation_pending: bool = False
    todo_updating_pending: bool = False
    todo_deletion_pending: bool = False
    user_is_loading: bool = False
    user_creation_pending: bool = False
    user_updating_pending: bool = False
    user_deletion_pending: bool = False
    error: str | None = None

    @property
    def any_todo_operation_pending(self) -> bool:
        return (
            self.todo_is_loading or self.todo_creation_pending
            or self.todo_updating_pending or self.todo_deletion_pending
        )

    @property
    def any_user_operation_pending(self) -> bool:
        return (
            self.user_is_loading or self.user_creation_pending
            or self.user_updating_pending or self.user_deletion_pending
        )


# ─── Actions ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Started:
    flag: LoadingFlag


@dataclass(frozen=True)
class Failed:
    flag: LoadingFlag
    message: str


@dataclass(frozen=True)
class TodosLoaded:
    todos: tuple[TodoResponse, ...]


@dataclass(frozen=True)
class TodoAdded:
    todo: TodoResponse


@dataclass(frozen=True)
class TodoUpdated:
    todo: TodoResponse


@dataclass(frozen=True)
class TodoRemoved:
    todo_id: UUID


@dataclass(frozen=True)
class UsersLoaded:
    users: tuple[UserResponse, ...]


@dataclass(frozen=True)
class UserAdded:
    user: UserResponse


@dataclass(frozen=True)
class UserUpdated:
    user: UserResponse


@dataclass(frozen=True)
class UserRemoved:
    user_id: UUID


@dataclass(frozen=True)
class UserSelected:
    user_id: UUID | None


@dataclass(frozen=True)
class ErrorCleared:
    pass


@dataclass(frozen=True)
class AppReady:
    pass


Action = Union[
    Started, Failed, TodosLoaded, TodoAdded, TodoUpdated, TodoRemoved,
    UsersLoaded, UserAdded, UserUpdated, UserRemoved, UserSelected,
    ErrorCleared, AppReady,
]


def _without(entities: Mapping[UUID, T], key: UUID) -> dict[UUID, T]:
    return {k: v for k, v in entities.items() if k != key}


def _drop_assignee(todos: Mapping[UUID, TodoResponse], user_id: UUID) -> dict[UUID, TodoResponse]:
    return {
        k: t.model_copy(update={"users": [u for u in t.users if u.id != user_id]})
        if any(u.id == user_id for u in t.users) else t
        for k, t in todos.items()
    }


def reduce(state: HouseHubState, action: Action) -> HouseHubState:
    """Pure state transition."""
    if isinstance(action, Started):
        return replace(state, **{action.flag.value: True}, error=None)
    if isinstance(action, Failed):
        return replace(state, **{action.flag.value: False}, error=action.message)

    if isinstance(action, TodosLoaded):
        return replace(
            state, todos={t.id: t for t in action.todos}, todo_is_loading=False,
        )
    if isinstance(action, TodoAdded):
        return replace(
            state, todos={**state.todos, action.todo.id: action.todo},
            todo_creation_pending=False,
        )
    if isinstance(action, TodoUpdated):
        return replace(
            state, todos={**state.todos, action.todo.id: action.todo},
            todo_updating_pending=False,
        )
    if isinstance(action, TodoRemoved):
        return replace(
            state, todos=_without(state.todos, action.todo_id),
            todo_deletion_pending=False,
        )

    if isinstance(action, UsersLoaded):
        return replace(
            state, users={u.id: u for u in action.users}, user_is_loading=False,
        )
    if isinstance(action, UserAdded):
        return replace(
            state, users={**state.users, action.user.id: action.user},
            user_creation_pending=False,
        )
    if isinstance(action, UserUpdated):
        return replace(
            state, users={**state.users, action.user.id: action.user},
            user_updating_pending=False,
        )
    if isinstance(action, UserRemoved):
        selected = state.selected_user_id
        return replace(
            state, users=_without(state.users, action.user_id),
            todos=_drop_assignee(state.todos, action.user_id),
            selected_user_id=None if selected == action.user_id else selected,
            user_deletion_pending=False,
        )

    if isinstance(action, UserSelected):
        return replace(state, selected_user_id=action.user_id)
    if isinstance(action, ErrorCleared):
        return replace(state, error=None)
    if isinstance(action, AppReady):
        return replace(state, app_is_loading=False)

    raise TypeError(f"Unknown action: {action!r}")


class HouseHubStore:
    """Client state container: API calls in, reduced state out."""

    def __init__(self, client: HouseHubClient, state: HouseHubState | None = None):
        self.client = client
        self.state = state or HouseHubState()

    def dispatch(self, action: Action) -> HouseHubState:
        self.state = reduce(self.state, action)
        return self.state

    async def _run(
        self,
        flag: LoadingFlag,
        call: Awaitable[T],
        on_success: Callable[[T], Action],
    ) -> T | None:
        self.dispatch(Started(flag))
        try:
            result = await call
        except ApiError as e:
            logger.warning(f"{flag.value} failed: {e.code} {e.message}")
            self.dispatch(Failed(flag, e.message or "Operation failed"))
            return None
        self.dispatch(on_success(result))
        return result

    # ─── Todos ───────────────────────────────────────────────────

    async def load_todos(self, **filters) -> list[TodoResponse] | None:
        return await self._run(
            LoadingFlag.TODO_LOADING, self.client.list_todos(**filters),
            lambda todos: TodosLoaded(tuple(todos)),
        )

    async def add_todo(self, request: TodoCreate) -> TodoResponse | None:
        return await self._run(
            LoadingFlag.TODO_CREATION, self.client.create_todo(request), TodoAdded,
        )

    async def update_todo(self, todo_id: UUID, request: TodoUpdate) -> TodoResponse | None:
        return await self._run(
            LoadingFlag.TODO_UPDATING, self.client.update_todo(todo_id, request),
            TodoUpdated,
        )

    async def remove_todo(self, todo_id: UUID) -> TodoResponse | None:
        return await self._run(
            LoadingFlag.TODO_DELETION, self.client.delete_todo(todo_id),
            lambda _: TodoRemoved(todo_id),
        )

    # ─── Users ───────────────────────────────────────────────────

    async def load_users(self, **filters) -> list[UserResponse] | None:
        return await self._run(
            LoadingFlag.USER_LOADING, self.client.list_users(**filters),
            lambda users: UsersLoaded(tuple(users)),
        )

    async def load_active_users(self) -> list[UserResponse] | None:
        return await self.load_users(is_active=True)

    async def search_users(self, term: str) -> list[UserResponse] | None:
        return await self.load_users(search=term)

    async def add_user(self, request: UserCreate) -> UserResponse | None:
        return await self._run(
            LoadingFlag.USER_CREATION, self.client.create_user(request), UserAdded,
        )

    async def update_user(self, user_id: UUID, request: UserUpdate) -> UserResponse | None:
        return await self._run(
            LoadingFlag.USER_UPDATING, self.client.update_user(user_id, request),
            UserUpdated,
        )

    async def remove_user(self, user_id: UUID) -> UserResponse | None:
        return await self._run(
            LoadingFlag.USER_DELETION, self.client.delete_user(user_id),
            lambda _: UserRemoved(user_id),
        )

    # ─── Session ─────────────────────────────────────────────────

    def clear_error(self) -> None:
        self.dispatch(ErrorCleared())

    def select_user(self, user_id: UUID | None) -> None:
        self.dispatch(UserSelected(user_id))

    async def initialize(self, remembered_user_id: UUID | None = None) -> None:
        """Load active users and restore the remembered selection if still active."""
        self.dispatch(Started(LoadingFlag.APP))
        users = await self.load_active_users()
        if users is not None and remembered_user_id in {u.id for u in users}:
            self.select_user(remembered_user_id)
        else:
            self.select_user(None)
        self.dispatch(AppReady())

    # ─── Derived views ───────────────────────────────────────────

    def todos_for_user(self, user_id: UUID) -> list[TodoResponse]:
        return [
            t for t in self.state.todos.values()
            if any(u.id == user_id for u in t.users)
        ]

    @property
    def completed_todos(self) -> list[TodoResponse]:
        return [t for t in self.state.todos.values() if t.is_completed]

    @property
    def pending_todos(self) -> list[TodoResponse]:
        return [t for t in self.state.todos.values() if not t.is_completed]

    @property
    def completed_count(self) -> int:
        return len(self.completed_todos)

    @property
    def pending_count(self) -> int:
        return len(self.pending_todos)

    @property
    def active_users(self) -> list[UserResponse]:
        return [u for u in self.state.users.values() if u.is_active]

    @property
    def inactive_users(self) -> list[UserResponse]:
        return [u for u in self.state.users.values() if not u.is_active]

    @property
    def users_with_email(self) -> list[UserResponse]:
        return [u for u in self.state.users.values() if u.email]
