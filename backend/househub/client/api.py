"""HouseHub HTTP Client — typed async wrapper over the /api/v1 surface.

Invariants:
    - Non-2xx responses raise ApiError carrying the envelope's code and message
    - Transport failures (connect, timeout) raise ApiError with status_code 0
    - Request bodies are dumped with exclude_none: omitted == "leave unchanged"
      on updates, while an explicit [] for assigned_user_ids is still sent
    - No retries: a failed call surfaces to the caller once

Design Decisions:
    - Wrapper over raw httpx.AsyncClient: callers (HouseHubStore, scripts) never
      parse status codes or error envelopes themselves
    - An injected httpx client is borrowed, never closed here (tests bind one to
      the app through ASGITransport)
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

import httpx
from pydantic import BaseModel

from househub.schemas.event import EventCreate, EventResponse, EventUpdate
from househub.schemas.todo import (
    AssignmentResponse, TodoCreate, TodoReplace, TodoResponse, TodoUpdate,
)
from househub.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class ApiError(Exception):
    """A HouseHub API call failed."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"ApiError({self.status_code}, {self.code!r}, {self.message!r})"


def _body(model: BaseModel) -> dict:
    return model.model_dump(mode="json", exclude_none=True)


def _params(**params: Any) -> dict:
    out = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, UUID):
            value = str(value)
        out[key] = value
    return out


class HouseHubClient:
    """Async client for the HouseHub API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        http: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )

    async def __aenter__(self) -> "HouseHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def _request(
        self, method: str, path: str, *, json: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        try:
            response = await self.http.request(
                method, f"{API_PREFIX}{path}", json=json, params=params,
            )
        except httpx.HTTPError as e:
            logger.error(f"HouseHub API unreachable: {method} {path}: {e}")
            raise ApiError(0, "TRANSPORT_ERROR", str(e) or "Transport error") from e

        if response.is_error:
            raise self._to_api_error(response)
        return response.json()

    @staticmethod
    def _to_api_error(response: httpx.Response) -> ApiError:
        try:
            error = response.json().get("error", {})
        except ValueError:
            error = {}
        return ApiError(
            response.status_code,
            error.get("code", "HTTP_ERROR"),
            error.get("message", response.reason_phrase or "Request failed"),
        )

    # ─── Todos ───────────────────────────────────────────────────

    async def list_todos(self, **filters: Any) -> list[TodoResponse]:
        data = await self._request("GET", "/todos", params=_params(**filters))
        return [TodoResponse.model_validate(t) for t in data]

    async def get_todo(self, todo_id: UUID) -> TodoResponse:
        return TodoResponse.model_validate(
            await self._request("GET", f"/todos/{todo_id}"),
        )

    async def create_todo(self, request: TodoCreate) -> TodoResponse:
        return TodoResponse.model_validate(
            await self._request("POST", "/todos", json=_body(request)),
        )

    async def update_todo(self, todo_id: UUID, request: TodoUpdate) -> TodoResponse:
        return TodoResponse.model_validate(
            await self._request("PATCH", f"/todos/{todo_id}", json=_body(request)),
        )

    async def replace_todo(self, todo_id: UUID, request: TodoReplace) -> TodoResponse:
        return TodoResponse.model_validate(
            await self._request("PUT", f"/todos/{todo_id}", json=_body(request)),
        )

    async def delete_todo(self, todo_id: UUID) -> TodoResponse:
        return TodoResponse.model_validate(
            await self._request("DELETE", f"/todos/{todo_id}"),
        )

    async def list_todo_users(self, todo_id: UUID) -> list[UserResponse]:
        data = await self._request("GET", f"/todos/{todo_id}/users")
        return [UserResponse.model_validate(u) for u in data]

    async def get_assignment(self, todo_id: UUID, user_id: UUID) -> AssignmentResponse:
        return AssignmentResponse.model_validate(
            await self._request("GET", f"/todos/{todo_id}/users/{user_id}"),
        )

    async def assign_user(self, todo_id: UUID, user_id: UUID) -> AssignmentResponse:
        return AssignmentResponse.model_validate(
            await self._request("POST", f"/todos/{todo_id}/users/{user_id}"),
        )

    async def unassign_user(self, todo_id: UUID, user_id: UUID) -> bool:
        data = await self._request("DELETE", f"/todos/{todo_id}/users/{user_id}")
        return bool(data["removed"])

    # ─── Users ───────────────────────────────────────────────────

    async def list_users(self, **filters: Any) -> list[UserResponse]:
        data = await self._request("GET", "/users", params=_params(**filters))
        return [UserResponse.model_validate(u) for u in data]

    async def get_user(self, user_id: UUID) -> UserResponse:
        return UserResponse.model_validate(
            await self._request("GET", f"/users/{user_id}"),
        )

    async def get_user_by_email(self, email: str) -> UserResponse:
        return UserResponse.model_validate(
            await self._request("GET", "/users/by-email", params={"email": email}),
        )

    async def create_user(self, request: UserCreate) -> UserResponse:
        return UserResponse.model_validate(
            await self._request("POST", "/users", json=_body(request)),
        )

    async def update_user(self, user_id: UUID, request: UserUpdate) -> UserResponse:
        return UserResponse.model_validate(
            await self._request("PATCH", f"/users/{user_id}", json=_body(request)),
        )

    async def delete_user(self, user_id: UUID) -> UserResponse:
        return UserResponse.model_validate(
            await self._request("DELETE", f"/users/{user_id}"),
        )

    async def list_user_todos(self, user_id: UUID) -> list[TodoResponse]:
        data = await self._request("GET", f"/users/{user_id}/todos")
        return [TodoResponse.model_validate(t) for t in data]

    # ─── Events ──────────────────────────────────────────────────

    async def list_events(self, **filters: Any) -> list[EventResponse]:
        data = await self._request("GET", "/events", params=_params(**filters))
        return [EventResponse.model_validate(e) for e in data]

    async def get_event(self, event_id: UUID) -> EventResponse:
        return EventResponse.model_validate(
            await self._request("GET", f"/events/{event_id}"),
        )

    async def create_event(self, request: EventCreate) -> EventResponse:
        return EventResponse.model_validate(
            await self._request("POST", "/events", json=_body(request)),
        )

    async def update_event(self, event_id: UUID, request: EventUpdate) -> EventResponse:
        return EventResponse.model_validate(
            await self._request("PATCH", f"/events/{event_id}", json=_body(request)),
        )

    async def delete_event(self, event_id: UUID) -> EventResponse:
        return EventResponse.model_validate(
            await self._request("DELETE", f"/events/{event_id}"),
        )
