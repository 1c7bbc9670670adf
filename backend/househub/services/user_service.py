"""User Service — household member CRUD with email uniqueness.

Invariants:
    - Email is unique among non-null values: checked before write, and the
      storage unique constraint is the final authority (lost races → DuplicateEmailError)
    - Blank email never reaches storage (schemas normalize it to None)
    - Delete is a hard delete; todo_users rows go with it (ON DELETE CASCADE)
    - Every write runs inside transaction(): all-or-nothing

Design Decisions:
    - Service owns the AsyncSession it is given; routes never write directly
    - Raises HouseHubError subclasses only, never HTTP exceptions
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from househub.core.domain_types import SortDirection, parse_sort
from househub.core.errors import (
    DatabaseError, DuplicateEmailError, HouseHubError, RequestValidationError,
    ResourceNotFoundError,
)
from househub.infrastructure.database import transaction
from househub.models.user import User
from househub.schemas.user import UserCreate, UserUpdate, canonical_email
from househub.services.mapping import merge_user_update, user_from_create

logger = logging.getLogger(__name__)

USER_SORT_FIELDS = frozenset({"first_name", "last_name", "created_at"})


@dataclass
class UserListQuery:
    """Optional filters for UserService.list_all. None fields are ignored."""
    is_active: bool | None = None
    city: str | None = None
    search: str | None = None
    sort: str = "created_at"
    limit: int | None = None
    offset: int = 0


def storage_conflict(exc: IntegrityError, email: str | None, operation: str) -> HouseHubError:
    """Map a unique violation on write to the error callers understand."""
    if email:
        return DuplicateEmailError(email)
    logger.error(f"Integrity error during {operation}: {exc.orig}")
    return DatabaseError("Database operation failed", operation)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self, query: UserListQuery | None = None) -> list[User]:
        query = query or UserListQuery()
        stmt = select(User)
        if query.is_active is not None:
            stmt = stmt.where(User.is_active == query.is_active)
        if query.city:
            stmt = stmt.where(User.city == query.city)
        if query.search:
            pattern = f"%{query.search.strip()}%"
            stmt = stmt.where(or_(
                User.first_name.ilike(pattern), User.last_name.ilike(pattern),
            ))

        field, direction = parse_sort(query.sort, USER_SORT_FIELDS, "created_at")
        column = getattr(User, field)
        stmt = stmt.order_by(
            column.desc() if direction == SortDirection.DESC else column.asc(),
            User.id,
        )
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def get_by_email(self, email: str) -> User:
        email = canonical_email(email)
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", email)
        return user

    async def email_exists(
        self, email: str | None, exclude_user_id: UUID | None = None,
    ) -> bool:
        """True iff some other user already owns this exact email."""
        if not email or not email.strip():
            return False
        stmt = select(User.id).where(User.email == email)
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        result = await self.db.execute(stmt.limit(1))
        return result.first() is not None

    async def create(self, request: UserCreate | None) -> User:
        if request is None:
            raise RequestValidationError("User payload is required")

        async with transaction(self.db, "create_user"):
            if await self.email_exists(request.email):
                raise DuplicateEmailError(request.email)

            user = user_from_create(request, datetime.now(timezone.utc))
            self.db.add(user)
            try:
                await self.db.flush()
            except IntegrityError as e:
                raise storage_conflict(e, request.email, "create_user") from e

        logger.info(f"User created: {user.id}", extra={"user_id": str(user.id)})
        return user

    async def update(self, user_id: UUID, request: UserUpdate) -> User:
        async with transaction(self.db, "update_user"):
            user = await self.get_by_id(user_id)

            if request.email and request.email != user.email:
                if await self.email_exists(request.email, exclude_user_id=user.id):
                    raise DuplicateEmailError(request.email)

            merge_user_update(user, request, datetime.now(timezone.utc))
            try:
                await self.db.flush()
            except IntegrityError as e:
                raise storage_conflict(e, request.email, "update_user") from e

        return user

    async def delete(self, user_id: UUID) -> User:
        """Hard delete. Returns the user as it was before deletion."""
        async with transaction(self.db, "delete_user"):
            user = await self.get_by_id(user_id)
            await self.db.delete(user)
            await self.db.flush()

        logger.info(f"User deleted: {user_id}", extra={"user_id": str(user_id)})
        return user
