"""Event Service — calendar entry CRUD.

Invariants:
    - end_date >= start_date after every write, including partial updates
      that move only one end of the range
    - A recurring event always carries a recurrence_pattern
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from househub.core.errors import RequestValidationError, ResourceNotFoundError
from househub.infrastructure.database import transaction
from househub.models.event import Event
from househub.schemas import to_utc
from househub.schemas.event import EventCreate, EventUpdate
from househub.services.mapping import event_from_create, merge_event_update

logger = logging.getLogger(__name__)


@dataclass
class EventListQuery:
    starts_after: datetime | None = None
    ends_before: datetime | None = None
    category: str | None = None


def _check_consistency(event: Event) -> None:
    # stored values may come back naive from SQLite
    if to_utc(event.end_date) < to_utc(event.start_date):
        raise RequestValidationError(
            "end_date must not be before start_date", field="end_date",
        )
    if event.is_recurring and not event.recurrence_pattern:
        raise RequestValidationError(
            "recurring event requires recurrence_pattern",
            field="recurrence_pattern",
        )


class EventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self, query: EventListQuery | None = None) -> list[Event]:
        query = query or EventListQuery()
        stmt = select(Event)
        if query.starts_after is not None:
            stmt = stmt.where(Event.start_date >= query.starts_after)
        if query.ends_before is not None:
            stmt = stmt.where(Event.end_date <= query.ends_before)
        if query.category:
            stmt = stmt.where(Event.category == query.category)
        result = await self.db.execute(stmt.order_by(Event.start_date, Event.id))
        return list(result.scalars().all())

    async def get_by_id(self, event_id: UUID) -> Event:
        event = await self.db.get(Event, event_id)
        if event is None:
            raise ResourceNotFoundError("Event", str(event_id))
        return event

    async def create(self, request: EventCreate | None) -> Event:
        if request is None:
            raise RequestValidationError("Event payload is required")

        async with transaction(self.db, "create_event"):
            event = event_from_create(request, datetime.now(timezone.utc))
            self.db.add(event)
            await self.db.flush()

        logger.info(f"Event created: {event.id}", extra={"event_id": str(event.id)})
        return event

    async def update(self, event_id: UUID, request: EventUpdate) -> Event:
        async with transaction(self.db, "update_event"):
            event = await self.get_by_id(event_id)
            merge_event_update(event, request, datetime.now(timezone.utc))
            _check_consistency(event)
            await self.db.flush()
        return event

    async def delete(self, event_id: UUID) -> Event:
        async with transaction(self.db, "delete_event"):
            event = await self.get_by_id(event_id)
            await self.db.delete(event)
            await self.db.flush()

        logger.info(f"Event deleted: {event_id}", extra={"event_id": str(event_id)})
        return event
