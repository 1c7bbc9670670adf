"""Event Routes — calendar entry CRUD."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from househub.infrastructure.database import get_db
from househub.schemas.event import EventCreate, EventResponse, EventUpdate
from househub.services.event_service import EventListQuery, EventService

router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.get("", response_model=list[EventResponse])
async def list_events(
    starts_after: datetime | None = Query(None),
    ends_before: datetime | None = Query(None),
    category: str | None = Query(None, max_length=50),
    db: AsyncSession = Depends(get_db),
):
    events = await EventService(db).list_all(EventListQuery(
        starts_after=starts_after, ends_before=ends_before, category=category,
    ))
    return [EventResponse.model_validate(e) for e in events]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    return EventResponse.model_validate(await EventService(db).get_by_id(event_id))


@router.post(
    "", response_model=EventResponse, status_code=status.HTTP_201_CREATED,
)
async def create_event(body: EventCreate, db: AsyncSession = Depends(get_db)):
    return EventResponse.model_validate(await EventService(db).create(body))


@router.put("/{event_id}", response_model=EventResponse)
@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID, body: EventUpdate, db: AsyncSession = Depends(get_db),
):
    event = await EventService(db).update(event_id, body)
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", response_model=EventResponse)
async def delete_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    return EventResponse.model_validate(await EventService(db).delete(event_id))
