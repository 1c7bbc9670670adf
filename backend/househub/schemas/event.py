"""Event Schemas — calendar entry requests and response.

Invariants:
    - end_date >= start_date whenever both are known in the same request
    - color matches #RRGGBB
    - recurrence_pattern is one of RecurrencePattern
    - reminder_minutes_before >= 0
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from househub.core.domain_types import (
    DEFAULT_PRIORITY, PRIORITY_HIGHEST, PRIORITY_LOWEST, RecurrencePattern,
)
from househub.schemas import to_utc

_HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    start_date: datetime
    end_date: datetime
    location: str | None = Field(None, max_length=100)
    is_all_day: bool = False
    category: str | None = Field(None, max_length=50)
    color: str | None = Field(None, pattern=_HEX_COLOR)
    is_recurring: bool = False
    recurrence_pattern: RecurrencePattern | None = None
    recurrence_end_date: datetime | None = None
    has_reminder: bool = False
    reminder_minutes_before: int | None = Field(None, ge=0)
    priority: int = Field(DEFAULT_PRIORITY, ge=PRIORITY_HIGHEST, le=PRIORITY_LOWEST)

    @field_validator("start_date", "end_date", "recurrence_end_date")
    @classmethod
    def dates_utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.is_recurring and self.recurrence_pattern is None:
            raise ValueError("recurring event requires recurrence_pattern")
        return self


class EventUpdate(BaseModel):
    """Partial event update — None means "leave unchanged"."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = Field(None, max_length=100)
    is_all_day: bool | None = None
    category: str | None = Field(None, max_length=50)
    color: str | None = Field(None, pattern=_HEX_COLOR)
    is_recurring: bool | None = None
    recurrence_pattern: RecurrencePattern | None = None
    recurrence_end_date: datetime | None = None
    has_reminder: bool | None = None
    reminder_minutes_before: int | None = Field(None, ge=0)
    priority: int | None = Field(None, ge=PRIORITY_HIGHEST, le=PRIORITY_LOWEST)

    @field_validator("start_date", "end_date", "recurrence_end_date")
    @classmethod
    def dates_utc(cls, v: datetime | None) -> datetime | None:
        return to_utc(v)

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    start_date: datetime
    end_date: datetime
    location: str | None = None
    is_all_day: bool
    category: str | None = None
    color: str | None = None
    is_recurring: bool
    recurrence_pattern: str | None = None
    recurrence_end_date: datetime | None = None
    has_reminder: bool
    reminder_minutes_before: int | None = None
    priority: int
    created_at: datetime
    updated_at: datetime
