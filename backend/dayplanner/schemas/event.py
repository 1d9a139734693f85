"""Pydantic schemas for Events.

The wire format is camelCase (``startTime``, ``reminderMinutes``); requests
may also use the snake_case attribute names.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from dayplanner.models.event import (
    DEFAULT_COLOR,
    DEFAULT_REMINDER_MINUTES,
    EVENT_COLORS,
    LOCATION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    RecurrencePattern,
)


def _check_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("title must not be empty")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return value


def _check_color(value: str) -> str:
    value = value.strip().lower()
    if value not in EVENT_COLORS:
        raise ValueError(f"color must be one of {', '.join(EVENT_COLORS)}")
    return value


Title = Annotated[str, AfterValidator(_check_title)]
Color = Annotated[str, AfterValidator(_check_color)]


class EventCreate(BaseModel):
    # Unknown keys (id, ownerId, userId, createdAt, ...) are dropped.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Title
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = Field(None, max_length=LOCATION_MAX_LENGTH)
    color: Color = DEFAULT_COLOR
    reminder_minutes: int = Field(DEFAULT_REMINDER_MINUTES, ge=0)
    recurrence_pattern: RecurrencePattern = RecurrencePattern.none
    recurrence_end_date: Optional[datetime] = None


class EventUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[Title] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=LOCATION_MAX_LENGTH)
    color: Optional[Color] = None
    reminder_minutes: Optional[int] = Field(None, ge=0)
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_end_date: Optional[datetime] = None


class EventOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    owner_id: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    color: str
    reminder_minutes: int
    recurrence_pattern: RecurrencePattern
    recurrence_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "end_time", "recurrence_end_date", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Stored instants come back naive; they are UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
