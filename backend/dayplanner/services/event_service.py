"""Event repository — owner-scoped CRUD over event records.

Every query filters on ``owner_id``; an event owned by someone else is
reported exactly like a missing one (NotFound), so ids of other users'
events never leak. Owner and id are always assigned server-side.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import pydantic
from sqlalchemy.orm import Session

from dayplanner.errors import NotFound, ValidationError
from dayplanner.models.event import Event
from dayplanner.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

# Fields that cannot be cleared by an update.
_REQUIRED_FIELDS = (
    "title",
    "start_time",
    "end_time",
    "color",
    "reminder_minutes",
    "recurrence_pattern",
)
_INSTANT_FIELDS = ("start_time", "end_time", "recurrence_end_date")


def to_storage_instant(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an instant to naive UTC for storage. Naive input is taken as UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _validation_message(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def _parse(schema: type[pydantic.BaseModel], fields: Mapping[str, Any]) -> pydantic.BaseModel:
    try:
        return schema.model_validate(dict(fields))
    except pydantic.ValidationError as exc:
        raise ValidationError(_validation_message(exc))


def _owned_query(db: Session, owner_id: str):
    return db.query(Event).filter(Event.owner_id == owner_id)


def list_events(
    db: Session,
    owner_id: str,
    start_after: Optional[datetime] = None,
    start_before: Optional[datetime] = None,
) -> list[Event]:
    """All of the owner's events by start time, ties in creation order."""
    query = _owned_query(db, owner_id)
    if start_after is not None:
        query = query.filter(Event.start_time >= to_storage_instant(start_after))
    if start_before is not None:
        query = query.filter(Event.start_time <= to_storage_instant(start_before))
    return query.order_by(Event.start_time, Event.id).all()


def get_event(db: Session, owner_id: str, event_id: int) -> Event:
    event = _owned_query(db, owner_id).filter(Event.id == event_id).first()
    if event is None:
        raise NotFound("Event not found")
    return event


def create_event(db: Session, owner_id: str, fields: Mapping[str, Any]) -> Event:
    """Validate ``fields`` and persist a new event owned by ``owner_id``."""
    payload = _parse(EventCreate, fields)
    values = payload.model_dump()
    for name in _INSTANT_FIELDS:
        values[name] = to_storage_instant(values[name])

    event = Event(owner_id=owner_id, **values)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event %s ('%s') for user %s", event.id, event.title, owner_id)
    return event


def update_event(db: Session, owner_id: str, event_id: int, fields: Mapping[str, Any]) -> Event:
    """Merge a sparse set of fields into the owner's event; omitted fields are kept."""
    payload = _parse(EventUpdate, fields)
    updates = payload.model_dump(exclude_unset=True)

    cleared = [name for name in _REQUIRED_FIELDS if name in updates and updates[name] is None]
    if cleared:
        raise ValidationError(f"{cleared[0]}: field is required")

    event = get_event(db, owner_id, event_id)
    for field, value in updates.items():
        if field in _INSTANT_FIELDS:
            value = to_storage_instant(value)
        setattr(event, field, value)

    event.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s for user %s (%s)", event_id, owner_id, ", ".join(sorted(updates)) or "no fields")
    return event


def delete_event(db: Session, owner_id: str, event_id: int) -> None:
    event = get_event(db, owner_id, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s for user %s", event_id, owner_id)
