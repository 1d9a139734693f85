"""Event API routes — owner-scoped CRUD delegated to event_service."""
import logging
from typing import Any, Optional
from datetime import datetime
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from dayplanner.database import get_db
from dayplanner.dependencies import get_current_user
from dayplanner.models.user import User
from dayplanner.schemas.event import EventOut
from dayplanner.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[EventOut])
def list_events(
    start_after: Optional[datetime] = Query(None, alias="startAfter"),
    start_before: Optional[datetime] = Query(None, alias="startBefore"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's events ordered by start time."""
    return event_service.list_events(db, user.user_id, start_after=start_after, start_before=start_before)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return event_service.get_event(db, user.user_id, event_id)


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create an event owned by the caller; owner fields in the body are ignored."""
    return event_service.create_event(db, user.user_id, payload)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update an event; fields left out of the body keep their stored value."""
    return event_service.update_event(db, user.user_id, event_id, payload)


@router.delete("/{event_id}")
def delete_event(event_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event_service.delete_event(db, user.user_id, event_id)
    return {"ok": True}
