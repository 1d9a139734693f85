"""Calendar API routes — grid views and navigation."""
import logging
from datetime import date, datetime
from typing import Optional, Union
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dayplanner.database import get_db
from dayplanner.dependencies import get_current_user, get_viewer_timezone
from dayplanner.errors import ValidationError
from dayplanner.models.user import User
from dayplanner.schemas.calendar import (
    DayGrid,
    MonthGrid,
    NavigationIntent,
    NavigationState,
    ViewKind,
    WeekGrid,
)
from dayplanner.services import event_service, grid_service, navigation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/navigate", response_model=NavigationState)
def navigate(
    view: ViewKind = Query(...),
    current_date: date = Query(..., alias="date"),
    intent: Optional[NavigationIntent] = Query(None),
    switch_to: Optional[ViewKind] = Query(None, alias="switchTo"),
    tz=Depends(get_viewer_timezone),
):
    """Apply a prev/next/today intent and/or a view switch to the given state."""
    if intent is None and switch_to is None:
        raise ValidationError("intent or switchTo is required")

    state = NavigationState(current_date=current_date, view=view)
    if switch_to is not None:
        state = navigation_service.switch_view(state, switch_to)
    if intent is not None:
        state = navigation_service.navigate(state, intent, today=datetime.now(tz).date())
    return state


@router.get("/{view}", response_model=Union[DayGrid, WeekGrid, MonthGrid])
def view_grid(
    view: ViewKind,
    anchor: Optional[date] = Query(None, alias="date"),
    tz=Depends(get_viewer_timezone),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Lay the caller's events out on a day, week or month grid."""
    today = datetime.now(tz).date()
    # Full re-fetch on every view change; the composer picks what is visible.
    events = event_service.list_events(db, user.user_id)
    grid = grid_service.compose(view, anchor or today, events, tz=tz, today=today)
    logger.info("Served %s view of %s for user %s (%d events)", view.value, grid.anchor_date, user.user_id, len(events))
    return grid
