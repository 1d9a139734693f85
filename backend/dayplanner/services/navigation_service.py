"""Navigation controller — next (current date, view) pair for an intent.

The state is a flat record; every transition is legal from every state.
"""
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from dayplanner.schemas.calendar import NavigationIntent, NavigationState, ViewKind

_STEP = {
    ViewKind.day: relativedelta(days=1),
    ViewKind.week: relativedelta(weeks=1),
    # relativedelta clamps to month end: Jan 31 + 1 month -> Feb 28/29
    ViewKind.month: relativedelta(months=1),
}


def shift(current: date, view: ViewKind, steps: int) -> date:
    return current + _STEP[ViewKind(view)] * steps


def navigate(state: NavigationState, intent: NavigationIntent, today: Optional[date] = None) -> NavigationState:
    intent = NavigationIntent(intent)
    if intent == NavigationIntent.today:
        current = today or date.today()
    elif intent == NavigationIntent.prev:
        current = shift(state.current_date, state.view, -1)
    else:
        current = shift(state.current_date, state.view, 1)
    return NavigationState(current_date=current, view=state.view)


def switch_view(state: NavigationState, view: ViewKind) -> NavigationState:
    return NavigationState(current_date=state.current_date, view=ViewKind(view))
