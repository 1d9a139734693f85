"""Grid composer — lays events out on day, week and month grids.

Everything here is a pure function of (view, anchor date, events, viewer
zone). Events are placed by their start instant as read on the viewer's
wall clock; they are never split across cells and recurring events are
placed once, at their stored start.

Known limitation: there is no normalisation between the writer's zone and
the viewer's, so an event written at 23:30 in one zone may land on the next
day for a viewer elsewhere.
"""
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Iterable, Optional

import pytz
from dateutil.relativedelta import relativedelta

from dayplanner.schemas.calendar import (
    DayGrid,
    DaySchedule,
    HourBucket,
    MonthCell,
    MonthGrid,
    ViewKind,
    WeekGrid,
)
from dayplanner.schemas.event import EventOut

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
MONTH_CELL_LIMIT = 3  # fixed; the rest collapse into "+N more"


def wall_clock(instant: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Read ``instant`` on the viewer's wall clock (naive result).

    Naive instants are UTC, matching how they are stored.
    """
    tz = tz or pytz.utc
    if instant.tzinfo is None:
        instant = pytz.utc.localize(instant)
    return instant.astimezone(tz).replace(tzinfo=None)


def event_sort_key(event: EventOut) -> tuple:
    return (event.start_time, event.id)


def week_start(day: date) -> date:
    """The Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % DAYS_PER_WEEK)


def month_bounds(anchor: date) -> tuple[date, date]:
    first = anchor.replace(day=1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last


def visible_window(view: ViewKind, anchor: date) -> tuple[date, date]:
    """First and last calendar dates shown by ``view`` around ``anchor``."""
    view = ViewKind(view)
    if view == ViewKind.day:
        return anchor, anchor
    if view == ViewKind.week:
        start = week_start(anchor)
        return start, start + timedelta(days=DAYS_PER_WEEK - 1)
    first, last = month_bounds(anchor)
    return week_start(first), week_start(last) + timedelta(days=DAYS_PER_WEEK - 1)


def _normalize(events: Iterable[Any]) -> list[EventOut]:
    return [EventOut.model_validate(event) for event in events]


def _bucket_by_hour(events: list[EventOut], tz: Optional[tzinfo]) -> dict[tuple[date, int], list[EventOut]]:
    buckets: dict[tuple[date, int], list[EventOut]] = defaultdict(list)
    for event in events:
        local = wall_clock(event.start_time, tz)
        buckets[(local.date(), local.hour)].append(event)
    for bucket in buckets.values():
        bucket.sort(key=event_sort_key)
    return buckets


def _bucket_by_day(events: list[EventOut], tz: Optional[tzinfo]) -> dict[date, list[EventOut]]:
    buckets: dict[date, list[EventOut]] = defaultdict(list)
    for event in events:
        buckets[wall_clock(event.start_time, tz).date()].append(event)
    for bucket in buckets.values():
        bucket.sort(key=event_sort_key)
    return buckets


def _day_schedule(day: date, buckets: dict, today: Optional[date]) -> DaySchedule:
    return DaySchedule(
        date=day,
        is_today=day == today,
        hours=[HourBucket(hour=hour, events=buckets.get((day, hour), [])) for hour in range(HOURS_PER_DAY)],
    )


def compose_day(
    anchor: date,
    events: Iterable[Any],
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
) -> DayGrid:
    """24 hour buckets for ``anchor``; an event sits in the hour it starts."""
    buckets = _bucket_by_hour(_normalize(events), tz)
    return DayGrid(
        anchor_date=anchor,
        start_date=anchor,
        end_date=anchor,
        day=_day_schedule(anchor, buckets, today),
    )


def compose_week(
    anchor: date,
    events: Iterable[Any],
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
) -> WeekGrid:
    """Sunday-first week containing ``anchor``, each day split into hours."""
    start, end = visible_window(ViewKind.week, anchor)
    buckets = _bucket_by_hour(_normalize(events), tz)
    days = [_day_schedule(start + timedelta(days=offset), buckets, today) for offset in range(DAYS_PER_WEEK)]
    return WeekGrid(anchor_date=anchor, start_date=start, end_date=end, days=days)


def compose_month(
    anchor: date,
    events: Iterable[Any],
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
) -> MonthGrid:
    """Full weeks covering the anchor's month, at most 3 events per cell."""
    start, end = visible_window(ViewKind.month, anchor)
    buckets = _bucket_by_day(_normalize(events), tz)

    weeks: list[list[MonthCell]] = []
    day = start
    while day <= end:
        row = []
        for _ in range(DAYS_PER_WEEK):
            day_events = buckets.get(day, [])
            row.append(MonthCell(
                date=day,
                in_month=(day.year, day.month) == (anchor.year, anchor.month),
                is_today=day == today,
                events=day_events[:MONTH_CELL_LIMIT],
                total=len(day_events),
                overflow=max(len(day_events) - MONTH_CELL_LIMIT, 0),
            ))
            day += timedelta(days=1)
        weeks.append(row)

    return MonthGrid(anchor_date=anchor, start_date=start, end_date=end, weeks=weeks)


_COMPOSERS = {
    ViewKind.day: compose_day,
    ViewKind.week: compose_week,
    ViewKind.month: compose_month,
}


def compose(
    view: ViewKind,
    anchor: date,
    events: Iterable[Any],
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
):
    """Dispatch to the composer for ``view``."""
    grid = _COMPOSERS[ViewKind(view)](anchor, events, tz=tz, today=today)
    logger.debug("Composed %s grid for %s (%s to %s)", grid.view, anchor, grid.start_date, grid.end_date)
    return grid
