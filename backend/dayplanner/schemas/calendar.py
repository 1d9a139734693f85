"""Pydantic schemas for calendar grids and navigation state."""
import enum
from datetime import date
from typing import Literal
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dayplanner.schemas.event import EventOut


class ViewKind(str, enum.Enum):
    day = "day"
    week = "week"
    month = "month"


class NavigationIntent(str, enum.Enum):
    prev = "prev"
    next = "next"
    today = "today"


class _GridModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HourBucket(_GridModel):
    hour: int
    events: list[EventOut] = []


class DaySchedule(_GridModel):
    date: date
    is_today: bool = False
    hours: list[HourBucket]


class MonthCell(_GridModel):
    date: date
    in_month: bool
    is_today: bool = False
    events: list[EventOut] = []  # at most MONTH_CELL_LIMIT
    total: int = 0
    overflow: int = 0  # rendered as "+N more"


class DayGrid(_GridModel):
    view: Literal["day"] = "day"
    anchor_date: date
    start_date: date
    end_date: date
    day: DaySchedule


class WeekGrid(_GridModel):
    view: Literal["week"] = "week"
    anchor_date: date
    start_date: date
    end_date: date
    days: list[DaySchedule]


class MonthGrid(_GridModel):
    view: Literal["month"] = "month"
    anchor_date: date
    start_date: date
    end_date: date
    weeks: list[list[MonthCell]]


class NavigationState(_GridModel):
    current_date: date
    view: ViewKind
