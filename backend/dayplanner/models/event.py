"""Event ORM model."""
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from dayplanner.database import Base


class RecurrencePattern(str, enum.Enum):
    none = "none"
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


DEFAULT_COLOR = "#3b82f6"

# hex value -> label, as offered by the event dialog
EVENT_COLORS = {
    "#3b82f6": "Blue",
    "#ef4444": "Red",
    "#10b981": "Green",
    "#f59e0b": "Orange",
    "#8b5cf6": "Purple",
    "#ec4899": "Pink",
}

DEFAULT_REMINDER_MINUTES = 10

TITLE_MAX_LENGTH = 255
LOCATION_MAX_LENGTH = 500


class Event(Base):
    __tablename__ = "events"

    # Autoincrement id doubles as the creation-order tie-break.
    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    # Instants are stored as naive UTC.
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False, index=True)
    location = Column(String(LOCATION_MAX_LENGTH), nullable=True)
    color = Column(String(7), nullable=False, default=DEFAULT_COLOR)
    reminder_minutes = Column(Integer, nullable=False, default=DEFAULT_REMINDER_MINUTES)
    recurrence_pattern = Column(
        SAEnum(RecurrencePattern, native_enum=False),
        nullable=False,
        default=RecurrencePattern.none,
    )
    recurrence_end_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
