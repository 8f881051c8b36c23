from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def _new_id() -> str:
    return uuid4().hex


class AppointmentStatus(str, Enum):
    booked = "booked"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


# Statuses that occupy their slot
ACTIVE_STATUSES = (AppointmentStatus.booked.value, AppointmentStatus.completed.value)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_date_start_time", "date", "start_time"),)
    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    date: str = Field(index=True, max_length=10)  # YYYY-MM-DD, clinic-local
    start_time: str = Field(max_length=5)  # HH:MM
    end_time: str = Field(max_length=5)
    status: str = Field(default=AppointmentStatus.booked.value, index=True, max_length=16)
    patient_name: str
    phone: str
    reason: str = ""
    source: str = "patient"
    slot_key: str = Field(index=True, max_length=16)
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime(timezone=False))
    last_updated_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime(timezone=False))
