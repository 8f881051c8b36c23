from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.models.appointment import _utc_naive_now


class SlotLock(SQLModel, table=True):
    """Reservation marker: a row exists iff the slot has been claimed.

    Inserted together with its appointment and never updated or deleted, so
    cancelling an appointment does not free the slot.
    """

    __tablename__ = "slot_locks"
    slot_key: str = Field(primary_key=True, max_length=16)  # "<YYYY-MM-DD>_<HH:MM>"
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime(timezone=False))
