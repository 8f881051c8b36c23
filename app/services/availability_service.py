from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.appointment import ACTIVE_STATUSES, Appointment
from app.models.slot_lock import SlotLock
from app.services.batching import gather_in_chunks
from app.services.clinic_config_service import ClinicConfigData
from app.services.date_window import validate_booking_date
from app.services.slot_service import Slot, generate_slots


@dataclass(frozen=True)
class AvailableSlot:
    key: str
    start_time: str
    end_time: str
    available: bool


@dataclass(frozen=True)
class DayAvailability:
    date_iso: str
    slot_minutes: int
    slots: list[AvailableSlot]


async def get_locked_slot_keys(session: AsyncSession, keys: list[str]) -> list[str]:
    result = await session.execute(select(SlotLock.slot_key).where(SlotLock.slot_key.in_(keys)))
    return [row[0] for row in result.all()]


async def get_booked_slot_keys(session: AsyncSession, keys: list[str]) -> list[str]:
    result = await session.execute(
        select(Appointment.slot_key).where(
            Appointment.slot_key.in_(keys),
            Appointment.status.in_(ACTIVE_STATUSES),
        )
    )
    return [row[0] for row in result.all()]


async def resolve_availability(
    session: AsyncSession, slots: Sequence[Slot], batch_size: int | None = None
) -> list[AvailableSlot]:
    """Mark each slot available unless it has a reservation marker or an active appointment.

    Read-only and not transactionally consistent across the two lookups; the
    reservation path re-checks under its own transaction.
    """
    if not slots:
        return []
    batch_size = batch_size or settings.availability_batch_size
    keys = [s.key for s in slots]
    locked = await gather_in_chunks(keys, batch_size, lambda group: get_locked_slot_keys(session, group))
    booked = await gather_in_chunks(keys, batch_size, lambda group: get_booked_slot_keys(session, group))
    return [
        AvailableSlot(
            key=s.key,
            start_time=s.start_time,
            end_time=s.end_time,
            available=s.key not in locked and s.key not in booked,
        )
        for s in slots
    ]


async def get_availability(
    session: AsyncSession,
    config: ClinicConfigData,
    date_iso: str,
    now: datetime | None = None,
    batch_size: int | None = None,
) -> DayAvailability:
    date_iso = validate_booking_date(date_iso, config.timezone, config.max_days_ahead, now)
    slots = generate_slots(date_iso, config.work_hours, config.breaks, config.slot_minutes)
    annotated = await resolve_availability(session, slots, batch_size)
    return DayAvailability(date_iso=date_iso, slot_minutes=config.slot_minutes, slots=annotated)
