import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AppointmentNotFound, InvalidSlot, InvalidStatus, SlotTaken
from app.models.appointment import Appointment, AppointmentStatus, _utc_naive_now
from app.models.slot_lock import SlotLock
from app.services.clinic_config_service import ClinicConfigData
from app.services.date_window import parse_date_iso, validate_booking_date
from app.services.slot_service import create_slot_key, find_slot, generate_slots

logger = logging.getLogger(__name__)

# SQLSTATEs for serialization failure and deadlock: the transaction lost a race and may be rerun
_CONFLICT_SQLSTATES = {"40001", "40P01"}
_RETRY_BACKOFF_SECONDS = 0.01


@dataclass(frozen=True)
class BookingDetails:
    date_iso: str
    start_time: str
    patient_name: str
    phone: str
    reason: str | None = None


@dataclass(frozen=True)
class ReservationResult:
    appointment_id: str
    slot_key: str


def _is_write_conflict(exc: DBAPIError) -> bool:
    if isinstance(exc, IntegrityError):
        return True
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return True
    # SQLite reports a competing writer as a locked database
    return "database is locked" in str(orig)


async def reserve_slot(
    session: AsyncSession,
    config: ClinicConfigData,
    booking: BookingDetails,
    now: datetime | None = None,
    max_attempts: int | None = None,
) -> ReservationResult:
    """Claim one slot and create its appointment, or fail with SlotTaken.

    The slot is re-derived from the clinic configuration; the caller only names its
    start time. The marker read, marker insert and appointment insert run in one
    transaction. If a concurrent booking commits the same marker first, our insert
    is rejected; we roll back and re-read, which then reports the slot as taken.
    """
    date_iso = validate_booking_date(booking.date_iso, config.timezone, config.max_days_ahead, now)
    slots = generate_slots(date_iso, config.work_hours, config.breaks, config.slot_minutes)
    slot = find_slot(slots, booking.start_time)
    if slot is None:
        raise InvalidSlot()
    slot_key = create_slot_key(date_iso, slot.start_time)
    max_attempts = max(1, max_attempts or settings.reservation_max_attempts)

    attempt = 0
    while True:
        attempt += 1
        try:
            result = await session.execute(select(SlotLock).where(SlotLock.slot_key == slot_key))
            if result.scalar_one_or_none() is not None:
                await session.rollback()
                logger.info("Slot %s already claimed", slot_key)
                raise SlotTaken()
            created = _utc_naive_now()
            appointment = Appointment(
                date=date_iso,
                start_time=slot.start_time,
                end_time=slot.end_time,
                status=AppointmentStatus.booked.value,
                patient_name=booking.patient_name.strip(),
                phone=booking.phone.strip(),
                reason=(booking.reason or "").strip(),
                source="patient",
                slot_key=slot_key,
                created_at=created,
                last_updated_at=created,
            )
            appointment_id = appointment.id
            session.add(SlotLock(slot_key=slot_key, created_at=created))
            session.add(appointment)
            await session.commit()
        except DBAPIError as e:
            await session.rollback()
            if not _is_write_conflict(e):
                raise
            if attempt == max_attempts:
                if isinstance(e, IntegrityError):
                    # The marker key already exists: another booking committed it
                    logger.info("Slot %s claimed by a concurrent booking", slot_key)
                    raise SlotTaken() from e
                raise
            logger.warning("Reservation of %s conflicted (attempt %d/%d), retrying", slot_key, attempt, max_attempts)
            await asyncio.sleep(_RETRY_BACKOFF_SECONDS * attempt)
            continue
        logger.info("Booked slot %s as appointment %s", slot_key, appointment_id)
        return ReservationResult(appointment_id=appointment_id, slot_key=slot_key)


async def list_appointments_for_date(
    session: AsyncSession, date_iso: str, status: str | None = None
) -> list[Appointment]:
    date_iso = parse_date_iso(date_iso)
    q = select(Appointment).where(Appointment.date == date_iso).order_by(Appointment.start_time)
    if status is not None:
        q = q.where(Appointment.status == _parse_status(status))
    result = await session.execute(q)
    return list(result.scalars().all())


def _parse_status(value: str) -> str:
    try:
        return AppointmentStatus(value).value
    except ValueError:
        raise InvalidStatus() from None


async def update_appointment_status(session: AsyncSession, appointment_id: str, status: str) -> Appointment:
    """Set an appointment's status. Any status may follow any other.

    The slot's reservation marker is left in place, so a cancelled or no-show
    appointment keeps its slot unavailable.
    """
    new_status = _parse_status(status)
    appointment = await session.get(Appointment, appointment_id)
    if appointment is None:
        raise AppointmentNotFound()
    appointment.status = new_status
    appointment.last_updated_at = _utc_naive_now()
    session.add(appointment)
    await session.flush()
    logger.info("Appointment %s status -> %s", appointment_id, new_status)
    return appointment
