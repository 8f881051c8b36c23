from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_now, get_session
from app.api.schemas.appointment import (
    AppointmentPublic,
    BookAppointmentRequest,
    BookAppointmentResponse,
    UpdateStatusRequest,
)
from app.api.validators import validate_booking_request, validate_date_string
from app.services.appointment_service import (
    list_appointments_for_date,
    reserve_slot,
    update_appointment_status,
)
from app.services.clinic_config_service import get_clinic_config

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("", response_model=BookAppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> BookAppointmentResponse:
    # Input is checked before the clinic config (or anything else) is read
    booking = validate_booking_request(body)
    clinic = await get_clinic_config(session)
    result = await reserve_slot(session, clinic, booking, now=now)
    return BookAppointmentResponse(appointment_id=result.appointment_id, slot_key=result.slot_key)


@router.get("", response_model=list[AppointmentPublic])
async def list_day_schedule(
    date_param: str | None = Query(None, alias="date"),
    status_param: str | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session),
) -> list[AppointmentPublic]:
    """Appointments on one date, ordered by start time."""
    date_iso = validate_date_string(date_param)
    appointments = await list_appointments_for_date(session, date_iso, status=status_param)
    return [AppointmentPublic.model_validate(a) for a in appointments]


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
async def set_appointment_status(
    appointment_id: str,
    body: UpdateStatusRequest,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    appointment = await update_appointment_status(session, appointment_id, body.status)
    return AppointmentPublic.model_validate(appointment)
