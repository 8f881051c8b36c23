from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_now, get_session
from app.api.schemas.appointment import AvailableSlotsResponse, SlotInfo
from app.api.validators import validate_date_string
from app.services.availability_service import get_availability
from app.services.clinic_config_service import get_clinic_config

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/available", response_model=AvailableSlotsResponse)
async def available_slots(
    date_param: str | None = Query(None, alias="date"),
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AvailableSlotsResponse:
    """Return all slots for the given clinic-local date, each flagged available or not."""
    date_iso = validate_date_string(date_param)
    clinic = await get_clinic_config(session)
    day = await get_availability(session, clinic, date_iso, now=now)
    return AvailableSlotsResponse(
        date_iso=day.date_iso,
        slot_minutes=day.slot_minutes,
        slots=[
            SlotInfo(key=s.key, start_time=s.start_time, end_time=s.end_time, available=s.available)
            for s in day.slots
        ],
    )
