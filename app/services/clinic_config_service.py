import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import ClinicConfigMissing
from app.models.clinic_config import CLINIC_CONFIG_ID, ClinicConfig
from app.services.slot_service import TimeWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClinicConfigData:
    """Clinic settings for one request; loaded once and passed to every operation."""

    slot_minutes: int
    timezone: str
    work_hours: TimeWindow
    breaks: tuple[TimeWindow, ...] = field(default_factory=tuple)
    max_days_ahead: int = 0


def _to_data(row: ClinicConfig) -> ClinicConfigData:
    return ClinicConfigData(
        slot_minutes=row.slot_minutes,
        timezone=row.timezone,
        work_hours=TimeWindow(row.work_start, row.work_end),
        breaks=tuple(TimeWindow(b["start"], b["end"]) for b in (row.breaks or [])),
        max_days_ahead=row.max_days_ahead,
    )


async def get_clinic_config(session: AsyncSession) -> ClinicConfigData:
    result = await session.execute(select(ClinicConfig).where(ClinicConfig.id == CLINIC_CONFIG_ID))
    row = result.scalar_one_or_none()
    if row is None:
        raise ClinicConfigMissing()
    return _to_data(row)


async def save_clinic_config(session: AsyncSession, data: ClinicConfigData) -> ClinicConfig:
    """Create or replace the singleton clinic configuration row."""
    row = await session.get(ClinicConfig, CLINIC_CONFIG_ID)
    if row is None:
        row = ClinicConfig(id=CLINIC_CONFIG_ID, slot_minutes=data.slot_minutes, timezone=data.timezone,
                           work_start=data.work_hours.start, work_end=data.work_hours.end)
    row.slot_minutes = data.slot_minutes
    row.timezone = data.timezone
    row.work_start = data.work_hours.start
    row.work_end = data.work_hours.end
    row.breaks = [{"start": b.start, "end": b.end} for b in data.breaks]
    row.max_days_ahead = data.max_days_ahead
    session.add(row)
    await session.flush()
    return row


def config_from_settings(settings: Settings) -> ClinicConfigData:
    return ClinicConfigData(
        slot_minutes=settings.clinic_slot_minutes,
        timezone=settings.clinic_timezone,
        work_hours=TimeWindow(settings.clinic_work_start, settings.clinic_work_end),
        breaks=tuple(TimeWindow(b["start"], b["end"]) for b in settings.clinic_breaks_list),
        max_days_ahead=settings.clinic_max_days_ahead,
    )


async def seed_clinic_config(session: AsyncSession, settings: Settings) -> bool:
    """Write the configured defaults if no clinic configuration exists yet. Returns True if seeded."""
    existing = await session.get(ClinicConfig, CLINIC_CONFIG_ID)
    if existing is not None:
        return False
    await save_clinic_config(session, config_from_settings(settings))
    logger.info("Seeded clinic configuration from settings (timezone=%s)", settings.clinic_timezone)
    return True
