import re
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

_CLOCK_TIME = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./clinic.db"
    database_ssl: bool = False

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Store limits: max keys per IN (...) query
    availability_batch_size: int = 30
    # Marker insert conflicts are retried this many times before giving up
    reservation_max_attempts: int = 5

    # Env
    env: str = "development"

    # Clinic defaults, written to clinic_config on startup only when no row exists
    clinic_seed_on_startup: bool = False
    clinic_slot_minutes: int = 15
    clinic_timezone: str = "UTC"
    clinic_work_start: str = "09:00"
    clinic_work_end: str = "17:00"
    # Comma-separated HH:MM-HH:MM windows, e.g. "12:00-13:00,15:00-15:15"
    clinic_breaks: str = ""
    clinic_max_days_ahead: int = 30

    @field_validator("clinic_work_start", "clinic_work_end")
    @classmethod
    def validate_clock_time(cls, v: str) -> str:
        if not _CLOCK_TIME.fullmatch(v):
            raise ValueError("Clinic hours must be HH:MM")
        return v

    @field_validator("clinic_breaks")
    @classmethod
    def validate_breaks(cls, v: str) -> str:
        for part in v.split(","):
            part = part.strip()
            if not part:
                continue
            start, sep, end = part.partition("-")
            start, end = start.strip(), end.strip()
            if not sep or not _CLOCK_TIME.fullmatch(start) or not _CLOCK_TIME.fullmatch(end) or start >= end:
                raise ValueError(f"Invalid break window {part!r}, expected HH:MM-HH:MM")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def clinic_breaks_list(self) -> list[dict[str, str]]:
        windows: list[dict[str, str]] = []
        for part in self.clinic_breaks.split(","):
            part = part.strip()
            if not part:
                continue
            start, _, end = part.partition("-")
            windows.append({"start": start.strip(), "end": end.strip()})
        return windows


settings = Settings()
