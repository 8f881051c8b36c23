from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

CLINIC_CONFIG_ID = 1


class ClinicConfig(SQLModel, table=True):
    __tablename__ = "clinic_config"
    id: int = Field(default=CLINIC_CONFIG_ID, primary_key=True)
    slot_minutes: int
    timezone: str
    work_start: str  # HH:MM
    work_end: str  # HH:MM
    breaks: list[dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    max_days_ahead: int = 0
