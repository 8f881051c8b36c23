from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SlotInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    available: bool


class AvailableSlotsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_iso: str = Field(alias="dateISO")  # YYYY-MM-DD
    slot_minutes: int = Field(alias="slotMinutes")
    slots: list[SlotInfo]


class BookAppointmentRequest(BaseModel):
    """Raw booking payload; field formats are checked by app.api.validators."""

    model_config = ConfigDict(populate_by_name=True)

    date_iso: Any = Field(default=None, alias="dateISO")
    start_time: Any = Field(default=None, alias="startTime")
    patient_name: Any = Field(default=None, alias="patientName")
    phone: Any = None
    reason: Any = None


class BookAppointmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    appointment_id: str = Field(alias="appointmentId")
    slot_key: str = Field(alias="slotKey")


class UpdateStatusRequest(BaseModel):
    status: str


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    status: str
    patient_name: str = Field(alias="patientName")
    phone: str
    reason: str
    source: str
    slot_key: str = Field(alias="slotKey")
    created_at: datetime = Field(alias="createdAt")
    last_updated_at: datetime = Field(alias="lastUpdatedAt")
