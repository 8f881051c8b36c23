"""Boundary validation for booking input.

Runs before any store access; each failure maps to its own error code.
"""

import re

from app.api.schemas.appointment import BookAppointmentRequest
from app.core.errors import InvalidDate, InvalidName, InvalidPhone, InvalidReason, InvalidTime
from app.services.appointment_service import BookingDetails

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")
PHONE_PATTERN = re.compile(r"\+?[0-9\s-]{7,15}", re.ASCII)
MIN_NAME_LENGTH = 2


def validate_date_string(value: object) -> str:
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise InvalidDate()
    return value


def validate_time_string(value: object) -> str:
    if not isinstance(value, str) or not TIME_PATTERN.fullmatch(value):
        raise InvalidTime()
    return value


def validate_patient_name(value: object) -> str:
    if not isinstance(value, str) or len(value.strip()) < MIN_NAME_LENGTH:
        raise InvalidName()
    return value


def validate_phone(value: object) -> str:
    if not isinstance(value, str) or not PHONE_PATTERN.fullmatch(value):
        raise InvalidPhone()
    return value


def validate_reason(value: object) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidReason()
    return value


def validate_booking_request(body: BookAppointmentRequest) -> BookingDetails:
    return BookingDetails(
        date_iso=validate_date_string(body.date_iso),
        start_time=validate_time_string(body.start_time),
        patient_name=validate_patient_name(body.patient_name),
        phone=validate_phone(body.phone),
        reason=validate_reason(body.reason),
    )
