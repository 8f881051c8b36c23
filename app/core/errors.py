"""Error taxonomy for scheduling operations.

Every error carries a stable ``code`` that the HTTP layer returns verbatim in
``{"error": {"code": ..., "message": ...}}`` and the status code to use.
"""


class SchedulingError(Exception):
    code = "SERVER_ERROR"
    status_code = 500
    default_message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# Input errors: rejected before any store access


class InvalidDate(SchedulingError):
    code = "INVALID_DATE"
    status_code = 400
    default_message = "Provide a valid dateISO."


class InvalidTime(SchedulingError):
    code = "INVALID_TIME"
    status_code = 400
    default_message = "Provide a valid startTime."


class InvalidName(SchedulingError):
    code = "INVALID_NAME"
    status_code = 400
    default_message = "Provide a valid patient name."


class InvalidPhone(SchedulingError):
    code = "INVALID_PHONE"
    status_code = 400
    default_message = "Provide a valid phone number."


class InvalidReason(SchedulingError):
    code = "INVALID_REASON"
    status_code = 400
    default_message = "Reason must be a string."


class InvalidStatus(SchedulingError):
    code = "INVALID_STATUS"
    status_code = 400
    default_message = "Unknown appointment status."


# Policy errors: rejected after recomputing the authoritative slot set


class DateOutOfRange(SchedulingError):
    code = "DATE_OUT_OF_RANGE"
    status_code = 400
    default_message = "Date is out of range."


class InvalidSlot(SchedulingError):
    code = "INVALID_SLOT"
    status_code = 400
    default_message = "Start time is not available."


# Contention: an expected outcome, the caller should refresh availability


class SlotTaken(SchedulingError):
    code = "SLOT_TAKEN"
    status_code = 409
    default_message = "Slot is no longer available."


class AppointmentNotFound(SchedulingError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Appointment not found."


# Operator misconfiguration, reported to callers as a generic server error


class ClinicConfigMissing(SchedulingError):
    code = "SERVER_ERROR"
    status_code = 500
    default_message = "Clinic configuration not found."
