from app.models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus
from app.models.clinic_config import CLINIC_CONFIG_ID, ClinicConfig
from app.models.slot_lock import SlotLock

__all__ = [
    "ACTIVE_STATUSES",
    "Appointment",
    "AppointmentStatus",
    "CLINIC_CONFIG_ID",
    "ClinicConfig",
    "SlotLock",
]
