from datetime import datetime

from app.core.db import get_session
from app.services.date_window import utc_now

__all__ = ["get_now", "get_session"]


def get_now() -> datetime:
    """Current instant; overridden in tests to pin "today"."""
    return utc_now()
