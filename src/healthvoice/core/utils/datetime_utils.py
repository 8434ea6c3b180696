"""
Date and time utility functions for HealthVoice.
"""

from datetime import datetime
from typing import Optional

TIME_SLOT_FORMAT = "%I:%M %p"


def today_iso(now: Optional[datetime] = None) -> str:
    """Today's date as YYYY-MM-DD (local time)."""
    return (now or datetime.now()).date().isoformat()


def current_time_slot(now: Optional[datetime] = None) -> str:
    """Local wall-clock time as a queue slot, e.g. ``09:05 AM``."""
    return (now or datetime.now()).strftime(TIME_SLOT_FORMAT)
