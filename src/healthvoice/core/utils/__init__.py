"""
Utility functions for HealthVoice.
"""

from .crypto_utils import hash_password, verify_password
from .datetime_utils import current_time_slot, today_iso

__all__ = [
    # Datetime utilities
    "today_iso",
    "current_time_slot",
    # Crypto utilities
    "hash_password",
    "verify_password",
]
