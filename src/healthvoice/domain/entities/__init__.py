"""
Domain entities package.
"""

from .appointment import Appointment
from .message import Message, MessageMetadata
from .session import Session
from .user import User

__all__ = [
    "Appointment",
    "Message",
    "MessageMetadata",
    "Session",
    "User",
]
