"""Pure helpers shared by the controllers and stores."""

from .booking_derivation import BookingRequest, derive_booking
from .queue_ordering import QueueView, order_doctor_appointments, partition_queue

__all__ = [
    "BookingRequest",
    "derive_booking",
    "QueueView",
    "order_doctor_appointments",
    "partition_queue",
]
