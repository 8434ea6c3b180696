"""
In-process event bus for appointment notifications.

Stores publish after every committed mutation; the doctor view
subscribes to keep its cached queue fresh between polls.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Union

from ..domain.events import AppointmentEvent

logger = logging.getLogger("healthvoice.events")

EventHandler = Callable[[AppointmentEvent], Union[None, Awaitable[None]]]


class AppointmentEventBus:
    """Fan-out of appointment events to subscribed handlers."""

    def __init__(self) -> None:
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler``; returns a callable that unsubscribes it."""
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    async def publish(self, event: AppointmentEvent) -> None:
        """Deliver ``event`` to every handler in subscription order.

        The mutation is already committed, so a failing handler is logged
        and the remaining handlers still run.
        """
        for handler in list(self._handlers):
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(
                    "Event handler failed for %s on %s",
                    type(event).__name__,
                    event.appointment.id,
                )
