"""
Dependency injection container for HealthVoice.

One container is built per application instance and handed to whatever
needs it (the FastAPI app keeps it on ``app.state``). Nothing here is a
module-level global.
"""

import logging
from typing import Any, Callable, Dict, Optional

from .config import Settings
from .event_bus import AppointmentEventBus
from .exceptions import ConfigurationError

logger = logging.getLogger("healthvoice.container")


class ServiceNames:
    """Service names used throughout the application."""

    SETTINGS = "settings"
    EVENT_BUS = "event_bus"
    APPOINTMENT_REPOSITORY = "appointment_repository"
    ACCOUNT_REPOSITORY = "account_repository"
    INFERENCE_SERVICE = "inference_service"
    SPEECH_SERVICE = "speech_service"
    AI_CLIENT = "ai_client"


class Container:
    """Lightweight dependency injection container."""

    def __init__(self, settings: Settings) -> None:
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._singletons: Dict[str, Any] = {}
        self.settings = settings
        self.register_singleton(ServiceNames.SETTINGS, settings)

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory; its first result is cached as a singleton."""
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        """Get a service by name."""
        if name in self._singletons:
            return self._singletons[name]

        if name in self._factories:
            instance = self._factories[name]()
            self._singletons[name] = instance
            return instance

        raise ConfigurationError(f"Service '{name}' not found")

    def get_or_none(self, name: str) -> Optional[Any]:
        """Get a service by name, return None if not found."""
        try:
            return self.get(name)
        except ConfigurationError:
            return None

    def has(self, name: str) -> bool:
        """Check if a service is registered."""
        return name in self._factories or name in self._singletons

    def clear(self) -> None:
        self._factories.clear()
        self._singletons.clear()


def _build_inference_service(container: Container):
    from ..adapters.external.inference_service_azure_openai import (
        AzureOpenAIInferenceService,
        UnavailableInferenceService,
    )

    if not container.settings.azure_openai.is_configured:
        logger.warning("Azure OpenAI not configured; patient turns will fail")
        return UnavailableInferenceService()
    return AzureOpenAIInferenceService(container.get(ServiceNames.AI_CLIENT))


def build_container(settings: Settings) -> Container:
    """Wire the stores, services and event bus for ``settings``.

    The inference service is created lazily so the app can start (and be
    tested) without Azure OpenAI credentials.
    """
    from ..adapters.external.speech_output_logging import LoggingSpeechOutputService
    from .ai_client import AzureAIClient

    container = Container(settings)
    event_bus = AppointmentEventBus()
    container.register_singleton(ServiceNames.EVENT_BUS, event_bus)

    if settings.database.backend == "mongo":
        from ..adapters.db.mongo.repositories import (
            MongoAccountRepository,
            MongoAppointmentRepository,
        )

        appointments = MongoAppointmentRepository(
            event_bus=event_bus,
            default_doctor_id=settings.queue.default_doctor_id,
            filter_by_doctor=settings.queue.filter_by_doctor,
        )
        accounts = MongoAccountRepository()
    else:
        from ..adapters.db.memory import InMemoryAccountRepository, InMemoryAppointmentRepository

        appointments = InMemoryAppointmentRepository(
            event_bus=event_bus,
            default_doctor_id=settings.queue.default_doctor_id,
            filter_by_doctor=settings.queue.filter_by_doctor,
        )
        accounts = InMemoryAccountRepository()

    container.register_singleton(ServiceNames.APPOINTMENT_REPOSITORY, appointments)
    container.register_singleton(ServiceNames.ACCOUNT_REPOSITORY, accounts)
    container.register_singleton(ServiceNames.SPEECH_SERVICE, LoggingSpeechOutputService())
    container.register_factory(
        ServiceNames.AI_CLIENT, lambda: AzureAIClient(settings.azure_openai)
    )
    container.register_factory(
        ServiceNames.INFERENCE_SERVICE, lambda: _build_inference_service(container)
    )
    logger.info("Container built with %s store", settings.database.backend)
    return container
