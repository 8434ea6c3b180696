"""FastAPI dependency providers.

Everything hangs off the container and registries stored on
``app.state`` by the application factory.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..application.controllers.registry import DoctorRegistry, SessionRegistry
from ..application.ports.repositories.account_repo import AccountRepository
from ..application.ports.repositories.appointment_repo import AppointmentRepository
from ..core.config import Settings
from ..core.container import Container, ServiceNames


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings_dep(container: Annotated[Container, Depends(get_container)]) -> Settings:
    return container.settings


def get_account_repository(
    container: Annotated[Container, Depends(get_container)],
) -> AccountRepository:
    return container.get(ServiceNames.ACCOUNT_REPOSITORY)


def get_appointment_repository(
    container: Annotated[Container, Depends(get_container)],
) -> AppointmentRepository:
    return container.get(ServiceNames.APPOINTMENT_REPOSITORY)


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_doctor_registry(request: Request) -> DoctorRegistry:
    return request.app.state.doctors


ContainerDep = Annotated[Container, Depends(get_container)]
SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
AccountRepositoryDep = Annotated[AccountRepository, Depends(get_account_repository)]
AppointmentRepositoryDep = Annotated[AppointmentRepository, Depends(get_appointment_repository)]
SessionRegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
DoctorRegistryDep = Annotated[DoctorRegistry, Depends(get_doctor_registry)]
