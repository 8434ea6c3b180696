"""
Configuration tests.

Covers .env discovery (already-set environment variables take
precedence), validation errors and container wiring per backend.
"""

import os

import pytest
from pydantic import ValidationError

from healthvoice.adapters.db.memory import InMemoryAppointmentRepository
from healthvoice.adapters.external.inference_service_azure_openai import (
    UnavailableInferenceService,
)
from healthvoice.core.config import (
    DatabaseSettings,
    LoggingSettings,
    QueueSettings,
    Settings,
    _load_env_file_if_available,
    get_settings,
    reset_settings,
)
from healthvoice.core.container import Container, ServiceNames, build_container
from healthvoice.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_env_file_found_in_parent_directory(monkeypatch, tmp_path):
    monkeypatch.delenv("QUEUE_DEFAULT_DOCTOR_ID", raising=False)
    (tmp_path / ".env").write_text("QUEUE_DEFAULT_DOCTOR_ID=d42\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    _load_env_file_if_available()

    try:
        assert os.getenv("QUEUE_DEFAULT_DOCTOR_ID") == "d42"
        assert get_settings().queue.default_doctor_id == "d42"
    finally:
        os.environ.pop("QUEUE_DEFAULT_DOCTOR_ID", None)


def test_already_set_env_vars_take_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv("QUEUE_DEFAULT_DOCTOR_ID", "already-set")
    (tmp_path / ".env").write_text("QUEUE_DEFAULT_DOCTOR_ID=from-file\n")
    monkeypatch.chdir(tmp_path)

    _load_env_file_if_available()

    assert os.getenv("QUEUE_DEFAULT_DOCTOR_ID") == "already-set"


def test_no_env_files_no_crash(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    _load_env_file_if_available()


def test_defaults():
    settings = Settings(app_env="testing")
    assert settings.is_testing
    assert settings.database.backend in ("memory", "mongo")
    assert QueueSettings().poll_interval_seconds > 0


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        LoggingSettings(level="LOUD")
    with pytest.raises(ValidationError):
        QueueSettings(poll_interval_seconds=0)
    with pytest.raises(ValidationError):
        DatabaseSettings(backend="sqlite")


def test_mongo_backend_requires_a_valid_uri():
    with pytest.raises(ValidationError):
        DatabaseSettings(backend="mongo", uri="")
    with pytest.raises(ValidationError):
        DatabaseSettings(backend="mongo", uri="postgres://localhost")
    assert DatabaseSettings(backend="mongo", uri="mongodb://localhost:27017").uri


def test_get_settings_wraps_errors(monkeypatch):
    monkeypatch.setenv("APP_ENV", "moon")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    first = get_settings()
    monkeypatch.setenv("APP_ENV", "production")
    assert get_settings() is first
    reset_settings()
    assert get_settings().app_env == "production"


def test_memory_container_without_azure(monkeypatch):
    monkeypatch.delenv("AZURE_OPENAI_ENDPOINT", raising=False)
    monkeypatch.delenv("AZURE_OPENAI_API_KEY", raising=False)
    settings = Settings(app_env="testing", database=DatabaseSettings(backend="memory"))

    container = build_container(settings)

    assert isinstance(
        container.get(ServiceNames.APPOINTMENT_REPOSITORY), InMemoryAppointmentRepository
    )
    assert isinstance(container.get(ServiceNames.INFERENCE_SERVICE), UnavailableInferenceService)
    assert container.get(ServiceNames.SETTINGS) is settings


def test_container_lookup():
    container = Container(Settings(app_env="testing"))
    calls = []
    container.register_factory("thing", lambda: calls.append(1) or object())

    assert container.get("thing") is container.get("thing")
    assert calls == [1]
    assert container.get_or_none("missing") is None
    with pytest.raises(ConfigurationError):
        container.get("missing")
