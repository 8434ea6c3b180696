"""
Configuration management for HealthVoice.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import Optional

import os
from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Appointment store configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    backend: str = Field(default="memory", description="Store backend (memory or mongo)")
    uri: str = Field(default="", description="MongoDB connection URI")
    db_name: str = Field(default="healthvoice", description="MongoDB database name")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate store backend."""
        valid_backends = ["memory", "mongo"]
        if v.lower() not in valid_backends:
            raise ValueError(f"Store backend must be one of: {valid_backends}")
        return v.lower()

    @field_validator("uri")
    @classmethod
    def validate_mongo_uri(cls, v: str, info: ValidationInfo) -> str:
        """Validate MongoDB URI format when the mongo backend is selected."""
        if info.data.get("backend") != "mongo":
            return v
        if not v:
            raise ValueError("MongoDB URI is required. Please set MONGO_URI environment variable.")
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class AzureOpenAISettings(BaseSettings):
    """Azure OpenAI configuration settings for the inference service."""

    model_config = SettingsConfigDict(env_prefix="AZURE_OPENAI_")

    endpoint: str = Field(default="", description="Azure OpenAI endpoint URL")
    api_key: str = Field(default="", description="Azure OpenAI API key")
    api_version: str = Field(default="2024-12-01-preview", description="Azure OpenAI API version")
    deployment_name: str = Field(default="gpt-4o-mini", description="Azure OpenAI chat deployment name")
    whisper_deployment_name: str = Field(default="whisper", description="Azure OpenAI Whisper deployment name")
    temperature: float = Field(default=0.1, description="Low temperature keeps extraction deterministic")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate Azure OpenAI endpoint format."""
        if v and not (v.startswith("https://") and ".openai.azure.com" in v):
            raise ValueError("Invalid Azure OpenAI endpoint format. Must be: https://xxx.openai.azure.com/")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate temperature."""
        if not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.api_key)


class SecuritySettings(BaseSettings):
    """Security configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    bcrypt_rounds: int = Field(default=12, description="bcrypt cost factor for password hashes")

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_rounds(cls, v: int) -> int:
        if not 4 <= v <= 16:
            raise ValueError("bcrypt_rounds must be between 4 and 16")
        return v


class QueueSettings(BaseSettings):
    """Doctor queue configuration settings."""

    model_config = SettingsConfigDict(env_prefix="QUEUE_")

    poll_interval_seconds: float = Field(
        default=5.0, description="Fallback interval for re-reading the appointment store"
    )
    default_doctor_id: str = Field(default="d1", description="Doctor assigned to every new appointment")
    filter_by_doctor: bool = Field(
        default=False,
        description="Filter the doctor's list by doctor_id (off keeps single-doctor behavior)",
    )

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        return v


class BookingSettings(BaseSettings):
    """Booking configuration settings."""

    model_config = SettingsConfigDict(env_prefix="BOOKING_")

    idempotent: bool = Field(
        default=True, description="Return the existing appointment when a session books twice"
    )


class SessionSettings(BaseSettings):
    """Triage session configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SESSION_")

    default_language: str = Field(default="en", description="Language for new sessions")
    seed_demo_data: bool = Field(default=True, description="Seed demo accounts and appointments")
    idle_timeout_seconds: float = Field(
        default=1800.0, description="Open sessions untouched this long are evicted"
    )

    @field_validator("default_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        if v.lower() not in ["en", "hi", "ta"]:
            raise ValueError("default_language must be one of: en, hi, ta")
        return v.lower()

    @field_validator("idle_timeout_seconds")
    @classmethod
    def validate_idle_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("idle_timeout_seconds must be positive")
        return v


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="HealthVoice", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    azure_openai: AzureOpenAISettings = Field(default_factory=AzureOpenAISettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    booking: BookingSettings = Field(default_factory=BookingSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    Already-set environment variables always win.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        try:
            _settings = Settings()
        except ValueError as e:
            from .exceptions import ConfigurationError

            raise ConfigurationError(f"Invalid configuration: {e}") from e
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
