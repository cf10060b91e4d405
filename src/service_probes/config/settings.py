"""
Configuration management for service probes.

Settings are read from the environment once at process start and passed
explicitly into the probe factory. Variable names follow the ones the
platform deployment manifests already use (PORT, VCAP_SERVICES,
ELASTICACHE_SERVICE_NAME, DB_SERVICENAME, RMQ_SERVICENAME).
"""

import os
import re
from enum import Enum

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from service_probes.domain.models import Backend
from service_probes.observability.logging import LogFormat, LogLevel

SQL_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class CacheProbeSettings(BaseSettings):
    """Key-value cache probe configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_PROBE_", env_file=".env", extra="ignore"
    )

    key: str = "foo"
    value: str = "bar"
    connect_timeout: float = Field(default=5.0, gt=0)


class DatabaseProbeSettings(BaseSettings):
    """Relational database probe configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DB_PROBE_", env_file=".env", extra="ignore"
    )

    table_name: str = "test_table"
    canary_name: str = Field(default="Fred", min_length=1, max_length=30)
    sslmode: str = "disable"
    connect_timeout: float = Field(default=5.0, gt=0)

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        if not SQL_IDENTIFIER.match(v):
            raise ValueError(
                "Table name must be a lowercase SQL identifier of at most 63 characters"
            )
        return v

    @field_validator("sslmode")
    @classmethod
    def validate_sslmode(cls, v: str) -> str:
        if v not in ("disable", "prefer", "require"):
            raise ValueError("sslmode must be one of: disable, prefer, require")
        return v


class QueueProbeSettings(BaseSettings):
    """Message queue probe configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RMQ_PROBE_", env_file=".env", extra="ignore"
    )

    queue_name: str = Field(default="aChannel", min_length=1)
    message: str = "a value"
    receive_timeout: float = Field(default=10.0, gt=0)
    connect_timeout: float = Field(default=5.0, gt=0)


class ProbeSettings(BaseSettings):
    """Main probe service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "service-probes"
    environment: Environment = Environment.PRODUCTION

    # Server settings
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)

    # Probe selection
    backend: Backend = Field(
        default=Backend.ELASTICACHE, validation_alias="PROBE_BACKEND"
    )
    elasticache_service_name: str = Field(
        default="", validation_alias="ELASTICACHE_SERVICE_NAME"
    )
    db_service_name: str = Field(
        default="", validation_alias=AliasChoices("DB_SERVICENAME", "DB_SERVICE_NAME")
    )
    rmq_service_name: str = Field(
        default="",
        validation_alias=AliasChoices("RMQ_SERVICENAME", "RMQ_SERVICE_NAME"),
    )
    probe_service_name: str | None = Field(
        default=None, validation_alias="PROBE_SERVICE_NAME"
    )

    # Platform service binding catalog, kept raw and parsed by the resolver
    vcap_services: str | None = Field(default=None, validation_alias="VCAP_SERVICES")

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.JSON

    # Backend settings
    cache: CacheProbeSettings = Field(default_factory=CacheProbeSettings)
    database: DatabaseProbeSettings = Field(default_factory=DatabaseProbeSettings)
    queue: QueueProbeSettings = Field(default_factory=QueueProbeSettings)

    @property
    def service_name(self) -> str:
        """Binding name the configured backend probes."""
        if self.probe_service_name:
            return self.probe_service_name
        if self.backend == Backend.ELASTICACHE:
            return self.elasticache_service_name
        if self.backend == Backend.RDS:
            return self.db_service_name
        if self.backend == Backend.RMQ:
            return self.rmq_service_name
        return ""


class DevelopmentSettings(ProbeSettings):
    """Development environment settings."""

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.DEBUG
    log_format: LogFormat = LogFormat.CONSOLE


class TestingSettings(ProbeSettings):
    """Testing environment settings."""

    environment: Environment = Environment.TESTING
    backend: Backend = Field(default=Backend.MEMORY, validation_alias="PROBE_BACKEND")
    log_level: LogLevel = LogLevel.WARNING
    log_format: LogFormat = LogFormat.CONSOLE


def get_settings() -> ProbeSettings:
    """Get settings based on the ENVIRONMENT variable."""
    environment = os.getenv("ENVIRONMENT", "production").lower()

    if environment == "development":
        return DevelopmentSettings()
    elif environment == "testing":
        return TestingSettings()
    else:
        return ProbeSettings()
