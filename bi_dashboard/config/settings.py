"""
BI Dashboard API
Centralized Configuration Management

Pydantic settings loaded from environment variables (and an optional .env
file), validated and cached for the lifetime of the process.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DatabaseSettings(BaseSettings):
    """PostgreSQL Warehouse Configuration"""

    model_config = SettingsConfigDict(
        env_prefix="PG",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Warehouse host")
    port: int = Field(default=5432, description="Warehouse port")
    database: str = Field(default="bi_dashboard", description="Warehouse database name")
    user: str = Field(default="postgres", description="Warehouse user")
    password: SecretStr = Field(default="postgres", description="Warehouse password")
    pool_size: int = Field(default=10, ge=1, description="Connection pool size")
    max_overflow: int = Field(default=5, ge=0, description="Max overflow connections")
    pool_timeout: int = Field(default=30, ge=1, description="Pool checkout timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL queries")

    @property
    def async_url(self) -> URL:
        """Async database URL for asyncpg, with credentials escaped"""
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.database,
        )


class ServerSettings(BaseSettings):
    """HTTP Server Configuration"""

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Listening host")
    port: int = Field(default=5000, description="Listening port")
    workers: int = Field(default=1, ge=1, description="Worker processes")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API with credentials"
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or console")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format value"""
        allowed = ["json", "console"]
        if v.lower() not in allowed:
            raise ValueError(f"Log format must be one of: {allowed}")
        return v.lower()


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="bi-dashboard", description="Application name")
    app_env: str = Field(default="development", description="Environment")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
