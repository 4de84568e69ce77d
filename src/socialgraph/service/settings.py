"""Centralized configuration using pydantic-settings.

All configuration is loaded from environment variables and .env files.
For nested settings, use double underscore: GRAPHQL__MAX_QUERY_DEPTH=5
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from socialgraph.service import get_version


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Main application settings.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # ============================================================
    # Core Application Settings
    # ============================================================

    app_name: str = Field("socialgraph", description="Application name")
    app_version: str = Field(default_factory=get_version, description="Application version")
    environment: Environment = Field(Environment.DEVELOPMENT, description="Deployment environment")
    debug: bool = Field(False, description="Debug mode")
    testing: bool = Field(False, description="Testing mode")

    host: str = Field("127.0.0.1", description="Server host")
    port: int = Field(8000, description="Server port")
    reload: bool = Field(False, description="Auto-reload on changes")

    # ============================================================
    # Database Configuration
    # ============================================================

    class DatabaseSettings(BaseModel):
        """Database configuration."""

        url: str | None = Field(None, description="Full async database URL")
        sqlite_path: str = Field(
            "./socialgraph.sqlite", description="SQLite file used when no URL is configured"
        )

        # Connection pool (ignored by SQLite)
        pool_size: int = Field(10, description="Connection pool size")
        max_overflow: int = Field(20, description="Max overflow connections")
        pool_pre_ping: bool = Field(True, description="Test connections before use")

        echo: bool = Field(False, description="Echo SQL statements")

        @property
        def sqlalchemy_url(self) -> str:
            """Build the async SQLAlchemy database URL."""
            if self.url:
                if self.url.startswith("postgresql://"):
                    return self.url.replace("postgresql://", "postgresql+asyncpg://", 1)
                if self.url.startswith("sqlite://"):
                    return self.url.replace("sqlite://", "sqlite+aiosqlite://", 1)
                return self.url
            return f"sqlite+aiosqlite:///{self.sqlite_path}"

    database: DatabaseSettings = DatabaseSettings()  # type: ignore[call-arg]

    # ============================================================
    # GraphQL Configuration
    # ============================================================

    class GraphQLSettings(BaseModel):
        """GraphQL endpoint configuration."""

        path: str = Field("/graphql", description="Mount path of the GraphQL endpoint")
        graphiql: bool = Field(True, description="Serve the GraphiQL IDE on GET requests")
        max_query_depth: int = Field(
            5, ge=1, description="Maximum nesting depth of selection sets in one operation"
        )

    graphql: GraphQLSettings = GraphQLSettings()  # type: ignore[call-arg]

    # ============================================================
    # Observability Configuration
    # ============================================================

    class ObservabilitySettings(BaseModel):
        """Logging configuration."""

        log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
        log_format: str = Field("console", description="Log format (json or console)")

    observability: ObservabilitySettings = ObservabilitySettings()  # type: ignore[call-arg]

    # ============================================================
    # Validation & Helpers
    # ============================================================

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: Any) -> Any:
        """Accept environment names in any case."""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.testing or self.environment == Environment.TEST


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()  # type: ignore
    return _settings


def reset_settings() -> None:
    """Reset settings (mainly for testing)."""
    global _settings
    _settings = None


# Convenience export
settings = get_settings()
