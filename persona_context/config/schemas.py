"""
Persona Context - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration must be defined here and validated at startup.

- Only minimal core configuration
- All config via environment variables (optionally from a .env file)
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    """Runtime environment."""

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


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class CompressionConfig(BaseModel):
    """Compression engine configuration."""

    max_input_chars: int = Field(
        default=1_000_000,
        ge=1,
        description="Maximum input size in characters; larger inputs are rejected",
    )
    default_level: str = Field(
        default="balanced",
        description="Compression level used by the tool layer when none is given",
    )

    @field_validator("default_level")
    @classmethod
    def validate_default_level(cls, v: str) -> str:
        """Ensure the default level names a known tier."""
        v = v.strip().lower()
        if v not in ("none", "balanced", "aggressive"):
            raise ValueError("default_level must be one of: none, balanced, aggressive")
        return v


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    enable_metrics: bool = Field(default=True, description="Enable in-memory metrics collection")


class PersonaContextConfig(BaseModel):
    """Root configuration for persona-context."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Log output format")

    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
