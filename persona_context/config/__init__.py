"""
Persona Context - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    CompressionConfig,
    Environment,
    LogFormat,
    LogLevel,
    ObservabilityConfig,
    PersonaContextConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "PersonaContextConfig",
    # Enums
    "Environment",
    "LogLevel",
    "LogFormat",
    # Config sections
    "CompressionConfig",
    "ObservabilityConfig",
]
