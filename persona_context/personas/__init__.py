"""
Persona Module

Closed catalog of role profiles (architect, security, frontend, backend,
data_analyst) shared by compression and evaluation.
"""

from .registry import (
    BUILTIN_PROFILES,
    PersonaId,
    PersonaProfile,
    PersonaRegistry,
    get_persona_registry,
)

__all__ = [
    "BUILTIN_PROFILES",
    "PersonaId",
    "PersonaProfile",
    "PersonaRegistry",
    "get_persona_registry",
]
