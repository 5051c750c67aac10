"""
Persona Context — Persona-Aware Context Compression

Deterministic compression of agent context that never drops the vocabulary
of the active role, plus a lightweight evaluator that scores responses
against that role.

The MCP server lives in persona_context.server and is imported on demand.
"""

__version__ = "1.0.0"

# compression must load before validation (validation.preservation reads compression models)
from .compression import CompressionEngine, CompressionLevel, CompressionResult, compress
from .errors import (
    InputTooLargeError,
    InternalInconsistencyError,
    InvalidCompressionLevelError,
    InvalidPersonaError,
    PersonaContextError,
)
from .evaluation import EvaluationResult, QualityEvaluator, evaluate
from .personas import PersonaId, PersonaProfile, PersonaRegistry, get_persona_registry

__all__ = [
    "__version__",
    # Compression
    "CompressionEngine",
    "CompressionLevel",
    "CompressionResult",
    "compress",
    # Evaluation
    "EvaluationResult",
    "QualityEvaluator",
    "evaluate",
    # Personas
    "PersonaId",
    "PersonaProfile",
    "PersonaRegistry",
    "get_persona_registry",
    # Errors
    "PersonaContextError",
    "InvalidPersonaError",
    "InvalidCompressionLevelError",
    "InputTooLargeError",
    "InternalInconsistencyError",
]
