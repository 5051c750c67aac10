"""
Persona Context - Validation Module

Two concerns live here:
- preservation: how many persona keywords survived compression
- decorators/tool_schemas: Pydantic validation of MCP tool inputs
"""

from .decorators import validate_input
from .preservation import ALIGNMENT_THRESHOLD, compute_validation
from .tool_schemas import (
    CheckStatusInput,
    CompressContextInput,
    EstimateTokensInput,
    EvaluateResponseInput,
    GetMetricsInput,
    GetPersonaInput,
    ListPersonasInput,
)

__all__ = [
    # Keyword preservation
    "ALIGNMENT_THRESHOLD",
    "compute_validation",
    # Decorator
    "validate_input",
    # Tool input schemas
    "CheckStatusInput",
    "CompressContextInput",
    "EstimateTokensInput",
    "EvaluateResponseInput",
    "GetMetricsInput",
    "GetPersonaInput",
    "ListPersonasInput",
]
