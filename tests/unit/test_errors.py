"""
Unit Tests for the Error Taxonomy and Error Responses
"""

import pytest

from persona_context.errors import (
    ConfigurationError,
    ErrorCode,
    InputTooLargeError,
    InternalInconsistencyError,
    InvalidCompressionLevelError,
    InvalidPersonaError,
    PersonaContextError,
    ValidationError,
    error_response_from_exception,
    extract_error_code,
    make_error_response,
)


class TestExceptions:
    """Status codes and serialization."""

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (InvalidPersonaError("designer"), 400),
            (InvalidCompressionLevelError("extreme"), 400),
            (ValidationError("bad"), 400),
            (InputTooLargeError(11, 10), 413),
            (InternalInconsistencyError("bug"), 500),
            (ConfigurationError("missing"), 500),
        ],
    )
    def test_status_codes(self, error, status):
        assert isinstance(error, PersonaContextError)
        assert error.status_code == status

    def test_to_dict(self):
        error = InputTooLargeError(2_000_001, 1_000_000)

        assert error.to_dict() == {
            "error": "InputTooLargeError",
            "message": "Input of 2000001 characters exceeds the limit of 1000000",
            "details": {"size": 2_000_001, "limit": 1_000_000},
        }

    def test_invalid_persona_lists_known_ids(self):
        error = InvalidPersonaError("designer", known=["architect", "security"])

        assert error.message == "Unknown persona: 'designer'"
        assert error.details == {"persona": "designer", "known_personas": ["architect", "security"]}

    def test_invalid_persona_is_validation_error(self):
        assert isinstance(InvalidPersonaError("x"), ValidationError)


class TestErrorResponses:
    """Mapping exceptions to the tool error envelope."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (InvalidPersonaError("designer"), ErrorCode.INVALID_PERSONA),
            (InvalidCompressionLevelError("extreme"), ErrorCode.INVALID_COMPRESSION_LEVEL),
            (InputTooLargeError(11, 10), ErrorCode.INPUT_TOO_LARGE),
            (InternalInconsistencyError("bug"), ErrorCode.INTERNAL_INCONSISTENCY),
            (ValidationError("bad"), ErrorCode.INVALID_INPUT),
            (ConfigurationError("missing"), ErrorCode.CONFIGURATION_ERROR),
            (RuntimeError("boom"), ErrorCode.INTERNAL_ERROR),
        ],
    )
    def test_extract_error_code(self, error, code):
        assert extract_error_code(error) is code

    def test_make_error_response(self):
        response = make_error_response(ErrorCode.INVALID_INPUT, "Input validation failed")

        assert response == {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Input validation failed",
            "details": {},
        }

    def test_response_from_exception(self):
        response = error_response_from_exception(InvalidCompressionLevelError("extreme", known=["none"]))

        assert response["success"] is False
        assert response["error_code"] == "INVALID_COMPRESSION_LEVEL"
        assert response["message"] == "Unknown compression level: 'extreme'"
        assert response["details"] == {"level": "extreme", "known_levels": ["none"]}
