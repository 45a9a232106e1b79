"""
Tests for custom exceptions and error handling.
"""

from denoise_evidence.exceptions import (
    ConfigurationError,
    DenoiseEvidenceError,
    ErrorCode,
    MalformedInputError,
)


class TestCustomExceptions:
    """Test custom exception hierarchy."""

    def test_base_exception(self):
        error = DenoiseEvidenceError("Base error")
        assert str(error) == "[DEV-GEN-000] Base error"
        assert error.message == "Base error"
        assert error.context == {}

    def test_malformed_input_default_code(self):
        error = MalformedInputError("Error matrix must be 4x4", context={"shape": (3, 4)})
        assert isinstance(error, DenoiseEvidenceError)
        assert error.error_code == ErrorCode.MATRIX_SHAPE
        assert str(error) == "[DEV-INP-001] Error matrix must be 4x4"

    def test_explicit_code(self):
        error = MalformedInputError("bad counts", error_code=ErrorCode.BASE_COUNTS)
        assert error.error_code == ErrorCode.BASE_COUNTS

    def test_configuration_error(self):
        error = ConfigurationError("Invalid config")
        assert error.error_code == ErrorCode.CONFIG_INVALID

    def test_to_dict(self):
        error = ConfigurationError("Missing matrix", error_code=ErrorCode.CONFIG_MISSING, context={"field": "error_matrix"})
        assert error.to_dict() == {
            "error_code": "DEV-CFG-002",
            "message": "Missing matrix",
            "context": {"field": "error_matrix"},
        }

    def test_error_chaining(self):
        try:
            try:
                raise ValueError("Original error")
            except ValueError as e:
                raise MalformedInputError("Wrapped", context={"original": str(e)}) from e
        except MalformedInputError as wrapped:
            assert isinstance(wrapped.__cause__, ValueError)
            assert wrapped.context["original"] == "Original error"
