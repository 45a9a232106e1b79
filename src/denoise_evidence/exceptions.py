"""Custom exceptions for denoise-evidence.

This module provides a structured exception hierarchy with error codes for
programmatic error handling by the clustering engines that call into the
scoring core.

Each exception includes:
- An error code for programmatic identification
- A human-readable message
- Optional context dictionary for additional details

Numeric anomalies (underflow, lambda outside [0, 1]) are not exceptions; they
are reported through :mod:`denoise_evidence.diagnostics`.

Example:
    >>> raise MalformedInputError(
    ...     "Error matrix must be 4x4",
    ...     context={"shape": (3, 4)}
    ... )
    MalformedInputError: [DEV-INP-001] Error matrix must be 4x4
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Error codes for denoise-evidence exceptions.

    Format: DEV-{CATEGORY}-{NUMBER}
    Categories:
        - GEN: General errors
        - CFG: Configuration errors
        - INP: Malformed numerical input
    """

    UNKNOWN = "DEV-GEN-000"

    CONFIG_INVALID = "DEV-CFG-001"
    CONFIG_MISSING = "DEV-CFG-002"
    CONFIG_PARSE = "DEV-CFG-003"

    MATRIX_SHAPE = "DEV-INP-001"
    MATRIX_VALUES = "DEV-INP-002"
    BASE_COUNTS = "DEV-INP-003"
    SUBSTITUTION = "DEV-INP-004"
    EDIT_DISTANCE = "DEV-INP-005"
    TABLE_INVALID = "DEV-INP-006"


class DenoiseEvidenceError(Exception):
    """Base exception for all package-specific errors.

    Attributes:
        message: Human-readable error message
        error_code: Structured error code for programmatic handling
        context: Optional dictionary with additional error context
    """

    default_error_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with error code."""
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error_code": str(self.error_code),
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(DenoiseEvidenceError):
    """Raised for errors related to configuration loading, validation, or parsing.

    Example:
        >>> raise ConfigurationError(
        ...     "max_d must be non-negative",
        ...     error_code=ErrorCode.CONFIG_INVALID,
        ...     context={"field": "max_d", "value": -1}
        ... )
    """

    default_error_code = ErrorCode.CONFIG_INVALID


class MalformedInputError(DenoiseEvidenceError):
    """Raised when an error matrix, base-count vector or substitution is unusable.

    The computation that raised it is aborted and no partial result is
    returned.

    Example:
        >>> raise MalformedInputError(
        ...     "Base counts must have exactly 4 entries",
        ...     error_code=ErrorCode.BASE_COUNTS,
        ...     context={"length": 5}
        ... )
    """

    default_error_code = ErrorCode.MATRIX_SHAPE


__all__ = [
    "ErrorCode",
    "DenoiseEvidenceError",
    "ConfigurationError",
    "MalformedInputError",
]
