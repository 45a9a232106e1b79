"""Type-safe enumerations for denoise-evidence.

Example:
    >>> from denoise_evidence.enums import DiagnosticKind
    >>> DiagnosticKind.LAMBDA_UNDERFLOW == "lambda_underflow"
    True
"""

from enum import StrEnum
from typing import Literal


class DiagnosticKind(StrEnum):
    """Kinds of non-fatal findings raised while scoring a family.

    Attributes:
        LAMBDA_OUT_OF_RANGE: Lambda fell outside [0, 1], impossible under a valid model
        LAMBDA_UNDERFLOW: Lambda underflowed to exactly zero from a non-zero baseline
        ZERO_BASELINE: Lambda is zero because the self-production probability is zero
        SELF_UNDERFLOW: Self-production probability underflowed to exactly zero
        DEGENERATE_COUNT: Family has no (or negative) reads
    """

    LAMBDA_OUT_OF_RANGE = "lambda_out_of_range"
    LAMBDA_UNDERFLOW = "lambda_underflow"
    ZERO_BASELINE = "zero_baseline"
    SELF_UNDERFLOW = "self_underflow"
    DEGENERATE_COUNT = "degenerate_count"


class DiagnosticCategory(StrEnum):
    """Coarse grouping of diagnostic kinds."""

    NUMERIC_ANOMALY = "numeric_anomaly"
    DEGENERATE_COUNT = "degenerate_count"


PoissonBackendName = Literal["scipy", "gamma"]
"""Registered right-tail Poisson implementations."""


__all__ = [
    "DiagnosticKind",
    "DiagnosticCategory",
    "PoissonBackendName",
]
