"""Structured, non-fatal diagnostics for numeric anomalies.

Scoring functions never stop a denoising run over a single odd variant.
Instead, each finding is recorded as a :class:`Diagnostic`, appended to the
caller's list when one is supplied, and emitted as a structlog warning event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import DiagnosticCategory, DiagnosticKind
from .logging_config import get_logger

_CATEGORIES = {
    DiagnosticKind.LAMBDA_OUT_OF_RANGE: DiagnosticCategory.NUMERIC_ANOMALY,
    DiagnosticKind.LAMBDA_UNDERFLOW: DiagnosticCategory.NUMERIC_ANOMALY,
    DiagnosticKind.ZERO_BASELINE: DiagnosticCategory.NUMERIC_ANOMALY,
    DiagnosticKind.SELF_UNDERFLOW: DiagnosticCategory.NUMERIC_ANOMALY,
    DiagnosticKind.DEGENERATE_COUNT: DiagnosticCategory.DEGENERATE_COUNT,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single anomaly observed while computing a value."""

    kind: DiagnosticKind
    message: str
    value: float
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def category(self) -> DiagnosticCategory:
        return _CATEGORIES[self.kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "category": str(self.category),
            "message": self.message,
            "value": self.value,
            "context": self.context,
        }


def report(
    diagnostics: list[Diagnostic] | None,
    kind: DiagnosticKind,
    message: str,
    value: float,
    **context: Any,
) -> Diagnostic:
    """Record a diagnostic and log it as a structured warning."""
    diagnostic = Diagnostic(kind=kind, message=message, value=value, context=context)
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    get_logger(__name__).warning(
        message,
        diagnostic=str(kind),
        category=str(diagnostic.category),
        value=value,
        **context,
    )
    return diagnostic
