"""Self-production probability and lambda of a variant under a transition matrix.

Lambda is the expected rate at which a reference produces a given variant
through sequencing error, relative to the reference's own read count.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .diagnostics import Diagnostic, report
from .enums import DiagnosticKind
from .nucleotides import BASE_INDEX, SubstitutionList, as_substitutions, as_transition_matrix


def compute_self(
    sequence: str,
    matrix: Sequence[Sequence[float]] | np.ndarray,
    diagnostics: list[Diagnostic] | None = None,
) -> float:
    """Probability that ``sequence`` is read back with no substitution.

    Only A, C, G and T contribute a factor; ambiguous bases and gaps are
    skipped.
    """
    err = as_transition_matrix(matrix)
    self_prob = 1.0
    for base in sequence.upper():
        index = BASE_INDEX.get(base)
        if index is not None:
            self_prob *= float(err[index, index])

    if self_prob == 0.0:
        report(
            diagnostics,
            DiagnosticKind.SELF_UNDERFLOW,
            "self-production probability underflowed to zero",
            self_prob,
            length=len(sequence),
        )
    return self_prob


def compute_lambda(
    self_prob: float,
    substitutions: SubstitutionList,
    matrix: Sequence[Sequence[float]] | np.ndarray,
    diagnostics: list[Diagnostic] | None = None,
) -> float:
    """Expected production rate of a variant relative to its reference.

    Args:
        self_prob: Self-production probability of the reference.
        substitutions: Substitutions of the variant against the reference, or
            None when the variant was outside the comparability threshold.
        matrix: 4x4 transition matrix indexed (from, to).
        diagnostics: Optional list collecting non-fatal numeric anomalies.

    Returns:
        ``self_prob * prod(t[from][to] / t[from][from])``, or 0.0 when
        ``substitutions`` is None.

    Substitutions naming a base other than A, C, G or T are skipped. A zero
    no-error probability gives an infinite or NaN lambda, which is reported
    as out of range rather than raised.
    """
    if substitutions is None:
        return 0.0

    err = as_transition_matrix(matrix)
    substitutions = as_substitutions(substitutions)
    lam = np.float64(self_prob)
    with np.errstate(divide="ignore", invalid="ignore"):
        for sub in substitutions:
            if not sub.is_canonical:
                continue
            ref, alt = sub.ref_index, sub.alt_index
            # A zero diagonal yields inf or nan, caught by the range check below.
            lam = lam * err[ref, alt] / err[ref, ref]
    lam = float(lam)

    nsubs = len(substitutions)
    if not 0.0 <= lam <= 1.0:
        report(
            diagnostics,
            DiagnosticKind.LAMBDA_OUT_OF_RANGE,
            "lambda outside [0, 1]",
            lam,
            nsubs=nsubs,
        )
    elif lam == 0.0:
        if self_prob == 0.0:
            report(
                diagnostics,
                DiagnosticKind.ZERO_BASELINE,
                "lambda is zero because the self-production probability is zero",
                lam,
                nsubs=nsubs,
            )
        else:
            report(
                diagnostics,
                DiagnosticKind.LAMBDA_UNDERFLOW,
                "lambda underflowed to zero",
                lam,
                nsubs=nsubs,
                self_prob=self_prob,
            )
    return lam
