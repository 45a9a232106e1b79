"""Read families and bins as seen by the scoring core.

Both records are owned by the clustering engine; scoring only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .diagnostics import Diagnostic
from .lambdas import compute_lambda
from .nucleotides import SubstitutionList, as_substitutions


@dataclass
class Family:
    """Identical reads with one lambda and substitution list against a reference.

    ``substitutions`` is None when the family lay outside the comparability
    threshold of the reference and ``()`` when it is the reference itself.
    """

    reads: int
    lam: float = 0.0
    substitutions: SubstitutionList = None

    def __post_init__(self):
        self.substitutions = as_substitutions(self.substitutions)

    @property
    def nsubs(self) -> int | None:
        return None if self.substitutions is None else len(self.substitutions)

    @classmethod
    def against_reference(
        cls,
        reads: int,
        substitutions: SubstitutionList,
        self_prob: float,
        matrix: np.ndarray,
        diagnostics: list[Diagnostic] | None = None,
    ) -> Family:
        """Family whose lambda is computed from the reference's self probability."""
        substitutions = as_substitutions(substitutions)
        lam = compute_lambda(self_prob, substitutions, matrix, diagnostics)
        return cls(reads=reads, lam=lam, substitutions=substitutions)


@dataclass
class Bin:
    """Families sharing a consensus; ``reads`` is their total read count."""

    reads: int
