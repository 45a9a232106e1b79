"""Substitution error model used to enumerate error-derived sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .exceptions import ErrorCode, MalformedInputError
from .nucleotides import (
    N_NUCLEOTIDES,
    SUBSTITUTION_TYPES,
    as_base_counts,
    as_transition_matrix,
    count_bases,
    substitution_label,
)


@dataclass(frozen=True, eq=False)
class ErrorModel:
    """Error rates of a reference conditioned on an error having occurred.

    Attributes:
        matrix: Raw 4x4 substitution probability matrix (from, to).
        base_counts: Counts of A, C, G, T in the reference.
        base_error: Total off-diagonal error mass per base.
        self_prob: Probability that the reference is produced without error.
        relative_errors: The 12 off-diagonal rates divided by ``1 - base_error``
            of their row, in :data:`~denoise_evidence.nucleotides.SUBSTITUTION_TYPES` order.
    """

    matrix: np.ndarray
    base_counts: np.ndarray
    base_error: np.ndarray
    self_prob: float
    relative_errors: np.ndarray

    @classmethod
    def from_sequence(cls, matrix: Sequence[Sequence[float]] | np.ndarray, sequence: str) -> ErrorModel:
        """Build an error model for the base composition of ``sequence``."""
        return build_error_model(matrix, count_bases(sequence))

    @property
    def max_relative_error(self) -> float:
        return float(self.relative_errors.max())

    @property
    def sequence_length(self) -> int:
        return int(self.base_counts.sum())

    def type_base(self, type_index: int) -> int:
        """Index of the reference base a substitution type is rooted at."""
        return SUBSTITUTION_TYPES[type_index][0]

    def to_dict(self) -> dict[str, object]:
        return {
            "base_counts": self.base_counts.tolist(),
            "base_error": self.base_error.tolist(),
            "self_prob": self.self_prob,
            "relative_errors": {
                substitution_label(i): float(rate)
                for i, rate in enumerate(self.relative_errors)
            },
        }


def build_error_model(
    matrix: Sequence[Sequence[float]] | np.ndarray,
    base_counts: Sequence[int] | np.ndarray,
) -> ErrorModel:
    """Normalise a raw substitution matrix into relative error rates.

    Args:
        matrix: 4x4 substitution probabilities indexed (from, to) over A, C, G, T.
        base_counts: Counts of each base in the reference sequence.

    Returns:
        ErrorModel with the self-production probability
        ``prod_b (1 - p_b) ** nnt[b]`` and the off-diagonal rates conditioned on
        an error (each row divided by ``1 - p_b``).

    Raises:
        MalformedInputError: If the matrix is not 4x4, contains values outside
            [0, 1], has a row whose error mass reaches 1, or if the base counts
            are invalid.
    """
    err = as_transition_matrix(matrix)
    nnt = as_base_counts(base_counts)

    off_diagonal = err * (1.0 - np.eye(N_NUCLEOTIDES))
    base_error = off_diagonal.sum(axis=1)
    no_error = 1.0 - base_error
    if np.any(no_error <= 0):
        raise MalformedInputError(
            "Off-diagonal error mass of every row must be below 1",
            error_code=ErrorCode.MATRIX_VALUES,
            context={"base_error": base_error.tolist()},
        )

    self_prob = float(np.prod(no_error ** nnt))
    relative_errors = np.array(
        [err[i, j] / no_error[i] for i, j in SUBSTITUTION_TYPES],
        dtype=np.float64,
    )

    base_error.setflags(write=False)
    relative_errors.setflags(write=False)
    return ErrorModel(
        matrix=err,
        base_counts=nnt,
        base_error=base_error,
        self_prob=self_prob,
        relative_errors=relative_errors,
    )
