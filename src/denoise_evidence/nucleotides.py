"""Nucleotide alphabet, base counting and substitution records."""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, Sequence

import numpy as np

from .exceptions import ErrorCode, MalformedInputError

NUCLEOTIDES = "ACGT"
N_NUCLEOTIDES = len(NUCLEOTIDES)
BASE_INDEX = {base: i for i, base in enumerate(NUCLEOTIDES)}

# Directed substitution types in row-major off-diagonal order: A>C, A>G, A>T, C>A, ...
SUBSTITUTION_TYPES: tuple[tuple[int, int], ...] = tuple(
    (i, j) for i in range(N_NUCLEOTIDES) for j in range(N_NUCLEOTIDES) if i != j
)
N_SUBSTITUTION_TYPES = len(SUBSTITUTION_TYPES)


class Substitution(NamedTuple):
    """A single base difference of a candidate relative to its reference."""

    position: int
    ref: str
    alt: str

    @property
    def ref_index(self) -> int:
        return base_index(self.ref)

    @property
    def alt_index(self) -> int:
        return base_index(self.alt)

    @property
    def is_canonical(self) -> bool:
        """True when both bases are one of A, C, G or T."""
        return str(self.ref).upper() in BASE_INDEX and str(self.alt).upper() in BASE_INDEX

    def __str__(self) -> str:
        return f"{self.ref}{self.position}{self.alt}"


# ``None`` means the candidate was not comparable to the reference (e.g. beyond
# the k-mer distance screen); ``()`` means it is identical to the reference.
SubstitutionList = Optional[tuple[Substitution, ...]]


def base_index(base: str) -> int:
    """Return the 0-3 index of a canonical base, case-insensitively."""
    try:
        return BASE_INDEX[base.upper()]
    except (KeyError, AttributeError) as exc:
        raise MalformedInputError(
            f"Not a canonical nucleotide: {base!r}",
            error_code=ErrorCode.SUBSTITUTION,
            context={"base": base},
        ) from exc


def substitution_label(type_index: int) -> str:
    """Human-readable label (e.g. ``"A>G"``) for a directed substitution type."""
    ref, alt = SUBSTITUTION_TYPES[type_index]
    return f"{NUCLEOTIDES[ref]}>{NUCLEOTIDES[alt]}"


def count_bases(sequence: str) -> np.ndarray:
    """Count A, C, G and T in ``sequence``; any other symbol is ignored."""
    upper = sequence.upper()
    return np.array([upper.count(base) for base in NUCLEOTIDES], dtype=np.int64)


def as_base_counts(base_counts: Sequence[int] | np.ndarray) -> np.ndarray:
    """Validate a length-4 vector of non-negative integer base counts."""
    counts = np.asarray(base_counts)
    if counts.shape != (N_NUCLEOTIDES,):
        raise MalformedInputError(
            f"Base counts must have exactly {N_NUCLEOTIDES} entries",
            error_code=ErrorCode.BASE_COUNTS,
            context={"shape": counts.shape},
        )
    if not np.issubdtype(counts.dtype, np.integer):
        if not np.issubdtype(counts.dtype, np.floating) or not np.all(
            np.isfinite(counts) & (counts == np.round(counts))
        ):
            raise MalformedInputError(
                "Base counts must be integers",
                error_code=ErrorCode.BASE_COUNTS,
                context={"counts": counts.tolist()},
            )
    counts = counts.astype(np.int64)
    if np.any(counts < 0):
        raise MalformedInputError(
            "Base counts cannot be negative",
            error_code=ErrorCode.BASE_COUNTS,
            context={"counts": counts.tolist()},
        )
    counts.setflags(write=False)
    return counts


def as_transition_matrix(matrix: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Validate and freeze a 4x4 matrix of substitution probabilities.

    Raises:
        MalformedInputError: If the matrix is not 4x4 or has entries that are
            not finite probabilities.
    """
    try:
        arr = np.array(matrix, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(
            "Error matrix must be a 4x4 numeric matrix",
            error_code=ErrorCode.MATRIX_SHAPE,
        ) from exc
    if arr.shape != (N_NUCLEOTIDES, N_NUCLEOTIDES):
        raise MalformedInputError(
            f"Error matrix must be 4x4, got shape {arr.shape}",
            error_code=ErrorCode.MATRIX_SHAPE,
            context={"shape": arr.shape},
        )
    if not np.all(np.isfinite(arr)) or np.any(arr < 0) or np.any(arr > 1):
        raise MalformedInputError(
            "Error matrix entries must be probabilities in [0, 1]",
            error_code=ErrorCode.MATRIX_VALUES,
            context={"matrix": arr.tolist()},
        )
    arr.setflags(write=False)
    return arr


def as_substitutions(substitutions: Iterable[Substitution | tuple] | None) -> SubstitutionList:
    """Normalise an iterable of substitution-like tuples, keeping ``None`` as-is."""
    if substitutions is None:
        return None
    return tuple(
        sub if isinstance(sub, Substitution) else Substitution(*sub)
        for sub in substitutions
    )
