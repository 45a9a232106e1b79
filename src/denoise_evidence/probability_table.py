"""Singleton probability table and the read-only lookup model built from it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from .error_model import ErrorModel, build_error_model
from .exceptions import ErrorCode, MalformedInputError
from .logging_config import PerformanceLogger, get_logger
from .partitions import count_compositions, enumerate_prob_entries
from .schemas import SingletonCDFSchema

log = get_logger(__name__)


def _frozen(values: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SingletonModel:
    """Lambda breakpoints and tail masses used for singleton p-value lookups.

    ``lams`` is non-increasing and ``cdf`` non-decreasing, both of length
    ``nlam``. Instances are immutable and can be shared between threads.
    """

    lams: np.ndarray
    cdf: np.ndarray

    def __post_init__(self):
        lams = _frozen(self.lams)
        cdf = _frozen(self.cdf)
        if lams.ndim != 1 or lams.shape != cdf.shape:
            raise MalformedInputError(
                "lams and cdf must be one-dimensional and of equal length",
                error_code=ErrorCode.TABLE_INVALID,
                context={"lams": lams.shape, "cdf": cdf.shape},
            )
        if lams.size == 0:
            raise MalformedInputError(
                "Singleton model needs at least one breakpoint",
                error_code=ErrorCode.TABLE_INVALID,
            )
        if np.any(cdf < 0) or np.any(cdf > 1):
            raise MalformedInputError(
                "cdf values must lie in [0, 1]",
                error_code=ErrorCode.TABLE_INVALID,
            )
        if np.any(np.diff(lams) > 0) or np.any(np.diff(cdf) < 0):
            raise MalformedInputError(
                "lams must be non-increasing and cdf non-decreasing",
                error_code=ErrorCode.TABLE_INVALID,
            )
        object.__setattr__(self, "lams", lams)
        object.__setattr__(self, "cdf", cdf)
        # searchsorted needs ascending keys
        object.__setattr__(self, "_ascending_keys", _frozen(-lams))

    @property
    def nlam(self) -> int:
        return int(self.lams.size)

    def tail_index(self, lam: float) -> int:
        """Index ``i`` with ``lams[i] > lam >= lams[i + 1]``.

        Only meaningful when ``lams[-1] < lam < lams[0]``.
        """
        first_not_greater = int(np.searchsorted(self._ascending_keys, -lam, side="left"))
        return first_not_greater - 1


@dataclass(frozen=True, eq=False)
class ProbabilityTable:
    """Sorted, truncated probabilities and right-tail masses of compositions.

    Attributes:
        ps: Per-sequence probability of each kept composition, descending.
        cdf: Cumulative ``p * n`` up to and including each rank.
        max_d: Largest edit distance enumerated.
        min_p: Truncation bound ``max_relative_error ** (max_d + 1)``.
        enumerated_mass: Total ``p * n`` over the untruncated enumeration.
        n_enumerated: Number of compositions visited.
    """

    ps: np.ndarray
    cdf: np.ndarray
    max_d: int
    min_p: float
    enumerated_mass: float
    n_enumerated: int

    def __len__(self) -> int:
        return int(self.ps.size)

    def to_frame(self) -> pd.DataFrame:
        """Table as a DataFrame with columns ``p`` and ``cdf``."""
        frame = pd.DataFrame({"p": self.ps.copy(), "cdf": self.cdf.copy()})
        return SingletonCDFSchema.validate(frame)

    def to_model(self) -> SingletonModel:
        """Lookup model with the composition probabilities as lambda breakpoints."""
        return SingletonModel(lams=self.ps, cdf=self.cdf)


def build_probability_table(model: ErrorModel, max_d: int) -> ProbabilityTable:
    """Enumerate all compositions up to ``max_d`` substitutions into a tail table.

    Entries are sorted by probability descending with ties broken by
    multiplicity descending. Entries whose probability is not above
    ``max_relative_error ** (max_d + 1)`` are dropped: an unenumerated
    composition could be that probable, so the tail mass there is unreliable.

    Args:
        model: Error model of the reference.
        max_d: Largest number of substitutions to enumerate. Cost grows as
            ``C(11 + d, 11)`` per distance, so keep it small.

    Returns:
        ProbabilityTable with equal-length ``ps`` and ``cdf`` arrays.

    Raises:
        MalformedInputError: If ``max_d`` is negative.
    """
    if max_d < 0:
        raise MalformedInputError(
            f"max_d must be non-negative, got {max_d}",
            error_code=ErrorCode.EDIT_DISTANCE,
            context={"max_d": max_d},
        )

    expected = sum(count_compositions(d) for d in range(max_d + 1))
    with PerformanceLogger(log, "build_probability_table", max_d=max_d, n_compositions=expected):
        entries = sorted(enumerate_prob_entries(model, max_d), reverse=True)

        ps = np.array([entry.p for entry in entries], dtype=np.float64)
        masses = np.array([entry.mass for entry in entries], dtype=np.float64)
        cdf = np.minimum(np.cumsum(masses), 1.0)
        enumerated_mass = float(masses.sum())

        min_p = model.max_relative_error ** (max_d + 1)
        keep = int(np.argmax(ps <= min_p)) if np.any(ps <= min_p) else ps.size

    log.debug(
        "probability_table_truncated",
        max_d=max_d,
        min_p=min_p,
        kept=keep,
        enumerated=len(entries),
        enumerated_mass=enumerated_mass,
    )
    return ProbabilityTable(
        ps=_frozen(ps[:keep]),
        cdf=_frozen(cdf[:keep]),
        max_d=max_d,
        min_p=min_p,
        enumerated_mass=enumerated_mass,
        n_enumerated=len(entries),
    )


def get_singleton_cdf(
    matrix: Sequence[Sequence[float]] | np.ndarray,
    base_counts: Sequence[int] | np.ndarray,
    max_d: int,
) -> pd.DataFrame:
    """Build the singleton table for a reference composition as a DataFrame.

    Raises:
        MalformedInputError: If the matrix is not 4x4 or the counts are invalid.
    """
    table = build_probability_table(build_error_model(matrix, base_counts), max_d)
    return table.to_frame()
