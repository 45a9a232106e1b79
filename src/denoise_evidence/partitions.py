"""Enumeration of substitution-count compositions and their probabilities.

For every edit distance ``d`` up to ``max_d`` each way of spreading ``d``
substitutions over the 12 directed substitution types is visited once. A
composition fixes how many A>C, A>G, ... errors occur; its probability is the
same for every sequence that realises it, and the number of such sequences is
a product of falling factorials over the reference base counts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import combinations
from typing import Iterator

from .error_model import ErrorModel
from .exceptions import ErrorCode, MalformedInputError
from .nucleotides import N_SUBSTITUTION_TYPES


@dataclass(frozen=True, order=True)
class ProbEntry:
    """Probability of one sequence realising a composition, and how many do.

    Entries order by ``p`` and then by ``n``, so sorting in reverse gives
    probability-descending order with ties broken by multiplicity descending.
    """

    p: float
    n: float

    @property
    def mass(self) -> float:
        return self.p * self.n


def count_compositions(total: int, parts: int = N_SUBSTITUTION_TYPES) -> int:
    """Number of compositions of ``total`` into ``parts`` non-negative parts."""
    return math.comb(parts - 1 + total, parts - 1)


def compositions(total: int, parts: int = N_SUBSTITUTION_TYPES) -> Iterator[tuple[int, ...]]:
    """Yield every tuple of ``parts`` non-negative integers summing to ``total``.

    Stars and bars: each choice of ``parts - 1`` bar positions among
    ``total + parts - 1`` slots is one composition.
    """
    if total < 0 or parts < 1:
        return
    slots = total + parts - 1
    for bars in combinations(range(slots), parts - 1):
        previous = -1
        counts = []
        for bar in bars:
            counts.append(bar - previous - 1)
            previous = bar
        counts.append(slots - previous - 1)
        yield tuple(counts)


def composition_entry(model: ErrorModel, counts: tuple[int, ...]) -> ProbEntry:
    """Probability and multiplicity of one substitution-count composition."""
    p = model.self_prob
    n = 1.0
    available = [int(c) for c in model.base_counts]
    for type_index, count in enumerate(counts):
        if count == 0:
            continue
        base = model.type_base(type_index)
        p *= float(model.relative_errors[type_index]) ** count
        for k in range(1, count + 1):
            if available[base] <= 0:
                # More substitutions at this base than the reference holds.
                n = 0.0
                break
            n = n * available[base] / k
            available[base] -= 1
    return ProbEntry(p=p, n=n)


def enumerate_prob_entries(model: ErrorModel, max_d: int) -> Iterator[ProbEntry]:
    """Yield one :class:`ProbEntry` per composition for ``d = 0..max_d``."""
    if max_d < 0:
        raise MalformedInputError(
            f"max_d must be non-negative, got {max_d}",
            error_code=ErrorCode.EDIT_DISTANCE,
            context={"max_d": max_d},
        )
    for d in range(max_d + 1):
        for counts in compositions(d):
            yield composition_entry(model, counts)

