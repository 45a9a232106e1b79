"""Abundance and singleton p-values for read families."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .diagnostics import Diagnostic, report
from .enums import DiagnosticKind
from .families import Bin, Family
from .poisson import DEFAULT_BACKEND, PoissonTailBackend
from .probability_table import SingletonModel

# Below this, 1 - exp(-E) is replaced by its second-order Taylor expansion.
TAIL_APPROX_CUTOFF = 1e-7


def poisson_tail_pvalue(
    reads: int,
    expected_reads: float,
    backend: PoissonTailBackend | None = None,
    tail_approx_cutoff: float = TAIL_APPROX_CUTOFF,
) -> float:
    """P(X >= reads) for X ~ Poisson(expected_reads), conditioned on X > 0.

    The error model only describes variants that were observed, so the tail
    is divided by ``1 - exp(-expected_reads)``. The result is clipped to
    [0, 1].
    """
    if reads <= 0:
        return 1.0
    if expected_reads <= 0:
        return 0.0
    backend = backend or DEFAULT_BACKEND

    norm = 1.0 - math.exp(-expected_reads)
    if norm < tail_approx_cutoff:
        norm = expected_reads - 0.5 * expected_reads * expected_reads

    pval = backend.tail(reads, expected_reads) / norm
    return min(max(pval, 0.0), 1.0)


def family_abundance_pvalue(
    family: Family,
    bin: Bin,
    backend: PoissonTailBackend | None = None,
    tail_approx_cutoff: float = TAIL_APPROX_CUTOFF,
    diagnostics: list[Diagnostic] | None = None,
) -> float:
    """Abundance p-value of a family within its bin.

    Singletons always get 1.0 here; their evidence comes from
    :func:`singleton_pvalue`.
    """
    if family.reads < 1:
        report(
            diagnostics,
            DiagnosticKind.DEGENERATE_COUNT,
            "family has no reads",
            float(family.reads),
            reads=family.reads,
        )
        return 1.0
    if family.reads == 1:
        return 1.0
    if family.substitutions is None:
        # Outside the k-mer screen
        return 0.0
    if len(family.substitutions) == 0:
        # Cluster center
        return 1.0
    if family.lam == 0:
        return 0.0

    expected_reads = family.lam * bin.reads
    return poisson_tail_pvalue(family.reads, expected_reads, backend, tail_approx_cutoff)


def singleton_pvalue(lam: float, model: SingletonModel) -> float:
    """Tail mass of all enumerated compositions more probable than ``lam``.

    Args:
        lam: Lambda of the family being tested.
        model: Singleton lookup model.

    Returns:
        1.0 when ``lam`` is at least the largest breakpoint,
        ``1 - cdf[-1]`` when it is at most the smallest, and otherwise
        ``1 - cdf[i]`` for ``lams[i] > lam >= lams[i + 1]``.
    """
    if lam >= model.lams[0]:
        return 1.0
    if lam <= model.lams[-1]:
        return float(1.0 - model.cdf[-1])
    return float(1.0 - model.cdf[model.tail_index(lam)])


def family_singleton_pvalue(family: Family, model: SingletonModel) -> float:
    return singleton_pvalue(family.lam, model)


@dataclass(frozen=True)
class FamilyEvidence:
    """Both p-values for one family, with any diagnostics raised on the way."""

    abundance_pvalue: float
    singleton_pvalue: float
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def flagged(self) -> bool:
        return bool(self.diagnostics)


def evaluate_family(
    family: Family,
    bin: Bin,
    model: SingletonModel,
    backend: PoissonTailBackend | None = None,
    tail_approx_cutoff: float = TAIL_APPROX_CUTOFF,
) -> FamilyEvidence:
    diagnostics: list[Diagnostic] = []
    pa = family_abundance_pvalue(family, bin, backend, tail_approx_cutoff, diagnostics)
    ps = family_singleton_pvalue(family, model)
    return FamilyEvidence(abundance_pvalue=pa, singleton_pvalue=ps, diagnostics=tuple(diagnostics))
