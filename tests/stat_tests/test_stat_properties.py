"""Property-based statistical tests for denoise-evidence."""

from __future__ import annotations

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from denoise_evidence.probability_table import SingletonModel
from denoise_evidence.pvalues import poisson_tail_pvalue, singleton_pvalue

_expected = st.floats(min_value=1e-3, max_value=1e3, allow_nan=False, allow_infinity=False)


@given(expected=_expected, reads=st.integers(min_value=1, max_value=500))
@settings(max_examples=60, deadline=None)
def test_abundance_pvalue_in_unit_interval(expected: float, reads: int) -> None:
    pval = poisson_tail_pvalue(reads, expected)
    assert 0.0 <= pval <= 1.0


@given(expected=_expected, reads=st.integers(min_value=1, max_value=499))
@settings(max_examples=60, deadline=None)
def test_abundance_pvalue_non_increasing_in_reads(expected: float, reads: int) -> None:
    """More reads than expected can only strengthen the evidence."""
    assert poisson_tail_pvalue(reads + 1, expected) <= poisson_tail_pvalue(reads, expected) * (1 + 1e-9) + 1e-300


@given(
    low=_expected,
    factor=st.floats(min_value=1.0, max_value=10.0, allow_nan=False),
    reads=st.integers(min_value=1, max_value=500),
)
@settings(max_examples=60, deadline=None)
def test_abundance_pvalue_non_decreasing_in_expected(low: float, factor: float, reads: int) -> None:
    high = low * factor
    assert poisson_tail_pvalue(reads, high) >= poisson_tail_pvalue(reads, low) * (1 - 1e-9) - 1e-300


@given(
    lams=st.lists(
        st.floats(min_value=1e-12, max_value=1.0, allow_nan=False),
        min_size=1,
        max_size=30,
    ),
    queries=st.lists(st.floats(min_value=0.0, max_value=1.5, allow_nan=False), min_size=2, max_size=10),
)
@settings(max_examples=50, deadline=None)
def test_singleton_pvalue_monotone_in_lambda(lams: list[float], queries: list[float]) -> None:
    """A larger lambda never yields a smaller singleton p-value."""
    breakpoints = np.sort(np.asarray(lams))[::-1]
    masses = breakpoints / breakpoints.sum()
    model = SingletonModel(lams=breakpoints, cdf=np.minimum(np.cumsum(masses), 1.0))

    pvalues = [singleton_pvalue(lam, model) for lam in sorted(queries)]
    assert all(0.0 <= p <= 1.0 for p in pvalues)
    assert all(a <= b for a, b in zip(pvalues, pvalues[1:]))
