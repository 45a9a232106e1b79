"""Right-tail Poisson probabilities behind the abundance p-value.

The exact numerical routine is a replaceable dependency: any object with a
``tail(reads, mu)`` method returning ``P(X >= reads | mu)`` can be injected.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from scipy import special, stats

from .enums import PoissonBackendName
from .exceptions import ConfigurationError


@runtime_checkable
class PoissonTailBackend(Protocol):
    """Computes ``P(X >= reads)`` for ``X ~ Poisson(mu)``."""

    name: str

    def tail(self, reads: int, mu: float) -> float:
        ...


class ScipyPoissonTail:
    """Survival function of ``scipy.stats.poisson``."""

    name = "scipy"

    def tail(self, reads: int, mu: float) -> float:
        if reads <= 0:
            return 1.0
        # sf(k) = P(X > k), so shift by one for P(X >= reads)
        return float(stats.poisson.sf(reads - 1, mu))


class IncompleteGammaTail:
    """Regularised lower incomplete gamma: ``P(X >= n) = P(n, mu)``."""

    name = "gamma"

    def tail(self, reads: int, mu: float) -> float:
        if reads <= 0:
            return 1.0
        if mu <= 0:
            return 0.0
        return float(special.gammainc(reads, mu))


_BACKENDS: dict[str, type] = {
    ScipyPoissonTail.name: ScipyPoissonTail,
    IncompleteGammaTail.name: IncompleteGammaTail,
}


def get_backend(name: PoissonBackendName | str) -> PoissonTailBackend:
    """Instantiate a registered backend by name."""
    try:
        return _BACKENDS[name]()
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown Poisson backend: {name}",
            context={"available": sorted(_BACKENDS)},
        ) from exc


def available_backends() -> list[str]:
    return sorted(_BACKENDS)


DEFAULT_BACKEND: PoissonTailBackend = ScipyPoissonTail()
