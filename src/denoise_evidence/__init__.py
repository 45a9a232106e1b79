"""denoise-evidence: abundance and singleton p-values for read-denoising error models."""

from __future__ import annotations

__version__ = "0.1.0"

# Error model and enumeration
from .error_model import ErrorModel, build_error_model
from .partitions import ProbEntry, compositions, count_compositions, enumerate_prob_entries
from .probability_table import (
    ProbabilityTable,
    SingletonModel,
    build_probability_table,
    get_singleton_cdf,
)

# Lambda and p-values
from .lambdas import compute_lambda, compute_self
from .families import Bin, Family
from .poisson import IncompleteGammaTail, PoissonTailBackend, ScipyPoissonTail, get_backend
from .pvalues import (
    FamilyEvidence,
    evaluate_family,
    family_abundance_pvalue,
    family_singleton_pvalue,
    poisson_tail_pvalue,
    singleton_pvalue,
)

# Inputs, diagnostics and errors
from .nucleotides import NUCLEOTIDES, Substitution, count_bases
from .diagnostics import Diagnostic
from .enums import DiagnosticKind
from .exceptions import ConfigurationError, DenoiseEvidenceError, MalformedInputError

# Configuration
from .config import EvidenceConfig, dump_config, load_config

__all__ = [
    "__version__",
    # Error model
    "ErrorModel",
    "build_error_model",
    "ProbEntry",
    "compositions",
    "count_compositions",
    "enumerate_prob_entries",
    "ProbabilityTable",
    "SingletonModel",
    "build_probability_table",
    "get_singleton_cdf",
    # Lambda and p-values
    "compute_lambda",
    "compute_self",
    "Bin",
    "Family",
    "PoissonTailBackend",
    "ScipyPoissonTail",
    "IncompleteGammaTail",
    "get_backend",
    "FamilyEvidence",
    "evaluate_family",
    "family_abundance_pvalue",
    "family_singleton_pvalue",
    "poisson_tail_pvalue",
    "singleton_pvalue",
    # Inputs and diagnostics
    "NUCLEOTIDES",
    "Substitution",
    "count_bases",
    "Diagnostic",
    "DiagnosticKind",
    "ConfigurationError",
    "DenoiseEvidenceError",
    "MalformedInputError",
    # Configuration
    "EvidenceConfig",
    "dump_config",
    "load_config",
]
