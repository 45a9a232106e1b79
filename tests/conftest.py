"""
Test configuration and fixtures for denoise-evidence tests.
"""

import numpy as np
import pytest

from denoise_evidence.config import ErrorMatrixConfig
from denoise_evidence.error_model import build_error_model
from denoise_evidence.probability_table import SingletonModel, build_probability_table


@pytest.fixture
def symmetric_matrix():
    """Error matrix with 0.01 on every off-diagonal entry."""
    return ErrorMatrixConfig.symmetric(0.01).to_array()


@pytest.fixture
def skewed_matrix():
    """Error matrix dominated by transitions (A<>G, C<>T)."""
    return np.array(
        [
            [0.990, 0.001, 0.008, 0.001],
            [0.001, 0.985, 0.001, 0.013],
            [0.010, 0.001, 0.988, 0.001],
            [0.001, 0.009, 0.001, 0.989],
        ]
    )


@pytest.fixture
def reference():
    """Length-10 reference with 4 A, 3 C, 2 G and 1 T."""
    return "AAAACCCGGT"


@pytest.fixture
def base_counts():
    return [4, 3, 2, 1]


@pytest.fixture
def error_model(symmetric_matrix, base_counts):
    return build_error_model(symmetric_matrix, base_counts)


@pytest.fixture
def table(error_model):
    return build_probability_table(error_model, max_d=2)


@pytest.fixture
def example_model():
    """Small hand-made lookup model."""
    return SingletonModel(lams=[0.5, 0.3, 0.1], cdf=[0.2, 0.5, 0.9])
