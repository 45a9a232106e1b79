"""Configuration management for denoise-evidence."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .enums import PoissonBackendName
from .error_model import ErrorModel
from .exceptions import ConfigurationError, ErrorCode, MalformedInputError
from .nucleotides import as_transition_matrix
from .poisson import PoissonTailBackend, get_backend
from .pvalues import TAIL_APPROX_CUTOFF
from .settings import settings


class ErrorMatrixConfig(BaseModel):
    """A 4x4 substitution probability matrix, rows and columns ordered A, C, G, T."""

    rows: list[list[float]]

    @field_validator("rows")
    @classmethod
    def validate_rows(cls, v: list[list[float]]) -> list[list[float]]:
        if len(v) != 4 or any(len(row) != 4 for row in v):
            raise ConfigurationError("error matrix must be 4x4")
        if any(not 0 <= x <= 1 for row in v for x in row):
            raise ConfigurationError("error matrix entries must be between 0 and 1")
        return v

    @classmethod
    def symmetric(cls, off_diagonal: float) -> ErrorMatrixConfig:
        """Matrix with a constant off-diagonal rate and rows summing to one."""
        rows = [
            [1.0 - 3 * off_diagonal if i == j else off_diagonal for j in range(4)]
            for i in range(4)
        ]
        return cls(rows=rows)

    def to_array(self) -> np.ndarray:
        return np.array(self.rows, dtype=np.float64)


class EvidenceConfig(BaseModel):
    """Parameters for building singleton tables and computing p-values.

    Attributes:
        max_d: Largest edit distance enumerated in the singleton table.
        tail_approx_cutoff: Threshold below which the abundance normaliser
            switches to its Taylor expansion.
        poisson_backend: Name of the right-tail Poisson implementation.
        error_matrix: Optional default error matrix.
    """

    model_config = ConfigDict(validate_assignment=True)

    max_d: int = Field(
        default_factory=lambda: settings.DEFAULT_MAX_D,
        ge=0,
        le=12,
        description="Largest edit distance enumerated (cost grows as C(11+d, 11))",
    )
    tail_approx_cutoff: float = Field(
        TAIL_APPROX_CUTOFF,
        gt=0,
        lt=1,
        description="Cutoff for the second-order Taylor normaliser",
    )
    poisson_backend: PoissonBackendName = Field(
        default_factory=lambda: settings.POISSON_BACKEND,
        description="Poisson tail backend: scipy or gamma",
    )
    error_matrix: ErrorMatrixConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def config_hash(self) -> str:
        """Compute deterministic hash of configuration."""
        config_str = self.model_dump_json()
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    def backend(self) -> PoissonTailBackend:
        return get_backend(self.poisson_backend)

    def error_model_for(self, sequence: str) -> ErrorModel:
        """Error model of ``sequence`` under the configured error matrix."""
        if self.error_matrix is None:
            raise ConfigurationError(
                "No error matrix configured",
                error_code=ErrorCode.CONFIG_MISSING,
                context={"field": "error_matrix"},
            )
        return ErrorModel.from_sequence(self.error_matrix.to_array(), sequence)


def load_config(path: str | Path) -> EvidenceConfig:
    """Load configuration from a YAML file.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ConfigurationError: If the configuration is invalid or cannot be parsed.
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Cannot parse {path}: {exc}",
                error_code=ErrorCode.CONFIG_PARSE,
                context={"path": str(path)},
            ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration in {path} must be a mapping",
            error_code=ErrorCode.CONFIG_PARSE,
            context={"path": str(path)},
        )
    if isinstance(data.get("error_matrix"), list):
        data["error_matrix"] = {"rows": data["error_matrix"]}
    try:
        return EvidenceConfig(**data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration in {path}",
            context={"path": str(path), "errors": exc.errors(include_url=False)},
        ) from exc


def dump_config(config: EvidenceConfig, path: str | Path | None) -> str | None:
    """Save configuration to a YAML file, or return the YAML string if path is None."""
    data = config.to_dict()
    if data.get("error_matrix") is not None:
        data["error_matrix"] = data["error_matrix"]["rows"]
    yaml_str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    if path is None:
        return yaml_str
    with open(path, "w") as f:
        f.write(yaml_str)
    return None


def load_error_matrix(path: str | Path) -> np.ndarray:
    """Read a 4x4 error matrix from a YAML or JSON file.

    The file holds either a bare list of four rows or a mapping with an
    ``error_matrix`` key.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict):
        data = data.get("error_matrix")
    if data is None:
        raise MalformedInputError(
            f"No error matrix found in {path}",
            context={"path": str(path)},
        )
    return as_transition_matrix(data)
