"""Command-line interface for denoise-evidence."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

import click
import numpy as np

from .config import EvidenceConfig, load_config, load_error_matrix
from .error_model import ErrorModel, build_error_model
from .exceptions import DenoiseEvidenceError
from .logging_config import get_logger, setup_logging
from .poisson import available_backends, get_backend
from .probability_table import build_probability_table
from .pvalues import poisson_tail_pvalue, singleton_pvalue

log = get_logger(__name__)


@dataclass(slots=True)
class CLIContext:
    """Shared CLI configuration."""

    config: EvidenceConfig


def _load_evidence_config(config_path: Optional[Path]) -> EvidenceConfig:
    if config_path is None:
        return EvidenceConfig()
    if not config_path.exists():
        raise click.ClickException(f"Configuration file not found: {config_path}")
    try:
        return load_config(config_path)
    except DenoiseEvidenceError as exc:
        raise click.ClickException(str(exc)) from exc


def _error_model(
    ctx: CLIContext,
    matrix_path: Optional[Path],
    sequence: Optional[str],
    counts: Optional[Tuple[int, ...]],
) -> ErrorModel:
    """Resolve the error model from --matrix/--sequence/--counts and the config."""
    if (sequence is None) == (counts is None):
        raise click.UsageError("Give exactly one of --sequence or --counts.")
    try:
        if matrix_path is not None:
            matrix = load_error_matrix(matrix_path)
        elif ctx.config.error_matrix is not None:
            matrix = ctx.config.error_matrix.to_array()
        else:
            raise click.UsageError("No error matrix: pass --matrix or set error_matrix in the config.")
        if sequence is not None:
            return ErrorModel.from_sequence(matrix, sequence)
        return build_error_model(matrix, list(counts))
    except DenoiseEvidenceError as exc:
        raise click.ClickException(str(exc)) from exc


def _json_ready(payload: dict[str, Any]) -> dict[str, Any]:
    """Recursively convert numpy values to native Python types for JSON output."""

    def _convert(obj: Any) -> Any:
        if isinstance(obj, dict):
            return {key: _convert(value) for key, value in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [_convert(item) for item in obj]
        if isinstance(obj, np.ndarray):
            return _convert(obj.tolist())
        if isinstance(obj, (np.floating, float)):
            return float(obj)
        if isinstance(obj, (np.integer, int)):
            return int(obj)
        return obj

    return _convert(payload)


_reference_options = [
    click.option(
        "--matrix",
        "matrix_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML/JSON file holding the 4x4 error matrix (rows A, C, G, T).",
    ),
    click.option("--sequence", type=str, help="Reference sequence whose bases are counted."),
    click.option(
        "--counts",
        type=int,
        nargs=4,
        help="Counts of A, C, G and T in the reference.",
    ),
    click.option("--max-d", type=click.IntRange(min=0), help="Largest edit distance enumerated."),
]


def reference_options(func):
    for option in reversed(_reference_options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to a YAML configuration file.",
)
@click.option("--log-level", default=None, help="Logging level (defaults to DENOISE_EVIDENCE_LOG_LEVEL).")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]) -> None:
    """Abundance and singleton p-values for read-denoising error models."""
    setup_logging(log_level)
    ctx.obj = CLIContext(config=_load_evidence_config(config_path))


@main.command("singleton-cdf")
@reference_options
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the table as CSV instead of printing it.",
)
@click.pass_obj
def singleton_cdf_cmd(
    ctx: CLIContext,
    matrix_path: Optional[Path],
    sequence: Optional[str],
    counts: Optional[Tuple[int, ...]],
    max_d: Optional[int],
    output: Optional[Path],
) -> None:
    """Build the singleton probability table of a reference."""
    model = _error_model(ctx, matrix_path, sequence, counts)
    depth = ctx.config.max_d if max_d is None else max_d
    table = build_probability_table(model, depth)
    frame = table.to_frame()

    if output is not None:
        frame.to_csv(output, index=False)
    click.echo(
        json.dumps(
            _json_ready(
                {
                    "stage": "singleton-cdf",
                    "max_d": depth,
                    "self_prob": model.self_prob,
                    "nlam": len(table),
                    "n_enumerated": table.n_enumerated,
                    "enumerated_mass": table.enumerated_mass,
                    "output": str(output) if output else None,
                    "table": None if output else frame.to_dict(orient="list"),
                }
            ),
            indent=2,
        )
    )


@main.command("abundance-pvalue")
@click.option("--reads", type=int, required=True, help="Reads in the family.")
@click.option("--expected", type=click.FloatRange(min=0), required=True, help="Expected reads (lambda x bin reads).")
@click.option(
    "--backend",
    type=click.Choice(available_backends()),
    default=None,
    help="Poisson tail backend (defaults to the configured one).",
)
@click.pass_obj
def abundance_pvalue_cmd(ctx: CLIContext, reads: int, expected: float, backend: Optional[str]) -> None:
    """Conditional Poisson tail p-value of an observed read count."""
    name = backend or ctx.config.poisson_backend
    pval = poisson_tail_pvalue(
        reads,
        expected,
        backend=get_backend(name),
        tail_approx_cutoff=ctx.config.tail_approx_cutoff,
    )
    click.echo(
        json.dumps(
            {"stage": "abundance-pvalue", "reads": reads, "expected": expected, "backend": name, "pvalue": pval},
            indent=2,
        )
    )


@main.command("singleton-pvalue")
@click.option("--lam", type=float, required=True, help="Lambda of the singleton family.")
@reference_options
@click.pass_obj
def singleton_pvalue_cmd(
    ctx: CLIContext,
    lam: float,
    matrix_path: Optional[Path],
    sequence: Optional[str],
    counts: Optional[Tuple[int, ...]],
    max_d: Optional[int],
) -> None:
    """Singleton p-value of a lambda against the reference's probability table."""
    model = _error_model(ctx, matrix_path, sequence, counts)
    depth = ctx.config.max_d if max_d is None else max_d
    try:
        lookup = build_probability_table(model, depth).to_model()
    except DenoiseEvidenceError as exc:
        raise click.ClickException(str(exc)) from exc
    pval = singleton_pvalue(lam, lookup)
    log.debug("singleton_pvalue", lam=lam, nlam=lookup.nlam, pvalue=pval)
    click.echo(
        json.dumps(
            {"stage": "singleton-pvalue", "lam": lam, "max_d": depth, "nlam": lookup.nlam, "pvalue": pval},
            indent=2,
        )
    )


def cli() -> None:  # pragma: no cover - convenience shim
    """Entry point for console_scripts."""
    main(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    cli()
