import json
import math

import pandas as pd
import pytest
from click.testing import CliRunner

from denoise_evidence.cli import main

SYMMETRIC_ROWS = [
    [0.97, 0.01, 0.01, 0.01],
    [0.01, 0.97, 0.01, 0.01],
    [0.01, 0.01, 0.97, 0.01],
    [0.01, 0.01, 0.01, 0.97],
]


def _rows_yaml(rows):
    return "error_matrix:\n" + "".join(f"  - {row}\n" for row in rows)


@pytest.fixture
def matrix_file(tmp_path):
    path = tmp_path / "matrix.yaml"
    path.write_text(_rows_yaml(SYMMETRIC_ROWS))
    return path


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, args):
    return runner.invoke(main, ["--log-level", "WARNING", *args])


def test_cli_help(runner):
    """Test the CLI help output."""
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Usage: main [OPTIONS] COMMAND [ARGS]..." in result.output
    assert "Abundance and singleton p-values" in result.output
    for command in ("singleton-cdf", "abundance-pvalue", "singleton-pvalue"):
        assert command in result.output


def test_singleton_cdf_self_only(runner, matrix_file):
    result = _invoke(runner, ["singleton-cdf", "--matrix", str(matrix_file), "--counts", "4", "3", "2", "1", "--max-d", "0"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["nlam"] == 1
    assert payload["self_prob"] == pytest.approx(0.97**10)
    assert payload["table"]["p"] == pytest.approx([0.97**10])
    assert payload["table"]["cdf"] == pytest.approx([0.97**10])


def test_singleton_cdf_from_config(runner, tmp_path):
    config_path = tmp_path / "evidence.yaml"
    config_path.write_text("max_d: 1\n" + _rows_yaml(SYMMETRIC_ROWS))
    result = _invoke(runner, ["--config", str(config_path), "singleton-cdf", "--sequence", "AAAACCCGGT"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["max_d"] == 1
    assert payload["n_enumerated"] == 13
    assert payload["nlam"] == len(payload["table"]["p"])


def test_singleton_cdf_csv_output(runner, matrix_file, tmp_path):
    output = tmp_path / "table.csv"
    result = _invoke(
        runner,
        ["singleton-cdf", "--matrix", str(matrix_file), "--sequence", "ACGTACGT", "--max-d", "1", "--output", str(output)],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["table"] is None
    frame = pd.read_csv(output)
    assert list(frame.columns) == ["p", "cdf"]
    assert len(frame) == payload["nlam"]


def test_reference_required_exactly_once(runner, matrix_file):
    neither = _invoke(runner, ["singleton-cdf", "--matrix", str(matrix_file)])
    assert neither.exit_code == 2
    both = _invoke(runner, ["singleton-cdf", "--matrix", str(matrix_file), "--sequence", "ACGT", "--counts", "1", "1", "1", "1"])
    assert both.exit_code == 2


def test_missing_matrix(runner):
    result = _invoke(runner, ["singleton-cdf", "--counts", "1", "1", "1", "1"])
    assert result.exit_code == 2
    assert "No error matrix" in result.output


def test_malformed_matrix(runner, tmp_path):
    path = tmp_path / "small.yaml"
    path.write_text(_rows_yaml([[0.98, 0.01, 0.01]] * 3))
    result = _invoke(runner, ["singleton-cdf", "--matrix", str(path), "--counts", "1", "1", "1", "1"])
    assert result.exit_code == 1
    assert "DEV-INP" in result.output


def test_abundance_pvalue(runner):
    result = _invoke(runner, ["abundance-pvalue", "--reads", "2", "--expected", "1.0"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    expected = (1 - 2 * math.exp(-1)) / (1 - math.exp(-1))
    assert payload["pvalue"] == pytest.approx(expected)
    assert payload["backend"] == "scipy"


def test_abundance_pvalue_gamma_backend(runner):
    result = _invoke(runner, ["abundance-pvalue", "--reads", "2", "--expected", "1.0", "--backend", "gamma"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["backend"] == "gamma"
    assert payload["pvalue"] == pytest.approx((1 - 2 * math.exp(-1)) / (1 - math.exp(-1)))


def test_abundance_pvalue_unknown_backend(runner):
    result = _invoke(runner, ["abundance-pvalue", "--reads", "2", "--expected", "1.0", "--backend", "normal"])
    assert result.exit_code == 2


def test_singleton_pvalue(runner, matrix_file):
    above = _invoke(runner, ["singleton-pvalue", "--lam", "1.0", "--matrix", str(matrix_file), "--sequence", "ACGT", "--max-d", "1"])
    assert above.exit_code == 0, above.output
    assert json.loads(above.stdout)["pvalue"] == 1.0

    below = _invoke(runner, ["singleton-pvalue", "--lam", "0.0", "--matrix", str(matrix_file), "--sequence", "ACGT", "--max-d", "1"])
    assert below.exit_code == 0, below.output
    pvalue = json.loads(below.stdout)["pvalue"]
    assert 0.0 <= pvalue < 1.0


def test_config_not_found(runner, tmp_path):
    result = _invoke(runner, ["--config", str(tmp_path / "missing.yaml"), "abundance-pvalue", "--reads", "2", "--expected", "1"])
    assert result.exit_code == 1
    assert "Configuration file not found" in result.output
