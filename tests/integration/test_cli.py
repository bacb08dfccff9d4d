"""
Integration tests for the latex_table.py command-line interface.
"""

import importlib.util
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from typer.testing import CliRunner

SCRIPT_PATH = Path(__file__).parents[2] / "scripts" / "latex_table.py"

spec = importlib.util.spec_from_file_location("latex_table_cli", SCRIPT_PATH)
cli = importlib.util.module_from_spec(spec)
spec.loader.exec_module(cli)

runner = CliRunner()


@pytest.fixture
def npy_file(tmp_path):
    path = tmp_path / "data.npy"
    np.save(path, np.array([[1.0, 2.0], [3.0, 4.0]]))
    return path


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "results.csv"
    pd.DataFrame({"mean": [0.5, 1.25], "sd": [0.1, 0.2]}, index=["ctrl", "treat"]).to_csv(path)
    return path


@pytest.mark.integration
def test_table_from_npy(npy_file):
    result = runner.invoke(cli.app, ["table", str(npy_file), "-f", "fixedPoint", "-p", "0"])

    assert result.exit_code == 0, result.output
    assert r"\begin{tabular}{c|c}" in result.output
    assert r"1 & 2 \\" in result.output


@pytest.mark.integration
def test_table_from_csv_with_index(csv_file):
    result = runner.invoke(
        cli.app, ["table", str(csv_file), "--index-col", "0", "--preset", "style_booktabs", "-p", "2", "-f", "fixedPoint"]
    )

    assert result.exit_code == 0, result.output
    assert r"\toprule" in result.output
    assert r" & mean & sd \\" in result.output
    assert r"ctrl & 0.50 & 0.10 \\" in result.output


@pytest.mark.integration
def test_options_override_presets(npy_file):
    result = runner.invoke(cli.app, ["table", str(npy_file), "--preset", "borders_all", "-b", "none"])

    assert result.exit_code == 0, result.output
    assert r"\begin{tabular}{cc}" in result.output


@pytest.mark.integration
def test_bmatrix_to_file(npy_file, tmp_path):
    output = tmp_path / "out" / "matrix.tex"
    result = runner.invoke(cli.app, ["bmatrix", str(npy_file), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8").startswith(r"$$\begin{bmatrix}")


@pytest.mark.integration
def test_invalid_option_value(npy_file):
    result = runner.invoke(cli.app, ["table", str(npy_file), "-b", "double"])

    assert result.exit_code == 1
    assert "borders" in result.output


@pytest.mark.integration
def test_unknown_preset(npy_file):
    result = runner.invoke(cli.app, ["table", str(npy_file), "--preset", "style_fancy"])

    assert result.exit_code == 1
    assert "style_fancy" in result.output


@pytest.mark.integration
def test_unsupported_input(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("1 2\n")
    result = runner.invoke(cli.app, ["table", str(path)])

    assert result.exit_code != 0


@pytest.mark.integration
def test_presets_listing():
    result = runner.invoke(cli.app, ["presets", "numbers"])

    assert result.exit_code == 0
    assert "numbers_fixed2" in result.output
    assert "style_booktabs" not in result.output
