"""Tests for the command-line interface."""

import logging
from pathlib import Path

import pytest

from citygraph import cli
from citygraph.logging import ROOT_LOGGER_NAME, reset_logging

TASKS = Path(__file__).resolve().parents[1] / "data" / "tasks.json"


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    reset_logging()


def test_no_arguments_prints_help(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 0
    assert "analyze" in capsys.readouterr().out


def test_analyze(capsys):
    cli.main(["analyze", str(TASKS)])
    out = capsys.readouterr().out

    assert "Source vertex: 4" in out
    assert "Number of SCCs: 6" in out
    assert "Full task sequence: [4, 5, 6, 7, 0, 1, 2, 3]" in out


def test_analyze_source_override(capsys):
    cli.main(["analyze", str(TASKS), "--source", "0"])
    assert "Condensation source component: 1" in capsys.readouterr().out


def test_analyze_bad_source():
    with pytest.raises(SystemExit) as exc:
        cli.main(["analyze", str(TASKS), "-s", "42"])
    assert exc.value.code == 1


def test_analyze_missing_file(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["analyze", str(tmp_path / "nope.json")])
    assert exc.value.code == 1


def test_generate_then_benchmark(tmp_path, capsys):
    cli.main(["--quiet", "generate", "-o", str(tmp_path / "data"), "--seed", "7"])
    out = capsys.readouterr().out
    assert "Total datasets created: 9" in out
    assert (tmp_path / "data" / "medium" / "medium2_dense_cycles.json").exists()

    report = tmp_path / "report.txt"
    cli.main(["benchmark", "-d", str(tmp_path / "data"), "-r", str(report)])
    out = capsys.readouterr().out
    assert "=== BENCHMARK SUMMARY ===" in out
    assert "Total datasets tested: 9" in out
    assert "large3_complex_scc.json" in report.read_text()


def test_benchmark_without_datasets(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["benchmark", "-d", str(tmp_path)])
    assert exc.value.code == 1


def test_verbose_enables_debug():
    cli.main(["--verbose", "analyze", str(TASKS)])
    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG


def test_unknown_command():
    with pytest.raises(SystemExit) as exc:
        cli.main(["explode"])
    assert exc.value.code == 2
