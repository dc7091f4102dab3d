"""CLI tests using click's CliRunner."""

import json

import pytest
from click.testing import CliRunner

from singcoach import __version__
from singcoach.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("feedback", "performance", "report"):
        assert command in result.output


def test_feedback_writes_json(runner, attempt_file, tmp_path):
    out = tmp_path / "feedback.json"
    result = runner.invoke(cli, ["feedback", str(attempt_file), "-o", str(out)])

    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text())
    assert data["wordAccuracyPct"] == 100
    assert len(data["perWord"]) == 9


def test_performance_mode_override(runner, attempt_data, tmp_path):
    signals = tmp_path / "signals.json"
    signals.write_text(json.dumps(attempt_data["performance"]))
    out = tmp_path / "performance.json"

    result = runner.invoke(
        cli, ["performance", str(signals), "--mode", "pitch", "-o", str(out)]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text())
    assert data["pitch"] == 100
    assert data["label"] == "Pitch Accuracy"


def test_report_writes_both_sections(runner, attempt_file, tmp_path):
    out = tmp_path / "report.json"
    result = runner.invoke(cli, ["--verbose", "report", str(attempt_file), "-o", str(out)])

    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text())
    assert set(data) == {"feedback", "performance", "offset"}
    assert data["performance"]["words"] == data["feedback"]["subscores"]["wordAccuracy"]


def test_invalid_attempt_exits_with_error(runner, tmp_path, attempt_data):
    attempt_data["verseEndSec"] = -1.0
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(attempt_data))

    result = runner.invoke(cli, ["feedback", str(path)])
    assert result.exit_code == 1


def test_malformed_json_exits_with_error(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{")
    result = runner.invoke(cli, ["report", str(path)])
    assert result.exit_code == 1


def test_log_file_option(runner, attempt_file, tmp_path):
    log_file = tmp_path / "run.log"
    out = tmp_path / "report.json"
    result = runner.invoke(
        cli, ["--log-file", str(log_file), "report", str(attempt_file), "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "Attempt scored" in log_file.read_text()
