"""Tests for the typer CLI."""

import json

from typer.testing import CliRunner

from aicov_cli.main import app

runner = CliRunner()


def test_file_json(tmp_path, generated_source):
    target = tmp_path / "gen.py"
    target.write_text(generated_source)

    result = runner.invoke(app, ["file", str(target), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["aiPercentage"] == 100
    assert data["humanPercentage"] == 0


def test_file_missing_reports_error(tmp_path):
    result = runner.invoke(app, ["file", str(tmp_path / "missing.py"), "--json"])

    assert result.exit_code == 1
    assert "error" in json.loads(result.stdout)


def test_scan_json(tmp_path, generated_source, human_source):
    (tmp_path / "gen.py").write_text(generated_source)
    (tmp_path / "human.py").write_text(human_source)

    result = runner.invoke(app, ["scan", str(tmp_path), "--json", "--workers", "1"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["analyzedFiles"] == 2
    assert data["overallAiPercentage"] == 27


def test_scan_table(tmp_path, generated_source, human_source):
    (tmp_path / "gen.py").write_text(generated_source)
    (tmp_path / "human.py").write_text(human_source)

    result = runner.invoke(app, ["scan", str(tmp_path)])

    assert result.exit_code == 0
    assert "VERDICT" in result.stdout


def test_patterns_command(tmp_path, generated_source):
    target = tmp_path / "gen.py"
    target.write_text(generated_source)

    result = runner.invoke(app, ["patterns", str(target)])

    assert result.exit_code == 0
    assert "structure" in result.stdout


def test_scan_lists_human_files_and_folders(tmp_path, generated_source, human_source):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "gen.py").write_text(generated_source)
    (tmp_path / "human.py").write_text(human_source)

    result = runner.invoke(app, ["scan", str(tmp_path), "--workers", "1"])

    assert result.exit_code == 0
    assert "most human-written files" in result.stdout
    assert "Generated share by folder" in result.stdout
    assert "3 / 0" in result.stdout
    assert "0 / 8" in result.stdout
