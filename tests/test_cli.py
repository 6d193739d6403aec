"""Tests for the rowsink CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from rowsink.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def jsonl_config_file(temp_dir):
    """Config that writes to a JSONL sink inside temp_dir."""
    config_file = temp_dir / "rowsink.yml"
    config_file.write_text(f"""destination:
  project_id: my-project
  dataset_id: game_stats
  table: scores

sink:
  type: jsonl
  path: {temp_dir / "out"}

fields:
  - name: team
    type: STRING
  - name: total_score
    type: INTEGER
    source: score
""")
    return config_file


class TestInit:
    """Tests for the init command."""

    def test_creates_project_files(self, runner, temp_dir):
        with runner.isolated_filesystem(temp_dir=temp_dir):
            result = runner.invoke(cli, ["init"])

            assert result.exit_code == 0
            assert Path("rowsink.yml").exists()
            assert Path("inputs/example.jsonl").exists()
            assert "Created rowsink.yml" in result.output

    def test_does_not_overwrite(self, runner, temp_dir):
        with runner.isolated_filesystem(temp_dir=temp_dir):
            Path("rowsink.yml").write_text("custom: true\n")

            result = runner.invoke(cli, ["init"])

            assert "rowsink.yml already exists." in result.output
            assert Path("rowsink.yml").read_text() == "custom: true\n"


class TestSchema:
    """Tests for the schema command."""

    def test_prints_schema(self, runner, sample_config_file):
        result = runner.invoke(cli, ["schema", "--config", str(sample_config_file)])

        assert result.exit_code == 0
        assert "Table: my-project.game_stats.scores" in result.output
        payload = result.output.split("\n", 1)[1]
        assert json.loads(payload) == {
            "fields": [
                {"name": "team", "type": "STRING", "mode": "NULLABLE"},
                {"name": "total_score", "type": "INTEGER", "mode": "REQUIRED"},
            ]
        }

    def test_missing_config(self, runner, temp_dir):
        result = runner.invoke(cli, ["schema", "--config", str(temp_dir / "missing.yml")])

        assert result.exit_code != 0
        assert "Configuration file not found" in result.output


class TestLoad:
    """Tests for the load command."""

    def test_dry_run_prints_rows(self, runner, sample_config_file, sample_records_file):
        result = runner.invoke(cli, [
            "load", str(sample_records_file), "--config", str(sample_config_file), "--dry-run",
        ])

        assert result.exit_code == 0
        rows = [json.loads(line) for line in result.output.strip().splitlines()]
        assert rows == [
            {"team": "red", "total_score": 42},
            {"team": "blue", "total_score": 17},
            {"team": "green", "total_score": 8},
        ]

    def test_limit(self, runner, sample_config_file, sample_records_file):
        result = runner.invoke(cli, [
            "load", str(sample_records_file), "--config", str(sample_config_file),
            "--dry-run", "--limit", "1",
        ])

        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 1

    def test_writes_to_jsonl_sink(self, runner, temp_dir, jsonl_config_file, sample_records_file):
        result = runner.invoke(cli, [
            "load", str(sample_records_file), "--config", str(jsonl_config_file),
        ])

        assert result.exit_code == 0, result.output
        table_file = temp_dir / "out" / "my-project" / "game_stats" / "scores.jsonl"
        lines = table_file.read_text().splitlines()
        assert [json.loads(line)["team"] for line in lines] == ["red", "blue", "green"]

    def test_projection_error_names_field(self, runner, temp_dir, jsonl_config_file):
        records = temp_dir / "bad.jsonl"
        records.write_text('{"team": "red"}\n')

        result = runner.invoke(cli, [
            "load", str(records), "--config", str(jsonl_config_file),
        ])

        assert result.exit_code != 0
        assert "total_score" in result.output

    def test_unknown_sink(self, runner, sample_config_file, sample_records_file):
        result = runner.invoke(cli, [
            "load", str(sample_records_file), "--config", str(sample_config_file),
            "--sink", "kafka",
        ])

        assert result.exit_code != 0
        assert "Unknown sink type" in result.output

    def test_invalid_json_line(self, runner, temp_dir, sample_config_file):
        records = temp_dir / "broken.jsonl"
        records.write_text('{"team": "red", "score": 1}\nnot json\n')

        result = runner.invoke(cli, [
            "load", str(records), "--config", str(sample_config_file), "--dry-run",
        ])

        assert result.exit_code != 0
        assert "line 2" in result.output
