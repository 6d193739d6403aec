"""Shared pytest fixtures for rowsink tests."""

import pytest
import tempfile
from dataclasses import dataclass
from pathlib import Path

from rowsink.models.field import FieldMapping
from rowsink.models.table import Destination


@dataclass
class TeamScore:
    """Typed record used across tests."""
    team: str
    score: int


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def destination():
    """Destination for the game stats example."""
    return Destination(table_name="scores", dataset_id="game_stats", project_id="my-project")


@pytest.fixture
def score_mapping():
    """Mapping for the game stats example."""
    return FieldMapping({
        "team": ("STRING", lambda r: r.team),
        "total_score": ("INTEGER", lambda r: r.score),
    })


@pytest.fixture
def sample_config_yaml():
    """Return valid config YAML for testing."""
    return """destination:
  project_id: my-project
  dataset_id: game_stats
  table: scores

sink:
  type: jsonl

fields:
  - name: team
    type: STRING
  - name: total_score
    type: INTEGER
    source: score
    mode: REQUIRED
"""


@pytest.fixture
def sample_config_file(temp_dir, sample_config_yaml):
    """Create a temporary config file."""
    config_file = temp_dir / "rowsink.yml"
    config_file.write_text(sample_config_yaml)
    return config_file


@pytest.fixture
def sample_records_file(temp_dir):
    """Create a JSONL file of score records."""
    records_file = temp_dir / "scores.jsonl"
    records_file.write_text(
        '{"team": "red", "score": 42}\n'
        '{"team": "blue", "score": 17}\n'
        '\n'
        '{"team": "green", "score": 8}\n'
    )
    return records_file
