import yaml
import os
import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from rowsink.core.exceptions import ConfigError
from rowsink.core.extractors import PathExtractor
from rowsink.core.projector import RowProjector
from rowsink.models.field import FieldMapping, FieldSpec
from rowsink.models.table import Destination

DEFAULT_CONFIG_PATH = "rowsink.yml"
DEFAULT_SINK = "bigquery"
VALID_MODES = {"NULLABLE", "REQUIRED", "REPEATED"}


def _substitute_env_vars(value: Any) -> Any:
    """Substitute ${VAR} patterns with environment variables."""
    if isinstance(value, str):
        pattern = r'\$\{([^}]+)\}'
        matches = re.findall(pattern, value)
        for var_name in matches:
            env_value = os.environ.get(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


@dataclass
class SinkConfig:
    """Configuration for a sink connector."""
    type: str  # Connector type: "bigquery", "jsonl"
    config: Dict[str, Any] = field(default_factory=dict)  # Connector-specific config


@dataclass
class FieldConfig:
    """Configuration for one output column.

    `source` is a dotted path into the input record; it defaults to the
    column name.
    """
    name: str
    type: str
    source: Optional[str] = None
    mode: str = "NULLABLE"
    description: Optional[str] = None

    @property
    def source_path(self) -> str:
        return self.source or self.name

    def to_field_spec(self) -> FieldSpec:
        return FieldSpec(
            name=self.name,
            type=self.type,
            extract=PathExtractor(self.source_path),
            mode=self.mode,
            description=self.description,
        )


@dataclass
class Config:
    """Main configuration object: one destination table, its fields and a sink."""
    destination: Destination
    fields: list[FieldConfig]
    sink: SinkConfig = field(default_factory=lambda: SinkConfig(type=DEFAULT_SINK))

    def build_mapping(self) -> FieldMapping:
        """Build the field mapping with path extractors."""
        return FieldMapping([f.to_field_spec() for f in self.fields])

    def build_projector(self, sink: Any = None) -> RowProjector:
        return RowProjector(self.destination, self.build_mapping(), sink=sink)


DEFAULT_CONFIG = """# rowsink Configuration
# Each field is a table column; 'source' is a dotted path into the input record.

destination:
  project_id: ${GCP_PROJECT}
  dataset_id: game_stats
  table: scores

sink:
  type: bigquery
  batch_size: 500

fields:
  - name: team
    type: STRING
  - name: total_score
    type: INTEGER
    source: score
"""


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """Loads configuration from a YAML file.

    Args:
        path: Path to the config file

    Returns:
        Parsed Config object

    Raises:
        ConfigError: If config file is missing, invalid YAML, or missing required fields
    """
    if not os.path.exists(path):
        raise ConfigError(
            f"Configuration file not found: {path}\n"
            f"Run 'rowsink init' to create a new project."
        )

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}:\n{e}"
        )

    if data is None:
        raise ConfigError(f"Config file {path} is empty.")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping.")

    data = _substitute_env_vars(data)

    return Config(
        destination=_parse_destination(data.get("destination")),
        fields=_parse_fields(data.get("fields")),
        sink=_parse_sink(data.get("sink")),
    )


def _parse_destination(data: Optional[dict]) -> Destination:
    """Parse the destination table address."""
    if not isinstance(data, dict):
        raise ConfigError(
            "Missing destination configuration.\n\n"
            "destination:\n"
            "  project_id: my-project\n"
            "  dataset_id: my_dataset\n"
            "  table: my_table"
        )

    # 'table_name' and 'table_id' are accepted as aliases of 'table'
    table = data.get("table") or data.get("table_name") or data.get("table_id")
    values = {
        "project_id": data.get("project_id"),
        "dataset_id": data.get("dataset_id"),
        "table": table,
    }
    missing = [k for k, v in values.items() if not v]
    if missing:
        raise ConfigError(
            f"Missing required destination field(s): {', '.join(missing)}"
        )

    return Destination(
        table_name=str(table),
        dataset_id=str(values["dataset_id"]),
        project_id=str(values["project_id"]),
    )


def _parse_sink(data: Optional[dict]) -> SinkConfig:
    """Parse the sink connector config."""
    if data is None:
        return SinkConfig(type=DEFAULT_SINK)

    if not isinstance(data, dict):
        raise ConfigError("Sink config must be a dictionary.")

    sink_type = data.get("type")
    if not sink_type:
        raise ConfigError("Sink config requires 'type' field.")

    # Everything except 'type' goes into config
    config = {k: v for k, v in data.items() if k != "type"}
    return SinkConfig(type=sink_type, config=config)


def _parse_fields(data: Any) -> list[FieldConfig]:
    """Parse field definitions.

    Supports a list of field objects, or a dict of name -> type / options.
    """
    if data is None:
        raise ConfigError(
            "Missing 'fields' section.\n\n"
            "fields:\n"
            "  - name: team\n"
            "    type: STRING"
        )

    if isinstance(data, dict):
        items = []
        for name, value in data.items():
            if isinstance(value, str):
                items.append({"name": name, "type": value})
            elif isinstance(value, dict):
                items.append({"name": name, **value})
            else:
                raise ConfigError(f"Invalid definition for field '{name}'.")
        data = items

    if not isinstance(data, list):
        raise ConfigError("'fields' must be a list or a mapping.")

    fields = []
    seen = set()
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigError(
                f"Invalid field entry at index {i}. "
                "Must be an object with 'name' and 'type'."
            )
        name = item.get("name")
        field_type = item.get("type")
        if not name or not field_type:
            raise ConfigError(f"Field at index {i} requires 'name' and 'type'.")
        if name in seen:
            raise ConfigError(f"Duplicate field name '{name}' in fields[{i}].")
        seen.add(name)

        mode = str(item.get("mode", "NULLABLE")).upper()
        if mode not in VALID_MODES:
            valid = ", ".join(sorted(VALID_MODES))
            raise ConfigError(
                f"Invalid mode '{mode}' for field '{name}'. Valid options: {valid}"
            )

        fields.append(FieldConfig(
            name=str(name),
            type=str(field_type),
            source=item.get("source"),
            mode=mode,
            description=item.get("description"),
        ))

    return fields
