"""JSONL file sink connector."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rowsink.connectors.sinks.rows import to_json_row
from rowsink.core.exceptions import SinkWriteError
from rowsink.models.table import (
    CreateDisposition,
    Destination,
    Row,
    TableSchema,
    WriteDisposition,
)

logger = logging.getLogger(__name__)


class JSONLSink:
    """Sink connector for local JSONL files.

    Each table is a file at <path>/<project>/<dataset>/<table>.jsonl, with
    its schema stored next to it in <table>.schema.json. Rows are only ever
    appended.
    """

    def __init__(self, config: dict[str, Any]):
        """Initialize JSONL sink.

        Config:
            path: Base output directory (default: outputs)
        """
        self.base_path = Path(config.get("path") or "outputs")
        self._connected = False

    def connect(self) -> None:
        """Ensure the base directory exists."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._connected = True

    def table_path(self, destination: Destination) -> Path:
        return (
            self.base_path
            / destination.project_id
            / destination.dataset_id
            / f"{destination.table_name}.jsonl"
        )

    def schema_path(self, destination: Destination) -> Path:
        return self.table_path(destination).with_suffix(".schema.json")

    def write(
        self,
        rows: Iterable[Row],
        schema: TableSchema,
        destination: Destination,
        create_disposition: CreateDisposition,
        write_disposition: WriteDisposition,
    ) -> int:
        """Append rows to the table file."""
        if not self._connected:
            raise RuntimeError("Sink not connected. Call connect() first.")

        path = self.table_path(destination)

        if not path.exists():
            if create_disposition == CreateDisposition.CREATE_NEVER:
                raise SinkWriteError(
                    f"Table {destination.table_id} does not exist: {path}",
                    table=destination.table_id,
                )
            self._create_table(schema, destination)
        elif write_disposition == WriteDisposition.WRITE_EMPTY and path.stat().st_size > 0:
            raise SinkWriteError(
                f"Table {destination.table_id} is not empty: {path}",
                table=destination.table_id,
            )

        written = 0
        with open(path, "a") as f:
            for row in rows:
                f.write(json.dumps(to_json_row(row), allow_nan=False) + "\n")
                written += 1

        logger.debug(f"Appended {written} rows to {path}")
        return written

    def _create_table(self, schema: TableSchema, destination: Destination) -> None:
        path = self.table_path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        with open(self.schema_path(destination), "w") as f:
            json.dump(schema.to_api_repr(), f, indent=2)
        logger.info(f"Created table {destination.table_id} at {path}")

    def close(self) -> None:
        self._connected = False

    def __enter__(self) -> "JSONLSink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
