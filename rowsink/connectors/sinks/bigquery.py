"""BigQuery sink connector."""

import logging
from collections.abc import Iterable
from typing import Any

from google.cloud import bigquery
from google.cloud.exceptions import NotFound
from google.oauth2 import service_account

from rowsink.connectors.sinks.rows import batched, to_json_row
from rowsink.core.exceptions import SinkWriteError
from rowsink.models.table import (
    CreateDisposition,
    Destination,
    Row,
    TableSchema,
    WriteDisposition,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


class BigQuerySink:
    """Sink connector for Google BigQuery.

    Streams rows into a table with insert_rows_json, creating the table from
    the derived schema when allowed. Retries are left to the client library.

    Config:
        project_id: Project billed for the client (optional, defaults to the
            destination table's project)
        credentials_file: Path to service account JSON (optional)
        location: Location for created tables and jobs (optional)
        batch_size: Rows per streaming insert request (default: 500)
    """

    def __init__(self, config: dict[str, Any]):
        self.project_id = config.get("project_id")
        self.credentials_file = config.get("credentials_file")
        self.location = config.get("location")
        self.batch_size = int(config.get("batch_size", DEFAULT_BATCH_SIZE))

        if self.batch_size < 1:
            raise ValueError("BigQuerySink 'batch_size' must be at least 1")

        self._client = None
        self._connected = False

    def connect(self) -> None:
        """Connect to BigQuery.

        Without a configured project_id the client is created on the first
        write, for the destination table's project.
        """
        self._connected = True
        if self.project_id:
            self._client = self._create_client(self.project_id)

    def _create_client(self, project_id: str) -> bigquery.Client:
        if self.credentials_file:
            creds = service_account.Credentials.from_service_account_file(self.credentials_file)
            client = bigquery.Client(
                project=project_id, credentials=creds, location=self.location
            )
        else:
            client = bigquery.Client(project=project_id, location=self.location)

        logger.info(f"Connected to BigQuery (project: {project_id})")
        return client

    def write(
        self,
        rows: Iterable[Row],
        schema: TableSchema,
        destination: Destination,
        create_disposition: CreateDisposition,
        write_disposition: WriteDisposition,
    ) -> int:
        """Stream rows into the destination table."""
        if not self._connected:
            raise RuntimeError("Not connected")
        if self._client is None:
            self._client = self._create_client(destination.project_id)

        table = self._get_table(schema, destination, create_disposition)

        if write_disposition == WriteDisposition.WRITE_EMPTY and table.num_rows:
            raise SinkWriteError(
                f"Table {destination.table_id} is not empty ({table.num_rows} rows)",
                table=destination.table_id,
            )

        written = 0
        for batch in batched(rows, self.batch_size):
            self._insert(table, destination, batch)
            written += len(batch)

        return written

    def _get_table(
        self,
        schema: TableSchema,
        destination: Destination,
        create_disposition: CreateDisposition,
    ) -> bigquery.Table:
        """Fetch the destination table, creating it if allowed."""
        try:
            return self._client.get_table(destination.table_id)
        except NotFound:
            if create_disposition == CreateDisposition.CREATE_NEVER:
                raise

        table = bigquery.Table(destination.table_id, schema=to_bigquery_schema(schema))
        # exists_ok covers another worker creating the table first
        table = self._client.create_table(table, exists_ok=True)
        logger.info(f"Created table {destination.table_id} with {len(schema.fields)} columns")
        return table

    def _insert(self, table: bigquery.Table, destination: Destination, batch: list[Row]) -> None:
        logger.debug(f"Inserting {len(batch)} rows into {destination.table_id}")
        errors = self._client.insert_rows_json(
            table,
            [to_json_row(row) for row in batch],
            retry=bigquery.DEFAULT_RETRY,
        )
        if errors:
            raise SinkWriteError(
                f"BigQuery insert failed for {len(errors)}/{len(batch)} rows: {errors}",
                table=destination.table_id,
                errors=errors,
            )

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._connected = False

    def __enter__(self) -> "BigQuerySink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def to_bigquery_schema(schema: TableSchema) -> list[bigquery.SchemaField]:
    """Convert a TableSchema to BigQuery client SchemaFields."""
    return [
        bigquery.SchemaField(
            f.name,
            f.field_type,
            mode=f.mode,
            description=f.description,
        )
        for f in schema.fields
    ]
