"""Row projection: turn typed records into warehouse table rows.

A RowProjector holds a destination and a field mapping. From the mapping it
derives the table schema once, and for each record it builds a fresh row by
calling every field's extractor in column order. Writing is delegated to a
sink, which owns batching, retries and the network.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Callable, Generic, Optional, TypeVar

from rowsink.core.exceptions import ProjectionError
from rowsink.models.field import FieldMapping
from rowsink.models.table import (
    CreateDisposition,
    Destination,
    Done,
    Row,
    SchemaField,
    TableSchema,
    WriteDisposition,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def derive_schema(mapping: Any) -> TableSchema:
    """Build the table schema from a field mapping.

    One column per field, in mapping order, with name and type copied
    verbatim. Type tags are not interpreted.
    """
    mapping = FieldMapping.of(mapping)
    return TableSchema(
        fields=tuple(
            SchemaField(
                name=spec.name,
                type=spec.type,
                mode=spec.mode,
                description=spec.description,
            )
            for spec in mapping
        )
    )


def project_record(
    record: T,
    mapping: Any,
    record_key: Optional[Callable[[T], Any]] = None,
) -> Row:
    """Build one row from a record by applying each field's extractor.

    Raises:
        ProjectionError: If an extractor fails. The error names the field and,
            when record_key is given, the record it failed on.
    """
    row: Row = {}
    for spec in FieldMapping.of(mapping):
        try:
            row[spec.name] = spec.extract(record)
        except Exception as e:
            record_id = _record_id(record, record_key)
            where = f" (record {record_id!r})" if record_id is not None else ""
            raise ProjectionError(
                f"Failed to extract field '{spec.name}'{where}: {e}",
                field_name=spec.name,
                record_id=record_id,
                original_error=e,
            ) from e
    return row


def _record_id(record: Any, record_key: Optional[Callable[[Any], Any]]) -> Any:
    if record_key is None:
        return None
    try:
        return record_key(record)
    except Exception:
        # Identity is best effort; the original extraction error is what matters
        logger.debug("record_key failed while reporting a projection error", exc_info=True)
        return None


class RowProjector(Generic[T]):
    """Projects records into rows of one destination table and hands them to a sink.

    The projector is immutable configuration: it can be shared across threads
    and, when its extractors are picklable, sent to worker processes.

    Args:
        destination: Table the rows are written to
        mapping: FieldMapping, dict of name -> (type, extract), or list of FieldSpec
        sink: Default sink used by run()
        record_key: Optional callable returning a record identity for error messages
    """

    def __init__(
        self,
        destination: Destination,
        mapping: Any,
        sink: Any = None,
        record_key: Optional[Callable[[T], Any]] = None,
    ):
        self._destination = destination
        self._mapping = FieldMapping.of(mapping)
        self._schema = derive_schema(self._mapping)
        self._sink = sink
        self._record_key = record_key

    @property
    def destination(self) -> Destination:
        return self._destination

    @property
    def mapping(self) -> FieldMapping:
        return self._mapping

    @property
    def schema(self) -> TableSchema:
        return self._schema

    def project(self, record: T) -> Row:
        """Build the row for a single record."""
        return project_record(record, self._mapping, self._record_key)

    __call__ = project

    def rows(self, records: Iterable[T]) -> Iterator[Row]:
        """Lazily project records, preserving input order."""
        for record in records:
            yield self.project(record)

    def run(self, records: Iterable[T], sink: Any = None) -> Done:
        """Project records and hand the rows to a sink.

        The table is created if it does not exist and rows are only ever
        appended. Sink errors propagate unchanged.

        Returns:
            Done: completion token; the sink does not report per-batch results.
        """
        sink = sink if sink is not None else self._sink
        if sink is None:
            raise ValueError("RowProjector.run() requires a sink")

        logger.info(
            f"Writing rows to {self._destination.table_id} "
            f"({len(self._schema.fields)} columns)"
        )
        with sink:
            written = sink.write(
                self.rows(records),
                self._schema,
                self._destination,
                CreateDisposition.CREATE_IF_NEEDED,
                WriteDisposition.WRITE_APPEND,
            )
        logger.info(f"Handed {written} rows to sink for {self._destination.table_id}")
        return Done()

    def __repr__(self) -> str:
        return f"RowProjector({self._destination.table_id}, {self._mapping!r})"
