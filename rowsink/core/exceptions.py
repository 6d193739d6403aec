"""Custom exceptions for rowsink."""

from typing import Any


class RowSinkError(Exception):
    """Base exception for all rowsink errors."""
    pass


class ConfigError(RowSinkError):
    """Configuration-related errors."""
    pass


class SchemaError(RowSinkError):
    """Field mapping or table schema is invalid."""
    pass


class ProjectionError(RowSinkError):
    """An extraction function failed while building a row."""

    def __init__(
        self,
        message: str,
        field_name: str,
        record_id: Any = None,
        original_error: Exception | None = None,
    ):
        self.field_name = field_name
        self.record_id = record_id
        self.original_error = original_error
        super().__init__(message)

    def __reduce__(self):
        return (
            self.__class__,
            (str(self), self.field_name, self.record_id, self.original_error),
        )


class SinkError(RowSinkError):
    """Sink connection or configuration errors."""
    pass


class SinkWriteError(SinkError):
    """Rows could not be written to the destination table."""

    def __init__(self, message: str, table: str, errors: list | None = None):
        self.table = table
        self.errors = errors or []
        super().__init__(message)

    def __reduce__(self):
        return (self.__class__, (str(self), self.table, self.errors))
