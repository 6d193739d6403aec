"""Connector framework for output sinks."""

from collections.abc import Iterable
from typing import Protocol, Any, runtime_checkable

from rowsink.models.table import (
    CreateDisposition,
    Destination,
    Row,
    TableSchema,
    WriteDisposition,
)


@runtime_checkable
class Sink(Protocol):
    """Protocol for bulk-write sinks."""

    def connect(self) -> None:
        """Establish connection (auth, etc.)."""
        ...

    def write(
        self,
        rows: Iterable[Row],
        schema: TableSchema,
        destination: Destination,
        create_disposition: CreateDisposition,
        write_disposition: WriteDisposition,
    ) -> int:
        """Write rows to the destination table. Returns the number of rows written."""
        ...

    def close(self) -> None:
        """Clean up resources."""
        ...

    def __enter__(self) -> "Sink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class SinkRegistry:
    """Registry for sink connectors."""

    def __init__(self):
        self._sinks: dict[str, type] = {}

    def register(self, type_name: str, connector_class: type) -> None:
        """Register a sink connector class."""
        self._sinks[type_name] = connector_class

    def get(self, type_name: str) -> type:
        """Get a sink connector class by type name."""
        if type_name not in self._sinks:
            available = ", ".join(self._sinks.keys()) or "none"
            raise ValueError(
                f"Unknown sink type: '{type_name}'. Available: {available}"
            )
        return self._sinks[type_name]

    def create(self, type_name: str, config: dict[str, Any]) -> Sink:
        """Create and return a sink connector instance."""
        connector_class = self.get(type_name)
        return connector_class(config)

    @property
    def available(self) -> list[str]:
        return list(self._sinks)


# Global registry
_sink_registry = SinkRegistry()


def register_sink(type_name: str, connector_class: type) -> None:
    """Register a sink connector with the global registry."""
    _sink_registry.register(type_name, connector_class)


def get_sink(type_name: str, config: dict[str, Any]) -> Sink:
    """Get a sink connector instance from the global registry."""
    return _sink_registry.create(type_name, config)


def available_sinks() -> list[str]:
    return _sink_registry.available
