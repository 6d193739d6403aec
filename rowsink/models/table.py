"""Table-level models: destination address, schema descriptor, dispositions and rows."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# One output row: column name -> value, in column order
Row = dict[str, Any]


class CreateDisposition(str, Enum):
    """Whether the sink may create the destination table."""
    CREATE_IF_NEEDED = "CREATE_IF_NEEDED"  # Create from schema if absent
    CREATE_NEVER = "CREATE_NEVER"          # Fail if the table does not exist


class WriteDisposition(str, Enum):
    """How the sink treats rows already in the destination table."""
    WRITE_APPEND = "WRITE_APPEND"  # Add rows, never overwrite or delete
    WRITE_EMPTY = "WRITE_EMPTY"    # Fail unless the table is empty


@dataclass(frozen=True)
class Destination:
    """Three-part address of a warehouse table."""
    table_name: str
    dataset_id: str
    project_id: str

    @property
    def table_id(self) -> str:
        """Fully qualified ID in project.dataset.table form."""
        return f"{self.project_id}.{self.dataset_id}.{self.table_name}"

    @property
    def table_spec(self) -> str:
        """Legacy project:dataset.table form."""
        return f"{self.project_id}:{self.dataset_id}.{self.table_name}"

    def table_reference(self) -> dict[str, str]:
        """Table reference in BigQuery REST API shape."""
        return {
            "projectId": self.project_id,
            "datasetId": self.dataset_id,
            "tableId": self.table_name,
        }


class SchemaField(BaseModel):
    """One column of a table schema."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(description="Column name")
    field_type: str = Field(alias="type", description="Warehouse type tag, passed through verbatim")
    mode: str = Field(default="NULLABLE", description="NULLABLE, REQUIRED or REPEATED")
    description: str | None = Field(default=None, description="Column description")

    def to_api_repr(self) -> dict[str, Any]:
        result = {"name": self.name, "type": self.field_type, "mode": self.mode}
        if self.description:
            result["description"] = self.description
        return result


class TableSchema(BaseModel):
    """Ordered list of columns used to create the destination table."""

    model_config = ConfigDict(frozen=True)

    fields: tuple[SchemaField, ...] = Field(default=(), description="Columns in order")

    def columns(self) -> list[tuple[str, str]]:
        """Return (name, type) pairs in column order."""
        return [(f.name, f.field_type) for f in self.fields]

    def to_api_repr(self) -> dict[str, Any]:
        """Convert to the BigQuery REST API schema shape."""
        return {"fields": [f.to_api_repr() for f in self.fields]}


@dataclass(frozen=True)
class Done:
    """Completion token returned once rows have been handed to a sink."""
    pass
