"""Field definitions for output tables.

A FieldSpec describes one column: its name, its warehouse type tag and the
function that computes its value from an input record. A FieldMapping is the
ordered set of FieldSpecs that fully defines one table's shape.
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from rowsink.core.exceptions import SchemaError

T = TypeVar("T")

Extractor = Callable[[Any], Any]


@dataclass(frozen=True)
class FieldSpec(Generic[T]):
    """One output column and how to compute it."""
    name: str
    type: str  # Warehouse type tag, e.g. "STRING", "INTEGER"
    extract: Callable[[T], Any]
    mode: str = "NULLABLE"
    description: Optional[str] = None


# Accepted shapes for a single mapping entry: a FieldSpec or a (type, extract) pair
FieldEntry = Union[FieldSpec, tuple[str, Extractor]]


class FieldMapping(Generic[T]):
    """Ordered, immutable collection of FieldSpecs keyed by column name.

    Can be built from:
    - a dict of name -> (type, extract)
    - a dict of name -> FieldSpec
    - a sequence of FieldSpec

    Column order is insertion order.
    """

    def __init__(self, fields: Union[Mapping[str, FieldEntry], Sequence[FieldSpec], None] = None):
        specs: dict[str, FieldSpec] = {}

        if fields is None:
            pass
        elif isinstance(fields, Mapping):
            for name, entry in fields.items():
                specs[name] = _to_field_spec(name, entry)
        else:
            for spec in fields:
                if not isinstance(spec, FieldSpec):
                    raise SchemaError(
                        f"Expected FieldSpec, got {type(spec).__name__}"
                    )
                if spec.name in specs:
                    raise SchemaError(f"Duplicate field name: '{spec.name}'")
                specs[spec.name] = spec

        self._fields = MappingProxyType(specs)

    @classmethod
    def of(cls, fields: Union["FieldMapping", Mapping[str, FieldEntry], Sequence[FieldSpec], None]) -> "FieldMapping":
        """Return fields unchanged if already a FieldMapping, otherwise build one."""
        if isinstance(fields, FieldMapping):
            return fields
        return cls(fields)

    @property
    def names(self) -> list[str]:
        return list(self._fields)

    def __getitem__(self, name: str) -> FieldSpec:
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldMapping):
            return NotImplemented
        return list(self) == list(other)

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        cols = ", ".join(f"{f.name}:{f.type}" for f in self)
        return f"FieldMapping({cols})"

    def __reduce__(self):
        return (FieldMapping, (list(self),))


def _to_field_spec(name: str, entry: FieldEntry) -> FieldSpec:
    if isinstance(entry, FieldSpec):
        if entry.name != name:
            raise SchemaError(
                f"Field key '{name}' does not match FieldSpec name '{entry.name}'"
            )
        return entry

    if isinstance(entry, tuple) and len(entry) == 2:
        field_type, extract = entry
        if not callable(extract):
            raise SchemaError(f"Extractor for field '{name}' is not callable")
        return FieldSpec(name=name, type=field_type, extract=extract)

    raise SchemaError(
        f"Invalid entry for field '{name}'. "
        "Use a FieldSpec or a (type, extract) tuple."
    )
