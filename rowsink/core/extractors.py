"""Field extractors built from configuration.

Extractors declared in YAML need to be plain, picklable objects so a
projector can be shipped to worker processes. PathExtractor walks a dotted
path through dict keys, object attributes and sequence indexes.
"""

from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()


class PathExtractor:
    """Callable that reads a value from a record by dotted path.

    Examples:
        PathExtractor("team")(record)          -> record["team"] or record.team
        PathExtractor("player.stats.0")(rec)   -> rec["player"]["stats"][0]
    """

    def __init__(self, path: str, default: Any = _MISSING):
        if not path:
            raise ValueError("PathExtractor requires a non-empty path")
        self.path = path
        self.parts = tuple(path.split("."))
        self.default = default

    def __call__(self, record: Any) -> Any:
        value = record
        for part in self.parts:
            try:
                value = _step(value, part)
            except (KeyError, AttributeError, IndexError):
                if self.default is not _MISSING:
                    return self.default
                raise
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathExtractor):
            return NotImplemented
        return self.path == other.path and self.default == other.default

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"PathExtractor({self.path!r})"

    def __reduce__(self):
        if self.default is _MISSING:
            return (PathExtractor, (self.path,))
        return (PathExtractor, (self.path, self.default))


def _step(value: Any, part: str) -> Any:
    if isinstance(value, Mapping):
        return value[part]
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and _is_index(part):
        return value[int(part)]
    return getattr(value, part)


def _is_index(part: str) -> bool:
    return part.lstrip("-").isdigit()


def field_getter(path: str, default: Any = _MISSING) -> PathExtractor:
    """Shorthand for PathExtractor."""
    return PathExtractor(path, default)
