"""Shared row helpers for sinks.

Sinks that send rows as JSON (BigQuery streaming inserts, JSONL files) use
these to normalise Python values and to split row streams into batches.
"""

import base64
import math
from collections.abc import Iterable, Iterator
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from itertools import islice
from typing import Any

from rowsink.models.table import Row


def to_json_value(value: Any) -> Any:
    """Convert a scalar or container to a JSON-serializable value."""
    # NaN and infinities have no JSON form
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    # datetime is a subclass of date, both have isoformat
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return to_json_value(value.value)
    if isinstance(value, (bytes, bytearray)):
        # BigQuery expects BYTES columns base64-encoded
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, dict):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_value(v) for v in value]
    return str(value)


def to_json_row(row: Row) -> dict[str, Any]:
    """Normalise every value in a row for JSON output."""
    return {name: to_json_value(value) for name, value in row.items()}


def batched(rows: Iterable[Row], size: int) -> Iterator[list[Row]]:
    """Yield lists of at most size rows, preserving order."""
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    iterator = iter(rows)
    while True:
        batch = list(islice(iterator, size))
        if not batch:
            return
        yield batch
