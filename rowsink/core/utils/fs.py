import json
import os
import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)

def ensure_directory(path: str) -> bool:
    """Creates a directory if it doesn't exist."""
    if not os.path.exists(path):
        os.makedirs(path)
        logger.info(f"Created directory: {path}")
        return True
    return False

def create_file_if_missing(path: str, content: str) -> bool:
    """Creates a file with content if it doesn't already exist."""
    if not os.path.exists(path):
        with open(path, 'w') as f:
            f.write(content)
        logger.info(f"Created file: {path}")
        return True
    return False

def iter_jsonl(path: str) -> Iterator[dict[str, Any]]:
    """Yield one record per non-blank line of a JSONL file.

    Raises:
        ValueError: If a line is not valid JSON, naming the line number.
    """
    with open(path, 'r') as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON on line {line_no} of {path}: {e}") from e
