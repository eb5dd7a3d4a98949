"""Utility functions for loading schema descriptions.

This module provides functions for loading JSON schema descriptions from
files with proper error handling and validation.
"""

import json
from pathlib import Path
from typing import Any

from .codegen.core.schema import Schema, SchemaError, convert_schema_dict
from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaLoaderError(Exception):
    """Custom exception for schema loading errors."""

    pass


def load_json_from_file(file_path: str | Path) -> Any:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Parsed JSON data.

    Raises:
        FileNotFoundError: If file doesn't exist.
        SchemaLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load JSON from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)
        # Don't raise, just warn - might still be valid JSON

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise SchemaLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e, exc_info=True)
        raise SchemaLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info("Successfully loaded JSON from %s", file_path)
    return data


def load_schema_file(file_path: str | Path) -> Schema:
    """Load and validate a schema description file.

    Args:
        file_path: Path to a JSON schema description.

    Returns:
        The validated Schema.

    Raises:
        FileNotFoundError: If file doesn't exist.
        SchemaLoaderError: If the file is unreadable or structurally invalid.
    """
    data = load_json_from_file(file_path)
    try:
        schema = convert_schema_dict(data)
    except SchemaError as e:
        logger.error("Invalid schema in %s: %s", file_path, e)
        raise SchemaLoaderError(f"Invalid schema in {file_path}: {e}") from e

    logger.debug(
        "Loaded %d supertypes and %d functions from %s",
        len(schema.supertypes),
        len(schema.functions),
        file_path,
    )
    return schema
