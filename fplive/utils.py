"""Reading and validating upstream JSON payloads."""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .logging_config import get_logger

T = TypeVar('T', bound=BaseModel)
logger = get_logger('fplive.utils')


def parse_payload(data: Any, schema: type[T], source: str = 'payload') -> T:
    """
    Validate an already-decoded payload against a schema.

    Works for plain models and RootModel list payloads alike.

    Args:
        data: Decoded JSON (dict or list)
        schema: Pydantic model to validate against
        source: Label used in error messages (usually the file path)

    Returns:
        Validated model instance

    Raises:
        ValueError: If schema validation fails

    Example:
        from fplive.schemas import PicksFile
        picks = parse_payload(response_json, PicksFile, source='entry 123 picks')
    """
    try:
        validated = schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'Schema validation failed for {source}: {e.error_count()} errors')
        raise ValueError(f'Schema validation failed for {source}:\n{e}') from e
    logger.debug(f'{schema.__name__} validated for: {source}')
    return validated


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from fplive.schemas import LiveFile
        live = load_json('data/gw12/live.json', schema=LiveFile)
    """
    path = Path(path)

    if not path.is_file():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e
    logger.debug(f'Loaded JSON from: {path}')

    if schema is None:
        return data
    return parse_payload(data, schema, source=str(path))
