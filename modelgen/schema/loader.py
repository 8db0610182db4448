"""Reading model sources and profiles from YAML or JSON."""

import json
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .errors import SchemaLoadError, SchemaValidationError
from .models import ModelSource

T = TypeVar("T", bound=BaseModel)

JSON_SUFFIXES = {".json"}


def _decode(text: str, is_json: bool, origin: str | None) -> dict[str, Any]:
    """Decode source text into a mapping (empty text gives ``{}``)."""
    try:
        data = json.loads(text) if is_json else yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON: {e}", origin) from e
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML: {e}", origin) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        where = f" in {origin}" if origin else ""
        raise SchemaLoadError(
            f"Expected mapping at root{where}, got {type(data).__name__}", origin
        )
    return data


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML file, or a JSON file by its ``.json`` suffix.

    Args:
        path: Path to the file.

    Returns:
        The top-level mapping.

    Raises:
        SchemaLoadError: If the file is missing, unreadable or not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise SchemaLoadError(f"File not found: {path}", str(path))
    if not path.is_file():
        raise SchemaLoadError(f"Not a file: {path}", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaLoadError(f"Cannot read file: {e}", str(path)) from e

    return _decode(text, path.suffix.lower() in JSON_SUFFIXES, str(path))


def parse_data(data: dict, schema: type[T]) -> T:
    """Validate a raw mapping against a pydantic schema.

    Raises:
        SchemaValidationError: With one ``{loc, msg, type}`` entry per problem.
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(part) for part in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise SchemaValidationError(
            f"{schema.__name__} is invalid ({len(errors)} error(s))", errors
        ) from e


def parse_model(path: str | Path) -> ModelSource:
    """Load a model file into a ModelSource.

    Raises:
        SchemaLoadError: If the file cannot be read or decoded.
        SchemaValidationError: If the data fails validation.
    """
    return parse_data(load_yaml(path), ModelSource)


def parse_model_from_string(text: str) -> ModelSource:
    """Parse model text into a ModelSource.

    YAML is a superset of JSON, so both notations are accepted.

    Raises:
        SchemaLoadError: If the text cannot be decoded.
        SchemaValidationError: If the data fails validation.
    """
    return parse_data(_decode(text, False, None), ModelSource)
