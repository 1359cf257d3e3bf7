"""
Schema validation for tracker documents.

Every persisted document (component state, milestone state, activity log
entries, tracker.yaml) is checked against a JSON Schema bundled with the
package. Invalid data is never written.
"""

import json
from pathlib import Path

import jsonschema


class ValidationError(Exception):
    """Schema validation failed."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


# Cache loaded schemas
_schema_cache: dict[str, dict] = {}


def _get_schemas_dir() -> Path:
    """Get path to the bundled schemas directory."""
    return Path(__file__).parent.parent / "schemas"


def _load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = _get_schemas_dir() / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
        _schema_cache[schema_name] = json.loads(schema_path.read_text())
    return _schema_cache[schema_name]


def validate(data, schema_name: str) -> None:
    """
    Validate data against named schema.

    Args:
        data: Parsed JSON/YAML document
        schema_name: Schema name ("components", "milestones", "activity_entry", "tracker_config")

    Raises:
        ValidationError: If validation fails
    """
    schema = _load_schema(schema_name)

    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) if e.absolute_path else "(root)"
        raise ValidationError(schema_name, e.message, path) from None


def validate_file(filepath: Path, schema_name: str):
    """
    Load JSON file and validate against schema.

    Returns:
        Parsed and validated data

    Raises:
        ValidationError: If file invalid or doesn't match schema
    """
    if not filepath.exists():
        raise ValidationError(schema_name, f"File not found: {filepath}")

    try:
        data = json.loads(filepath.read_text())
    except json.JSONDecodeError as e:
        raise ValidationError(schema_name, f"Invalid JSON in {filepath}: {e}") from None

    validate(data, schema_name)
    return data


def validate_before_write(data, schema_name: str, filepath: Path) -> None:
    """
    Validate data before writing to file. Ensures we never write invalid data.

    Raises:
        ValidationError: If data doesn't match schema
    """
    try:
        validate(data, schema_name)
    except ValidationError as e:
        raise ValidationError(
            schema_name,
            f"Refusing to write invalid data to {filepath}: {e}"
        ) from None
