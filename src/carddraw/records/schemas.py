from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import RecordError

SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"


class SchemaValidationError(RecordError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        if self.errors:
            message = message + " " + "; ".join(self.errors)
        super().__init__(message)


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path = SCHEMA_ROOT

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls()

    def load_schema(self, schema_filename: str) -> dict[str, Any]:
        path = self.schema_root / schema_filename
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        schema = self.load_schema(schema_filename)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        return validator_cls(schema)

    def validate_instance(self, instance: Any, schema_filename: str, source: str = "") -> None:
        validator = self.validator_for(schema_filename)
        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
        if errors:
            formatted = [self._format_error(err) for err in errors]
            where = f" in {source}" if source else ""
            raise SchemaValidationError(
                f"Invalid {schema_filename.split('.')[0]} data{where}:",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"


def load_json(path: Path, what: str) -> Any:
    if not path.exists():
        raise RecordError(f"{what} not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise RecordError(f"{what} {path} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise RecordError(f"Cannot read {what.lower()} {path}: {exc}") from exc


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write JSON via a temp file and rename, so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    data = json.dumps(payload, indent=2) + "\n"
    try:
        with tmp.open("w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
