"""
Schema Validation Utilities

Validates exported JSON data (corpus index, question records) against
the bundled JSON schemas.

Basic field checks always run and stop at the first problem. Strict mode
then validates the whole document with ``jsonschema`` and reports every
schema error at once; ``ValidationError.path`` points at the most
relevant one.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
QUESTION_RECORD_SCHEMA_VERSION = 1
CORPUS_INDEX_SCHEMA_VERSION = 1


_SCHEMA_FILES = {
    "question_record": "question_record.schema.json",
    "corpus_index": "corpus_index.schema.json",
}

# Compiled validators, built on first use
_validators: dict[str, Any] = {}


def _validator(name: str) -> Any:
    """Validator for a bundled schema, using the draft its ``$schema`` names."""
    if name not in _validators:
        schema_path = Path(__file__).with_name(_SCHEMA_FILES[name])
        try:
            schema = json.loads(schema_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise FileNotFoundError(f"Bundled schema missing: {schema_path}") from e
        cls = jsonschema.validators.validator_for(schema)
        cls.check_schema(schema)
        _validators[name] = cls(schema)
    return _validators[name]


class ValidationError(Exception):
    """
    Exported data does not match its schema.

    Attributes:
        path: Dot-joined JSON path of the reported problem ("" for the root)
        errors: Every problem found, as "path: message" strings
    """

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = list(errors or [])


def _dotted(error: jsonschema.ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path)


def _run_jsonschema(data: dict[str, Any], schema_name: str) -> None:
    found = list(_validator(schema_name).iter_errors(data))
    if not found:
        return
    primary = jsonschema.exceptions.best_match(found)
    raise ValidationError(
        f"{schema_name} failed schema validation at {_dotted(primary) or '<root>'}: {primary.message}",
        path=_dotted(primary),
        errors=sorted(f"{_dotted(e) or '<root>'}: {e.message}" for e in found),
    )


def validate_question_record(data: dict[str, Any], *, strict: bool = True) -> None:
    """
    Validate one ``questions.jsonl`` record.

    Args:
        data: Record dictionary
        strict: If True, also validate against the full JSON schema

    Raises:
        ValidationError: If data is invalid
    """
    required = [
        "schema_version", "question_id", "week", "number",
        "stem", "options", "topic", "answer", "source_path",
    ]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing],
        )

    version = data.get("schema_version")
    if version != QUESTION_RECORD_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported question record schema version: {version} "
            f"(expected {QUESTION_RECORD_SCHEMA_VERSION})",
            path="schema_version",
        )

    number = data.get("number")
    if not isinstance(number, int) or number < 1:
        raise ValidationError(f"Invalid number: {number!r} (must be >= 1)", path="number")

    answer = data.get("answer")
    if answer is not None:
        letters = [o.get("letter") for o in data.get("options", []) if isinstance(o, dict)]
        if answer not in letters:
            raise ValidationError(
                f"Answer {answer!r} is not one of the options {letters}",
                path="answer",
            )

    if strict:
        _run_jsonschema(data, "question_record")


def validate_corpus_index(data: dict[str, Any], *, strict: bool = True) -> None:
    """
    Validate a ``corpus_index.json`` document.

    Args:
        data: Index dictionary
        strict: If True, also validate against the full JSON schema

    Raises:
        ValidationError: If data is invalid
    """
    version = data.get("schema_version")
    if version != CORPUS_INDEX_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported corpus index schema version: {version} "
            f"(expected {CORPUS_INDEX_SCHEMA_VERSION})",
            path="schema_version",
        )

    names = [m.get("name") for m in data.get("modules", [])]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValidationError(f"Duplicate module names: {duplicates}", path="modules")

    if strict:
        _run_jsonschema(data, "corpus_index")
