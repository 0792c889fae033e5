"""
Schemas Package

JSON schema definitions and validation utilities for exported corpus
artefacts.
"""

from .validator import (
    validate_question_record,
    validate_corpus_index,
    ValidationError,
    QUESTION_RECORD_SCHEMA_VERSION,
    CORPUS_INDEX_SCHEMA_VERSION,
)

__all__ = [
    "validate_question_record",
    "validate_corpus_index",
    "ValidationError",
    "QUESTION_RECORD_SCHEMA_VERSION",
    "CORPUS_INDEX_SCHEMA_VERSION",
]
