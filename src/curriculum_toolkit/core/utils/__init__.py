"""Utility functions for corpus serialization."""

from .serialization import (
    build_corpus_index,
    export_index,
    load_question_records,
    question_record,
    write_jsonl,
)

__all__ = [
    "build_corpus_index",
    "export_index",
    "load_question_records",
    "question_record",
    "write_jsonl",
]
