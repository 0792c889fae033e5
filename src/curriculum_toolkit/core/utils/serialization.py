"""
Serialization Utilities

Builds and reads the exported corpus artefacts:

- ``corpus_index.json``: modules, weeks, demo stages and document
  summaries for a renderer or site generator
- ``questions.jsonl``: one MCQ per line, joined with its answer

Every record is validated against its schema before it is written and
again when it is read back. Calculated values (counts, concept sections)
are written for consumers but never read back into models.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from ..models.corpus import Corpus, WeekFolder
from ..models.documents import TopicDocument
from ..models.questions import AnswerKeyEntry, McqQuestion
from ..schemas.validator import (
    CORPUS_INDEX_SCHEMA_VERSION,
    QUESTION_RECORD_SCHEMA_VERSION,
    ValidationError,
    validate_corpus_index,
    validate_question_record,
)

logger = logging.getLogger(__name__)

INDEX_FILENAME = "corpus_index.json"
QUESTIONS_FILENAME = "questions.jsonl"


# ─────────────────────────────────────────────────────────────────────────────
# Question Records
# ─────────────────────────────────────────────────────────────────────────────

def question_record(
    week: WeekFolder,
    question: McqQuestion,
    answer: Optional[AnswerKeyEntry],
) -> dict[str, Any]:
    """
    Serialize one MCQ and its paired answer to a JSONL record.

    An answer whose letter is not an option is dropped from the record
    (the linter reports it); the record keeps ``answer: null``.
    """
    letter = answer.letter if answer and answer.letter in question.letters else None
    record: dict[str, Any] = {
        "schema_version": QUESTION_RECORD_SCHEMA_VERSION,
        "question_id": f"{week.name}:{question.number}",
        "week": week.name,
        "number": question.number,
        "stem": question.stem,
        "options": [{"letter": letter_, "text": text} for letter_, text in question.options],
        "topic": question.topic,
        "answer": letter,
        "source_path": week.mcq_bank.path if week.mcq_bank else "",
        "line": question.line,
    }
    if answer and letter:
        record["explanation"] = answer.explanation
    return record


def iter_question_records(corpus: Corpus) -> Iterable[dict[str, Any]]:
    for week, question, answer in corpus.iter_mcq_questions():
        yield question_record(week, question, answer)


def write_jsonl(records: Iterable[dict[str, Any]], path: Path) -> int:
    """
    Write validated records to a JSONL file.

    Returns:
        Number of records written

    Raises:
        ValidationError: If any record is invalid (nothing is written)
    """
    rows = list(records)
    for i, row in enumerate(rows):
        try:
            validate_question_record(row)
        except ValidationError as e:
            raise ValidationError(f"Record {i}: {e}", path=e.path, errors=e.errors) from e

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False))
            f.write("\n")
    return len(rows)


def load_question_records(path: Path, *, validate: bool = True) -> list[dict[str, Any]]:
    """
    Read ``questions.jsonl`` back.

    Args:
        path: JSONL file
        validate: Validate each record against the schema

    Raises:
        ValidationError: On a malformed line or invalid record
        OSError: If the file cannot be read
    """
    records = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValidationError(f"{path}:{lineno}: invalid JSON: {e}") from e
            if validate:
                validate_question_record(data)
            records.append(data)
    return records


# ─────────────────────────────────────────────────────────────────────────────
# Corpus Index
# ─────────────────────────────────────────────────────────────────────────────

def _document_summary(doc: TopicDocument) -> dict[str, Any]:
    return {
        "path": doc.path,
        "module": doc.module,
        "title": doc.title,
        "section_count": len(doc.sections),
        "concept_count": len(doc.concept_sections),
        "code_languages": sorted(doc.code_languages),
        "next_steps": [link.target for link in doc.next_steps],
        "has_summary_checklist": doc.has_summary_checklist,
    }


def build_corpus_index(corpus: Corpus) -> dict[str, Any]:
    """
    Build the corpus index document.

    Returns:
        Dict ready for ``json.dump`` that passes ``validate_corpus_index``
    """
    from curriculum_toolkit import __version__

    return {
        "schema_version": CORPUS_INDEX_SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "generator_version": __version__,
        "modules": [m.to_dict() for m in corpus.modules],
        "weeks": [w.to_dict() for w in corpus.weeks],
        "demo_stages": [s.to_dict() for s in corpus.demo_stages],
        "documents": [_document_summary(d) for d in corpus.all_documents],
        "totals": {
            "modules": len(corpus.modules),
            "weeks": len(corpus.weeks),
            "documents": len(corpus.all_documents),
            "questions": corpus.question_count,
            "interview_sets": corpus.interview_set_count,
            "demo_stages": len(corpus.demo_stages),
        },
    }


def export_index(corpus: Corpus, out_dir: Path) -> tuple[Path, Path]:
    """
    Write ``corpus_index.json`` and ``questions.jsonl`` into out_dir.

    Args:
        corpus: Loaded corpus
        out_dir: Destination directory (created if missing)

    Returns:
        (index_path, questions_path)

    Raises:
        ValidationError: If generated data fails schema validation
    """
    index = build_corpus_index(corpus)
    validate_corpus_index(index)

    out_dir.mkdir(parents=True, exist_ok=True)
    index_path = out_dir / INDEX_FILENAME
    with open(index_path, "w", encoding="utf-8") as f:
        json.dump(index, f, indent=2, ensure_ascii=False)

    questions_path = out_dir / QUESTIONS_FILENAME
    count = write_jsonl(iter_question_records(corpus), questions_path)

    logger.info(
        f"Exported index of {len(index['documents'])} documents and {count} questions to {out_dir}"
    )
    return index_path, questions_path
