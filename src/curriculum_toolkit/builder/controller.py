"""
Module: builder.controller

Purpose:
    Orchestrate the complete quiz building pipeline.
    Load → Filter → Select → Render quiz → Render answer key → Export

Key Functions:
    - build_quiz(): Main entry point for building a quiz

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures

Dependencies:
    - loading: Corpus loading
    - keyword: Keyword filtering
    - builder.selection: Question selection
    - builder.output: PDF rendering and ZIP export

Used By:
    - cli: ``curriculum build``
"""

from __future__ import annotations

import json
import logging
import re
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit.common.settings import ConfigError, LintSettings, load_settings
from curriculum_toolkit.core.models import Corpus
from curriculum_toolkit.core.models.selection import QuizQuestion, SelectionResult
from curriculum_toolkit.keyword import KeywordIndex
from curriculum_toolkit.keyword.models import MCQ, mcq_entry_id
from curriculum_toolkit.loading import LoaderError, load_corpus

from .config import QuizConfig
from .output.answer_key import render_answer_key_pdf
from .output.renderer import render_quiz_pdf
from .output.zip_writer import write_quiz_zip, zip_members
from .selection import SelectionError, collect_candidates, select_questions

logger = logging.getLogger(__name__)

QUIZ_PDF = "quiz.pdf"
ANSWER_KEY_PDF = "answers.pdf"
QUIZ_ZIP = "quiz.zip"
METADATA_FILENAME = "build_metadata.json"
DEFAULT_OUTPUT_DIR = Path("output")


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        output_dir: Timestamped folder holding every artefact
        quiz_pdf: Path to generated quiz PDF
        answer_key_pdf: Path to answer key PDF (if generated)
        selection: Selection result
        page_count: Pages in the quiz PDF
        metadata: Build metadata dictionary
        warnings: Any warnings during build
        quiz_zip: Path to markdown ZIP export (if generated)

    Example:
        >>> result = build_quiz(config)
        >>> print(f"{result.selection.question_count} questions on {result.page_count} pages")
    """
    output_dir: Path
    quiz_pdf: Path
    answer_key_pdf: Optional[Path]
    selection: SelectionResult
    page_count: int
    metadata: dict
    warnings: tuple[str, ...]
    quiz_zip: Optional[Path] = None


def build_quiz(config: QuizConfig, settings: Optional[LintSettings] = None) -> BuildResult:
    """
    Build a quiz from start to finish.

    Pipeline:
    1. Load the corpus
    2. Collect answered, valid MCQs
    3. Filter by weeks and keywords
    4. Select questions (topic coverage, then seeded fill)
    5. Render quiz PDF
    6. (Optional) Render answer key PDF
    7. (Optional) Export markdown ZIP
    8. Write build_metadata.json

    Args:
        config: Build configuration
        settings: Corpus settings; loaded from the corpus root when None

    Returns:
        BuildResult with paths and metadata

    Raises:
        BuildError: If any step fails

    Example:
        >>> config = QuizConfig(
        ...     corpus_root=Path("curriculum"),
        ...     question_count=20,
        ...     output_dir=Path("output"),
        ... )
        >>> result = build_quiz(config)
        >>> result.quiz_pdf.name
        'quiz.pdf'
    """
    warnings: List[str] = []
    start_time = time.perf_counter()
    logger.info(f"Starting quiz build from {config.corpus_root} for {config.question_count} questions")

    # 1. Load corpus
    if settings is None:
        try:
            settings = load_settings(corpus_root=Path(config.corpus_root))
        except ConfigError as e:
            raise BuildError(f"Failed to load settings: {e}") from e
    try:
        corpus = load_corpus(Path(config.corpus_root), settings)
    except LoaderError as e:
        raise BuildError(f"Failed to load corpus: {e}") from e
    if corpus.load_errors:
        warnings.append(f"{len(corpus.load_errors)} corpus files could not be loaded")

    # 2. Candidates
    candidates = collect_candidates(corpus, settings)
    if not candidates:
        raise BuildError(f"No answered MCQs found under {config.corpus_root}")
    logger.info(f"Found {len(candidates)} candidate questions")

    # 3. Filters
    candidates = _apply_filters(candidates, corpus, config, warnings)
    if not candidates:
        raise BuildError("No questions match the specified filters")
    logger.info(f"After filtering: {len(candidates)} questions")

    # 4. Select
    try:
        selection = select_questions(candidates, config)
    except SelectionError as e:
        raise BuildError(f"Selection failed: {e}") from e
    if not selection.is_complete:
        warnings.append(
            f"Only {selection.question_count} of {config.question_count} requested questions available"
        )
    logger.info(f"Selected {selection.question_count} questions covering {len(selection.covered_topics)} topics")

    # 5. Output directory: always a fresh timestamped subfolder
    base_dir = Path(config.output_dir) if config.output_dir else DEFAULT_OUTPUT_DIR
    output_dir = _generate_timestamped_subfolder(base_dir, config)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BuildError(f"Cannot create output directory {output_dir}: {e}") from e
    logger.info(f"Output directory: {output_dir}")

    try:
        quiz_pdf = output_dir / QUIZ_PDF
        page_count = render_quiz_pdf(
            selection, quiz_pdf, title=config.title, show_footer=config.show_footer
        )

        answer_key_pdf = None
        if config.include_answer_key:
            answer_key_pdf = output_dir / ANSWER_KEY_PDF
            render_answer_key_pdf(
                selection, answer_key_pdf, title=config.title, show_footer=config.show_footer
            )

        quiz_zip = None
        if config.export_zip:
            quiz_zip = write_quiz_zip(
                selection,
                output_dir / QUIZ_ZIP,
                title=config.title,
                include_answers=config.include_answer_key,
            )
            logger.info(f"Exported quiz ZIP: {quiz_zip}")
    except OSError as e:
        raise BuildError(f"Failed to write quiz output: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Quiz generation completed in {elapsed:.2f}s")

    metadata = _build_metadata(config, selection, page_count, warnings)
    _write_metadata(output_dir, metadata)
    logger.info(f"Wrote build metadata to {output_dir / METADATA_FILENAME}")

    return BuildResult(
        output_dir=output_dir,
        quiz_pdf=quiz_pdf,
        answer_key_pdf=answer_key_pdf,
        selection=selection,
        page_count=page_count,
        metadata=metadata,
        warnings=tuple(warnings),
        quiz_zip=quiz_zip,
    )


def _apply_filters(
    candidates: List[QuizQuestion],
    corpus: Corpus,
    config: QuizConfig,
    warnings: List[str],
) -> List[QuizQuestion]:
    """
    Apply week and keyword filters to candidates.

    Topic filtering happens in the selector, which also needs the
    topic list for coverage.
    """
    result = candidates

    if config.weeks:
        wanted = set()
        for week_ref in config.weeks:
            week = corpus.find_week(_week_lookup(week_ref))
            if week is None:
                message = f"Unknown week: {week_ref}"
                logger.warning(message)
                warnings.append(message)
            else:
                wanted.add(week.name)
        result = [q for q in result if q.week in wanted]
        logger.debug(f"Filtered by weeks: {len(result)} remaining")

    if config.keywords:
        index = KeywordIndex()
        index.prime(corpus)
        search = index.search(list(config.keywords))
        matching = search.ids_of_kind(MCQ)
        logger.debug(f"Keyword search matched {len(matching)} questions")
        result = [q for q in result if mcq_entry_id(q.week, q.question.number) in matching]
        logger.debug(f"Filtered by keywords: {len(result)} remaining")

    return result


def _week_lookup(week_ref: str) -> str | int:
    """Accept "week-05", "week-5", "05" and "5"."""
    ref = str(week_ref).strip()
    match = re.fullmatch(r"(?:week-?)?(\d{1,2})", ref, re.IGNORECASE)
    return int(match.group(1)) if match else ref


def _topic_slug(topic: str) -> str:
    """Convert topic to URL-safe slug."""
    topic = re.sub(r"^\d+[\.\)]\s*", "", topic or "").strip()
    topic = re.sub(r"[^A-Za-z0-9]+", "-", topic).strip("-")
    return topic.lower() or "misc"


def _generate_timestamped_subfolder(base_dir: Path, config: QuizConfig) -> Path:
    """
    Create a timestamped subfolder path inside the base directory.

    Returns:
        Path like base/20260116-103045__n20__s42__css+html
    """
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    count_segment = f"n{config.question_count}"
    seed_segment = f"s{config.seed}"

    if config.topics:
        topic_segment = "+".join(_topic_slug(t) for t in sorted(config.topics)[:3])
    elif config.keywords:
        topic_segment = "keywords"
    else:
        topic_segment = "all"

    folder_name = f"{timestamp}__{count_segment}__{seed_segment}__{topic_segment}"

    candidate = base_dir / folder_name
    counter = 1
    while candidate.exists():
        candidate = base_dir / f"{folder_name}({counter})"
        counter += 1
    return candidate


def _build_metadata(
    config: QuizConfig,
    selection: SelectionResult,
    page_count: int,
    warnings: List[str],
) -> dict:
    """
    Build metadata dictionary for a generated quiz.

    Contains the build configuration, selection statistics, the answer
    for each quiz position and a manifest of written files.
    """
    from curriculum_toolkit import __version__

    per_topic = Counter(q.topic for q in selection.questions)
    per_week = Counter(q.week for q in selection.questions)

    selection_details = [
        {
            "position": position,
            "question_id": item.key,
            "week": item.week,
            "number": item.question.number,
            "topic": item.topic,
            "answer": item.answer.letter,
        }
        for position, item in enumerate(selection.questions, start=1)
    ]

    manifest = {"quiz_pdf": QUIZ_PDF}
    if config.include_answer_key:
        manifest["answer_key_pdf"] = ANSWER_KEY_PDF
    if config.export_zip:
        manifest["zip_export"] = zip_members(config.include_answer_key)

    return {
        "generated_at": datetime.now().isoformat(),
        "corpus_root": str(config.corpus_root),
        "title": config.title,
        "target_count": config.question_count,
        "question_count": selection.question_count,
        "seed": config.seed,
        "page_count": page_count,
        "weeks": list(config.weeks) if config.weeks else None,
        "topics": list(config.topics) if config.topics else None,
        "keywords": list(config.keywords) if config.keywords else None,
        "force_topic_coverage": config.force_topic_coverage,
        "shuffle": config.shuffle,
        "include_answer_key": config.include_answer_key,
        "toolkit_version": __version__,
        "stats": {
            "questions_per_topic": dict(sorted(per_topic.items())),
            "questions_per_week": dict(sorted(per_week.items())),
        },
        "selection_details": selection_details,
        "manifest": manifest,
        "warnings": list(warnings),
    }


def _write_metadata(output_dir: Path, metadata: dict) -> None:
    """
    Write metadata JSON file to output directory.

    Raises:
        BuildError: If writing fails
    """
    metadata_path = output_dir / METADATA_FILENAME
    try:
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        raise BuildError(f"Failed to write metadata: {e}") from e
