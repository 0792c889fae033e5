"""
Module: builder.selection

Purpose:
    Quiz question selection. Picks a seeded, reproducible set of MCQs
    from the candidate pool, covering topics first and filling the rest
    at random.

Key Functions:
    - collect_candidates(): Answered, valid MCQs from a corpus
    - select_questions(): Main entry point for selection

Key Classes:
    - Selector: Orchestrates the selection algorithm
    - SelectionError: Raised when no selection is possible

Algorithm:
    1. Sort candidates into (week, number) order so the seed alone
       decides the outcome
    2. Filter by requested topics
    3. Cover each requested topic (or every available topic) once
    4. Random fill to the requested count
    5. Order by (week, number) unless shuffling

Dependencies:
    - random (std)
    - curriculum_toolkit.core.models: QuizQuestion, SelectionResult

Used By:
    - builder.controller: Main build controller
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from curriculum_toolkit.common.path_utils import parse_week_dir
from curriculum_toolkit.common.settings import LintSettings
from curriculum_toolkit.common.topics import normalise_topic_tag, resolve_topic_tag
from curriculum_toolkit.core.models import Corpus
from curriculum_toolkit.core.models.selection import QuizQuestion, SelectionResult

from .config import QuizConfig

logger = logging.getLogger(__name__)


class SelectionError(Exception):
    """Error during question selection."""
    pass


def _order_key(candidate: QuizQuestion) -> tuple:
    week_number = parse_week_dir(candidate.week)
    return (week_number if week_number is not None else -1, candidate.week, candidate.question.number)


def collect_candidates(corpus: Corpus, settings: Optional[LintSettings] = None) -> List[QuizQuestion]:
    """
    Collect quiz candidates from a corpus.

    A question is a candidate only when its ordinally paired answer
    carries the same number and a letter among the question's options.

    Args:
        corpus: Loaded corpus
        settings: Settings providing topic aliases

    Returns:
        Candidates in (week, number) order
    """
    aliases = settings.topic_aliases if settings else {}
    candidates: List[QuizQuestion] = []
    skipped = 0
    seen: Set[str] = set()
    for week, question, answer in corpus.iter_mcq_questions():
        if (
            answer is None
            or answer.number != question.number
            or answer.letter not in question.letters
            or f"{week.name}:{question.number}" in seen
        ):
            skipped += 1
            continue
        seen.add(f"{week.name}:{question.number}")
        candidates.append(
            QuizQuestion(
                week=week.name,
                question=question,
                answer=answer,
                topic=resolve_topic_tag(question.topic, aliases),
            )
        )
    if skipped:
        logger.warning(f"{skipped} questions lack a valid paired answer and cannot be used in quizzes")
    logger.debug(f"Collected {len(candidates)} quiz candidates")
    return sorted(candidates, key=_order_key)


def select_questions(candidates: List[QuizQuestion], config: QuizConfig) -> SelectionResult:
    """
    Select quiz questions.

    Args:
        candidates: Available questions (see collect_candidates)
        config: Quiz configuration

    Returns:
        SelectionResult; incomplete when the pool is smaller than
        ``config.question_count``

    Raises:
        SelectionError: If no candidate matches the configuration

    Invariants:
        - The same candidates and seed always give the same result
        - No duplicate questions in selection

    Example:
        >>> result = select_questions(candidates, QuizConfig(Path("c"), question_count=10))
        >>> result.question_count
        10
    """
    selector = Selector(candidates, config)
    return selector.run()


@dataclass
class Selector:
    """
    Question selection orchestrator.

    Attributes:
        candidates: Available questions
        config: Quiz configuration
    """

    candidates: List[QuizQuestion]
    config: QuizConfig

    # Internal state
    _rng: random.Random = field(init=False)
    _pool: List[QuizQuestion] = field(init=False, default_factory=list)
    _selected: List[QuizQuestion] = field(init=False, default_factory=list)
    _used_keys: Set[str] = field(init=False, default_factory=set)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.config.seed)

    def run(self) -> SelectionResult:
        """
        Execute the selection algorithm.

        Returns:
            SelectionResult with selected questions
        """
        self._pool = sorted(self.candidates, key=_order_key)
        self._filter_by_topics()
        if not self._pool:
            raise SelectionError("No candidate questions match the requested topics")

        if self.config.force_topic_coverage:
            self._ensure_topic_coverage()
        self._random_fill()

        selected = sorted(self._selected, key=_order_key)
        if self.config.shuffle:
            self._rng.shuffle(selected)

        result = SelectionResult(questions=tuple(selected), target_count=self.config.question_count)
        if not result.is_complete:
            logger.warning(
                f"Only {result.question_count} of {self.config.question_count} requested "
                f"questions are available"
            )
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Topic Filtering
    # ─────────────────────────────────────────────────────────────────────────

    def _filter_by_topics(self) -> None:
        topic_set = self.config.topic_set
        if not topic_set:
            return
        before = len(self._pool)
        self._pool = [q for q in self._pool if normalise_topic_tag(q.topic) in topic_set]
        available = {normalise_topic_tag(q.topic) for q in self._pool}
        missing = sorted(topic_set - available)
        if missing:
            logger.warning(f"No questions available for topics: {missing}")
        logger.debug(f"Filtered to {len(self._pool)}/{before} questions by topic")

    # ─────────────────────────────────────────────────────────────────────────
    # Topic Coverage
    # ─────────────────────────────────────────────────────────────────────────

    def _ensure_topic_coverage(self) -> None:
        """Pick one question per topic, topics visited in seeded order."""
        by_topic: Dict[str, List[QuizQuestion]] = {}
        for candidate in self._pool:
            by_topic.setdefault(normalise_topic_tag(candidate.topic), []).append(candidate)

        topics = sorted(by_topic)
        self._rng.shuffle(topics)
        for topic in topics:
            if len(self._selected) >= self.config.question_count:
                logger.debug(f"Quiz too short to cover all {len(topics)} topics")
                break
            self._take(self._rng.choice(by_topic[topic]))

    # ─────────────────────────────────────────────────────────────────────────
    # Random Fill
    # ─────────────────────────────────────────────────────────────────────────

    def _random_fill(self) -> None:
        remaining = [q for q in self._pool if q.key not in self._used_keys]
        self._rng.shuffle(remaining)
        for candidate in remaining:
            if len(self._selected) >= self.config.question_count:
                break
            self._take(candidate)

    def _take(self, candidate: QuizQuestion) -> None:
        if candidate.key in self._used_keys:
            return
        self._used_keys.add(candidate.key)
        self._selected.append(candidate)
