"""
Module: builder.config

Purpose:
    Configuration dataclass for quiz building. Immutable configuration
    with validation on construction.

Key Classes:
    - QuizConfig: Main configuration for building quizzes

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main build controller
    - builder.selection: Question selection
    - cli: ``curriculum build``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit.common.topics import normalise_topic_tag


@dataclass(frozen=True)
class QuizConfig:
    """
    Configuration for building a quiz (immutable).

    Attributes:
        corpus_root: Curriculum root directory
        question_count: Number of questions to put in the quiz
        weeks: Week folders to draw from ("week-05", "5"); empty means all
        topics: Topic tags to draw from; empty means all
        keywords: Keyword filter (plain = fuzzy, "quoted" = whole word)
        seed: Random seed for selection reproducibility
        force_topic_coverage: Cover each topic once before filling at random
        shuffle: Shuffle quiz order instead of (week, number) order
        output_dir: Base output directory; a timestamped subfolder is created
        include_answer_key: Render the answer key PDF
        export_zip: Also export quiz.md / answers.md / README.txt as a ZIP
        title: Quiz title printed on the first page
        show_footer: Show version footer on each page

    Example:
        >>> config = QuizConfig(
        ...     corpus_root=Path("curriculum"),
        ...     question_count=20,
        ...     weeks=["week-05"],
        ... )
    """

    # Required
    corpus_root: Path
    question_count: int

    # Optional filtering
    weeks: List[str] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

    # Selection behavior
    seed: int = 42
    force_topic_coverage: bool = True
    shuffle: bool = False

    # Output
    output_dir: Optional[Path] = None
    include_answer_key: bool = True
    export_zip: bool = False
    title: str = "Curriculum Quiz"

    # Footer
    show_footer: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if isinstance(self.question_count, bool) or not isinstance(self.question_count, int):
            raise ValueError(f"question_count must be an integer: {self.question_count!r}")
        if self.question_count <= 0:
            raise ValueError(f"question_count must be positive: {self.question_count}")
        if not isinstance(self.seed, int) or isinstance(self.seed, bool):
            raise ValueError(f"seed must be an integer: {self.seed!r}")
        if not self.title.strip():
            raise ValueError("title must not be empty")

    @property
    def topic_set(self) -> set[str]:
        """Requested topics, normalised for comparison."""
        return {normalise_topic_tag(t) for t in self.topics if normalise_topic_tag(t)}
