"""
Module: builder

Purpose:
    Quiz building pipeline: draws answered MCQs from the corpus, selects
    a seeded set covering topics, and renders quiz and answer key PDFs.

Key Functions:
    - collect_candidates(): Answered, valid MCQs
    - select_questions(): Seeded selection with topic coverage
    - build_quiz(): Main entry point for quiz generation

Key Classes:
    - QuizConfig: Configuration for building

Dependencies:
    - reportlab: PDF output
    - curriculum_toolkit.loading: Corpus loading
    - curriculum_toolkit.keyword: Keyword filtering

Used By:
    - curriculum_toolkit.cli: ``curriculum build``
"""

from .config import QuizConfig
from .selection import SelectionError, collect_candidates, select_questions
from .controller import BuildError, BuildResult, build_quiz

__all__ = [
    # Config
    "QuizConfig",
    # Selection
    "SelectionError",
    "collect_candidates",
    "select_questions",
    # Controller
    "build_quiz",
    "BuildResult",
    "BuildError",
]
