"""
Curriculum Toolkit Core Package

Shared data models, schemas and serialization utilities. These models
are the single source of truth for every other subpackage: parsers build
them, the linter and quiz builder read them, the index exporter
serializes them.
"""

from .models import Corpus, McqQuestion, AnswerKeyEntry, InterviewSet, TopicDocument
from .models.selection import QuizQuestion, SelectionResult

__all__ = [
    "Corpus",
    "McqQuestion",
    "AnswerKeyEntry",
    "InterviewSet",
    "TopicDocument",
    "QuizQuestion",
    "SelectionResult",
]
