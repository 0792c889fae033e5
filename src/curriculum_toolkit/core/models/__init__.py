"""
Core Models Package

Immutable, validated data models for a curriculum corpus.

All models in this package are frozen dataclasses. Derived values
(concept sections, counts, covered topics) are calculated, never stored,
so they cannot drift from the parsed content.

| Corpus artefact | Model |
|-----------------|-------|
| Lesson markdown file | `TopicDocument` |
| `mcq.md` / `mcq-answers.md` | `McqBank` / `AnswerKey` |
| `interview-questions.md` | `InterviewSet` |
| `NN-slug/` directory | `CourseModule` |
| `week-NN/` directory | `WeekFolder` |
| `resources/demo/spring/stage-N-*` | `DemoStage` |
"""

from .documents import CodeBlock, Link, Section, TopicDocument
from .questions import AnswerKey, AnswerKeyEntry, McqBank, McqQuestion
from .interviews import InterviewQuestion, InterviewSet
from .corpus import Corpus, CourseModule, DemoStage, LoadFailure, WeekFolder

__all__ = [
    "CodeBlock",
    "Link",
    "Section",
    "TopicDocument",
    "AnswerKey",
    "AnswerKeyEntry",
    "McqBank",
    "McqQuestion",
    "InterviewQuestion",
    "InterviewSet",
    "Corpus",
    "CourseModule",
    "DemoStage",
    "LoadFailure",
    "WeekFolder",
]
