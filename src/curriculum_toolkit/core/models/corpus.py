"""
Module: corpus

Purpose:
    Aggregate containers for a loaded curriculum: numbered module
    directories, weekly assessment folders, Spring demo stages, and the
    Corpus that ties them to a root directory.

Key Functions:
    - Corpus.all_documents: Every TopicDocument, calculated
    - Corpus.find_module(number): Module lookup by number
    - Corpus.iter_mcq_questions(): (week, question, answer) triples

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - .documents, .questions, .interviews

Used By:
    - loading.loader: Builds the Corpus
    - lint, keyword, builder: Consume it
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Dict, Iterator, Optional

from .documents import TopicDocument
from .interviews import InterviewSet
from .questions import AnswerKey, AnswerKeyEntry, McqBank, McqQuestion


@dataclass(frozen=True)
class CourseModule:
    """
    Numbered topic directory such as ``12-testing``.

    Attributes:
        name: Directory name
        number: Leading module number (12)
        slug: Remainder of the name ("testing")
        label: Canonical display label ("12. Testing")
        documents: Lesson documents, sorted by path
    """

    name: str
    number: int
    slug: str
    label: str
    documents: tuple[TopicDocument, ...] = ()

    def __post_init__(self) -> None:
        if self.number < 0:
            raise ValueError(f"module number must be non-negative: {self.number}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "number": self.number,
            "slug": self.slug,
            "label": self.label,
            "documents": [d.path for d in self.documents],
        }


@dataclass(frozen=True)
class WeekFolder:
    """
    Weekly assessment folder such as ``week-06``.

    Attributes:
        name: Directory name
        number: Week number
        mcq_bank: Parsed mcq.md, None when absent
        answer_key: Parsed mcq-answers.md, None when absent
        interview_sets: Parsed interview sets (empty when the file is absent)
        interview_path: Relative path of the interview file, None when absent
        documents: Other markdown files in the folder (FAQs etc.)
    """

    name: str
    number: int
    mcq_bank: Optional[McqBank] = None
    answer_key: Optional[AnswerKey] = None
    interview_sets: tuple[InterviewSet, ...] = ()
    interview_path: Optional[str] = None
    documents: tuple[TopicDocument, ...] = ()

    @property
    def question_count(self) -> int:
        return len(self.mcq_bank) if self.mcq_bank else 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "number": self.number,
            "mcq_path": self.mcq_bank.path if self.mcq_bank else None,
            "answers_path": self.answer_key.path if self.answer_key else None,
            "interview_path": self.interview_path,
            "question_count": self.question_count,
            "answer_count": len(self.answer_key) if self.answer_key else 0,
            "interview_set_count": len(self.interview_sets),
            "documents": [d.path for d in self.documents],
        }


@dataclass(frozen=True)
class DemoStage:
    """
    Spring demo project under ``resources/demo/spring/stage-<N>-<slug>``.

    Attributes:
        name: Directory name ("stage-9-microservices")
        number: Stage number
        slug: Remainder of the name
        path: Path relative to the corpus root
        services: Service names; a single-project stage has one service
            named after the stage
        entrypoints: service -> @SpringBootApplication class names
        test_classes: service -> test class names
        ports: service -> ports announced in startup logging
    """

    name: str
    number: int
    slug: str
    path: str
    services: tuple[str, ...] = ()
    entrypoints: Dict[str, tuple[str, ...]] = field(default_factory=dict)
    test_classes: Dict[str, tuple[str, ...]] = field(default_factory=dict)
    ports: Dict[str, tuple[int, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "number": self.number,
            "slug": self.slug,
            "path": self.path,
            "services": list(self.services),
            "entrypoints": {k: list(v) for k, v in self.entrypoints.items()},
            "test_classes": {k: list(v) for k, v in self.test_classes.items()},
            "ports": {k: list(v) for k, v in self.ports.items()},
        }


@dataclass(frozen=True)
class LoadFailure:
    """A corpus file the loader could not read."""

    path: str
    message: str
    line: int = 0


@dataclass(frozen=True)
class Corpus:
    """
    Whole curriculum loaded from disk (immutable).

    Attributes:
        root: Absolute corpus root
        modules: Modules sorted by number
        weeks: Week folders sorted by number
        demo_stages: Demo stages sorted by number
        loose_documents: Markdown files outside modules and weeks
        load_errors: Files that failed to load
    """

    root: Path
    modules: tuple[CourseModule, ...] = ()
    weeks: tuple[WeekFolder, ...] = ()
    demo_stages: tuple[DemoStage, ...] = ()
    loose_documents: tuple[TopicDocument, ...] = ()
    load_errors: tuple[LoadFailure, ...] = ()

    @cached_property
    def all_documents(self) -> tuple[TopicDocument, ...]:
        docs: list[TopicDocument] = []
        for module in self.modules:
            docs.extend(module.documents)
        for week in self.weeks:
            docs.extend(week.documents)
        docs.extend(self.loose_documents)
        return tuple(sorted(docs, key=lambda d: d.path))

    @cached_property
    def module_numbers(self) -> frozenset[int]:
        return frozenset(m.number for m in self.modules)

    def find_module(self, number: int) -> Optional[CourseModule]:
        for module in self.modules:
            if module.number == number:
                return module
        return None

    def find_week(self, name_or_number: str | int) -> Optional[WeekFolder]:
        """Find a week by directory name ("week-06") or number (6)."""
        for week in self.weeks:
            if week.name == name_or_number or week.number == name_or_number:
                return week
            if isinstance(name_or_number, str) and name_or_number.isdigit():
                if week.number == int(name_or_number):
                    return week
        return None

    def iter_mcq_questions(
        self,
    ) -> Iterator[tuple[WeekFolder, McqQuestion, Optional[AnswerKeyEntry]]]:
        """
        Yield every MCQ with its ordinally paired answer.

        Questions without a bank partner yield None as the answer.
        """
        for week in self.weeks:
            if not week.mcq_bank:
                continue
            key = week.answer_key or AnswerKey(path="")
            for _, question, answer in week.mcq_bank.paired_with(key):
                if question is not None:
                    yield week, question, answer

    @property
    def question_count(self) -> int:
        return sum(w.question_count for w in self.weeks)

    @property
    def interview_set_count(self) -> int:
        return sum(len(w.interview_sets) for w in self.weeks)

    def __repr__(self) -> str:
        return (
            f"Corpus({str(self.root)!r}, modules={len(self.modules)}, "
            f"weeks={len(self.weeks)}, documents={len(self.all_documents)})"
        )
