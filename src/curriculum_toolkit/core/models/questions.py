"""
Module: questions

Purpose:
    Provides the MCQ bank data structures. A bank (``mcq.md``) holds
    numbered questions with lettered options and a topic tag; the answer
    key (``mcq-answers.md``) pairs with it by ordinal position, giving the
    correct letter and an explanation.

Key Functions:
    - McqQuestion.letters: Option letters in source order
    - McqBank.get(number) / AnswerKey.get(number): Lookup by number
    - McqBank.paired_with(key): Ordinal pairing of questions and answers

Dependencies:
    - dataclasses (std)
    - functools (std)

Used By:
    - extractor.mcq: Builds banks from markdown
    - lint.rules: Answer alignment checks
    - builder.selection: Quiz candidates
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, Optional


@dataclass(frozen=True)
class McqQuestion:
    """
    Multiple-choice question (immutable).

    Content defects such as a missing option are modelled, not rejected:
    the linter reports them. Only structural nonsense raises.

    Attributes:
        number: Question number as written in the bank (>= 1)
        stem: Question text
        options: Ordered (letter, text) pairs, letters upper-case
        topic: Topic tag ("CSS", "Spring MVC"), empty when untagged
        line: 1-based line of the question heading

    Example:
        >>> q = McqQuestion(1, "What does HTML stand for?",
        ...                 (("A", "..."), ("B", "...")), "HTML", 3)
        >>> q.letters
        ('A', 'B')
    """

    number: int
    stem: str
    options: tuple[tuple[str, str], ...]
    topic: str = ""
    line: int = 0

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"Question number must be >= 1: {self.number}")
        letters = [letter for letter, _ in self.options]
        if len(set(letters)) != len(letters):
            raise ValueError(f"Duplicate option letters in question {self.number}: {letters}")

    @property
    def letters(self) -> tuple[str, ...]:
        return tuple(letter for letter, _ in self.options)

    def option_text(self, letter: str) -> Optional[str]:
        """Text of the option with this letter, or None."""
        for opt_letter, text in self.options:
            if opt_letter == letter.upper():
                return text
        return None

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "stem": self.stem,
            "options": [{"letter": letter, "text": text} for letter, text in self.options],
            "topic": self.topic,
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: dict) -> McqQuestion:
        return cls(
            number=data["number"],
            stem=data["stem"],
            options=tuple((o["letter"], o["text"]) for o in data.get("options", [])),
            topic=data.get("topic", ""),
            line=data.get("line", 0),
        )

    def __repr__(self) -> str:
        return f"McqQuestion({self.number}, options={len(self.options)}, topic={self.topic!r})"


@dataclass(frozen=True)
class AnswerKeyEntry:
    """
    Answer for one MCQ.

    Attributes:
        number: Question number the entry claims to answer
        letter: Correct option letter (single upper-case letter), empty when
            the entry names no recognisable letter
        explanation: Why the letter is correct, may be empty
        line: 1-based line of the entry heading
    """

    number: int
    letter: str
    explanation: str = ""
    line: int = 0

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"Answer number must be >= 1: {self.number}")
        if self.letter and (len(self.letter) != 1 or not self.letter.isalpha() or not self.letter.isupper()):
            raise ValueError(f"Answer letter must be one upper-case letter: {self.letter!r}")

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "letter": self.letter,
            "explanation": self.explanation,
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AnswerKeyEntry:
        return cls(
            number=data["number"],
            letter=data["letter"],
            explanation=data.get("explanation", ""),
            line=data.get("line", 0),
        )


@dataclass(frozen=True)
class McqBank:
    """
    Parsed ``mcq.md``.

    Attributes:
        path: Path relative to the corpus root
        questions: Questions in source order
    """

    path: str
    questions: tuple[McqQuestion, ...] = ()

    @cached_property
    def _by_number(self) -> dict[int, McqQuestion]:
        # First occurrence wins; duplicates are a lint finding
        index: dict[int, McqQuestion] = {}
        for question in self.questions:
            index.setdefault(question.number, question)
        return index

    def get(self, number: int) -> Optional[McqQuestion]:
        return self._by_number.get(number)

    @property
    def numbers(self) -> tuple[int, ...]:
        return tuple(q.number for q in self.questions)

    def __len__(self) -> int:
        return len(self.questions)

    def paired_with(
        self, key: AnswerKey
    ) -> Iterator[tuple[int, Optional[McqQuestion], Optional[AnswerKeyEntry]]]:
        """
        Pair questions and answers by ordinal position.

        Yields (ordinal, question, answer) for every ordinal up to the
        longer of the two sequences; the shorter side yields None.
        """
        count = max(len(self.questions), len(key.entries))
        for i in range(count):
            question = self.questions[i] if i < len(self.questions) else None
            answer = key.entries[i] if i < len(key.entries) else None
            yield i + 1, question, answer

    def to_dict(self) -> dict:
        return {"path": self.path, "questions": [q.to_dict() for q in self.questions]}

    @classmethod
    def from_dict(cls, data: dict) -> McqBank:
        return cls(
            path=data["path"],
            questions=tuple(McqQuestion.from_dict(q) for q in data.get("questions", [])),
        )


@dataclass(frozen=True)
class AnswerKey:
    """
    Parsed ``mcq-answers.md``.

    Attributes:
        path: Path relative to the corpus root
        entries: Answer entries in source order
    """

    path: str
    entries: tuple[AnswerKeyEntry, ...] = ()

    def get(self, number: int) -> Optional[AnswerKeyEntry]:
        for entry in self.entries:
            if entry.number == number:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict:
        return {"path": self.path, "entries": [e.to_dict() for e in self.entries]}

    @classmethod
    def from_dict(cls, data: dict) -> AnswerKey:
        return cls(
            path=data["path"],
            entries=tuple(AnswerKeyEntry.from_dict(e) for e in data.get("entries", [])),
        )
