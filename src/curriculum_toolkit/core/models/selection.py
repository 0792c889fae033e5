"""
Module: selection

Purpose:
    Provides QuizQuestion and SelectionResult dataclasses for quiz
    assembly. These track which MCQs from which weeks go into a generated
    quiz, together with the answers that travel into the answer key.

Key Functions:
    - QuizQuestion.key: Stable "week:number" identifier
    - SelectionResult.question_count: Calculated from selected questions
    - SelectionResult.covered_topics: Topics represented in the quiz
    - SelectionResult.is_complete: Requested count reached

Dependencies:
    - dataclasses (std)
    - functools (std)
    - .questions

Used By:
    - builder.selection: Produces SelectionResult
    - builder.output: Renders quiz and answer key
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import FrozenSet

from .questions import AnswerKeyEntry, McqQuestion


@dataclass(frozen=True)
class QuizQuestion:
    """
    An MCQ chosen for a quiz, carried with its answer.

    Attributes:
        week: Week folder name the question came from
        question: The source question
        answer: Its paired answer key entry
        topic: Effective topic (question tag, else the fallback label)

    Invariants:
        - answer.letter is one of question.letters
    """

    week: str
    question: McqQuestion
    answer: AnswerKeyEntry
    topic: str

    def __post_init__(self) -> None:
        if self.answer.letter not in self.question.letters:
            raise ValueError(
                f"Answer {self.answer.letter!r} is not an option of "
                f"{self.week} question {self.question.number}"
            )

    @property
    def key(self) -> str:
        return f"{self.week}:{self.question.number}"

    def __repr__(self) -> str:
        return f"QuizQuestion({self.key!r}, topic={self.topic!r})"


@dataclass(frozen=True)
class SelectionResult:
    """
    Result of the quiz selection algorithm.

    Attributes:
        questions: Selected questions in quiz order
        target_count: Requested number of questions

    Invariants:
        - no question key appears twice
        - question_count <= target_count

    Example:
        >>> result = select_questions(candidates, config)
        >>> result.question_count
        20
        >>> result.is_complete
        True
    """

    questions: tuple[QuizQuestion, ...]
    target_count: int

    def __post_init__(self) -> None:
        keys = [q.key for q in self.questions]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate questions in selection: {keys}")
        if len(keys) > self.target_count:
            raise ValueError(
                f"Selected {len(keys)} questions, more than target {self.target_count}"
            )

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @cached_property
    def covered_topics(self) -> FrozenSet[str]:
        return frozenset(q.topic for q in self.questions)

    @property
    def is_complete(self) -> bool:
        return self.question_count == self.target_count

    @property
    def shortfall(self) -> int:
        return self.target_count - self.question_count

    def __repr__(self) -> str:
        return (
            f"SelectionResult(questions={self.question_count}/{self.target_count}, "
            f"topics={len(self.covered_topics)})"
        )
