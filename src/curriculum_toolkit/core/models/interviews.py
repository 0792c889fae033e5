"""
Module: interviews

Purpose:
    Interview question sets. Each set is assigned to one student number
    and holds progressively harder question/answer pairs (five in the
    reference curriculum).

Dependencies:
    - dataclasses (std)

Used By:
    - extractor.interviews: Builds sets from markdown
    - lint.rules: Set size and numbering checks
    - keyword.index: Prompt and answer search
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InterviewQuestion:
    """
    One interview question with its model answer.

    Attributes:
        number: Position inside the set as written (1-based)
        prompt: Question text
        answer: Model answer, empty when the author left none
        difficulty: Free-text difficulty ("Easy", "Medium"), may be empty
        line: 1-based line of the question
    """

    number: int
    prompt: str
    answer: str = ""
    difficulty: str = ""
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "prompt": self.prompt,
            "answer": self.answer,
            "difficulty": self.difficulty,
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: dict) -> InterviewQuestion:
        return cls(
            number=data["number"],
            prompt=data["prompt"],
            answer=data.get("answer", ""),
            difficulty=data.get("difficulty", ""),
            line=data.get("line", 0),
        )


@dataclass(frozen=True)
class InterviewSet:
    """
    Questions assigned to a single student (immutable).

    Attributes:
        student: Student number (>= 1)
        label: Heading text, e.g. "Student 7 - Priya"
        questions: Questions in source order
        line: 1-based line of the set heading

    Example:
        >>> s = InterviewSet(student=3, label="Student 3", questions=qs)
        >>> s.size
        5
    """

    student: int
    label: str
    questions: tuple[InterviewQuestion, ...] = ()
    line: int = 0

    def __post_init__(self) -> None:
        if self.student < 1:
            raise ValueError(f"student number must be >= 1: {self.student}")

    @property
    def size(self) -> int:
        return len(self.questions)

    def to_dict(self) -> dict:
        return {
            "student": self.student,
            "label": self.label,
            "questions": [q.to_dict() for q in self.questions],
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: dict) -> InterviewSet:
        return cls(
            student=data["student"],
            label=data.get("label", ""),
            questions=tuple(InterviewQuestion.from_dict(q) for q in data.get("questions", [])),
            line=data.get("line", 0),
        )

    def __repr__(self) -> str:
        return f"InterviewSet(student={self.student}, size={self.size})"
