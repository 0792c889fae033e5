"""
Module: extractor.interviews

Purpose:
    Parse interview question files (``interview-questions.md``). The file
    is a sequence of per-student sets, each holding numbered questions
    with an optional difficulty and an ``Answer:`` paragraph:

        ## Student 3
        ### Q1 (Medium): What is dependency injection?
        **Answer:** The container supplies collaborators ...

    Set headings may say ``Student N`` or ``Set N``. Question headers may
    be headings, bold lines or unindented ``1.`` lines. Difficulty may
    sit in parentheses/brackets or after a dash.

Key Functions:
    - parse_interview_sets(): Parse a file on disk
    - parse_interview_text(): Parse text
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit.core.models.interviews import InterviewQuestion, InterviewSet

from .markdown import match_numbered_start, read_markdown, scan_markdown, strip_emphasis

logger = logging.getLogger(__name__)

_HEADING_PREFIX_RE = re.compile(r"^ {0,3}#{1,6}\s+")
_SET_RE = re.compile(r"\b(?:student|set)\s*#?\s*(\d+)\b", re.IGNORECASE)
_LEVELS = r"(?:very\s+)?(?:easy|medium|moderate|intermediate|hard|difficult|advanced|beginner|basic|expert)"
_DIFFICULTY_WRAPPED_RE = re.compile(rf"[\[(]\s*(?:difficulty\s*:\s*)?({_LEVELS})\s*[\])]", re.IGNORECASE)
# "- Hard: ..." or "Hard: ..." straight after the question number
_DIFFICULTY_LEAD_RE = re.compile(
    rf"^\s*(?:[-–—]\s*({_LEVELS})\b\s*[:.\-–—]?|({_LEVELS})\s*[:\-–—])\s*", re.IGNORECASE
)
_DIFFICULTY_TAIL_RE = re.compile(rf"\s+[-–—]\s*({_LEVELS})\s*$", re.IGNORECASE)
_DIFFICULTY_LINE_RE = re.compile(r"^\s*(?:[-*+]\s+)?difficulty\s*:\s*(.+?)\s*$", re.IGNORECASE)
_ANSWER_RE = re.compile(r"^\s*(?:[-*+>]\s+)?(?:model\s+|sample\s+|expected\s+)?answer\s*:\s*(.*)$", re.IGNORECASE)
_QUESTION_LABEL_RE = re.compile(r"^\s*(?:[-*+]\s+)?question\s*:\s*(.*)$", re.IGNORECASE)
_RULE_RE = re.compile(r"^\s*(?:-{3,}|\*{3,}|_{3,})\s*$")


def _split_difficulty(text: str) -> tuple[str, str]:
    """
    Pull a difficulty marker out of a question header remainder.

    Returns:
        (prompt, difficulty); difficulty is "" when absent

    Example:
        >>> _split_difficulty("(Easy): What is a bean?")
        ('What is a bean?', 'Easy')
        >>> _split_difficulty("What is a bean? - Hard")
        ('What is a bean?', 'Hard')
    """
    wrapped = _DIFFICULTY_WRAPPED_RE.search(text)
    if wrapped and (wrapped.start() == 0 or not text[wrapped.end():].strip(" :.-–—")):
        rest = (text[: wrapped.start()] + text[wrapped.end():]).strip(" :-–—")
        return rest, wrapped.group(1).strip().title()
    lead = _DIFFICULTY_LEAD_RE.match(text)
    if lead:
        return text[lead.end():].strip(), (lead.group(1) or lead.group(2)).strip().title()
    tail = _DIFFICULTY_TAIL_RE.search(text)
    if tail:
        return text[: tail.start()].strip(), tail.group(1).strip().title()
    return text.strip(" :-–—"), ""


@dataclass
class _QuestionDraft:
    number: int
    line: int
    prompt: List[str] = field(default_factory=list)
    answer: List[str] = field(default_factory=list)
    difficulty: str = ""
    in_answer: bool = False

    def build(self) -> InterviewQuestion:
        return InterviewQuestion(
            number=self.number,
            prompt=" ".join(self.prompt).strip(),
            answer="\n".join(self.answer).strip(),
            difficulty=self.difficulty,
            line=self.line,
        )


@dataclass
class _SetDraft:
    student: int
    label: str
    line: int
    questions: List[_QuestionDraft] = field(default_factory=list)

    def build(self) -> InterviewSet:
        return InterviewSet(
            student=self.student,
            label=self.label,
            questions=tuple(q.build() for q in self.questions),
            line=self.line,
        )


def _question_start(raw: str, expected: int) -> Optional[tuple[int, str]]:
    line = raw.rstrip()
    heading = _HEADING_PREFIX_RE.match(line)
    if heading:
        start = match_numbered_start(strip_emphasis(line[heading.end():]))
        return (start[0], start[1]) if start else None
    if line.lstrip().startswith(("**", "__")):
        start = match_numbered_start(strip_emphasis(line))
        return (start[0], start[1]) if start else None
    if line[:1].isspace():
        return None
    start = match_numbered_start(line)
    if not start:
        return None
    number, rest, explicit = start
    # Bare "2." lines are often lists inside answers; accept only the next number
    if not explicit and number != expected:
        return None
    return number, strip_emphasis(rest)


def parse_interview_sets(path: Path, rel_path: str) -> tuple[InterviewSet, ...]:
    """
    Parse an interview question file.

    Raises:
        ParseError: If the file cannot be read
    """
    return parse_interview_text(read_markdown(path, rel_path), rel_path)


def parse_interview_text(text: str, rel_path: str) -> tuple[InterviewSet, ...]:
    """
    Parse interview question text into sets.

    Questions before the first set heading are ignored (logged at debug).

    Example:
        >>> sets = parse_interview_text(
        ...     "## Student 1\\n### Q1 (Easy): What is Spring?\\nAnswer: A framework.\\n",
        ...     "week-06/interview-questions.md")
        >>> sets[0].questions[0].difficulty
        'Easy'
    """
    scan = scan_markdown(text)
    sets: List[_SetDraft] = []
    current_set: Optional[_SetDraft] = None
    current: Optional[_QuestionDraft] = None
    orphans = 0

    for lineno, raw in scan.text_lines():
        heading = _HEADING_PREFIX_RE.match(raw)
        if heading:
            heading_text = strip_emphasis(raw[heading.end():])
            set_match = _SET_RE.search(heading_text)
            if set_match and match_numbered_start(heading_text) is None:
                current_set = _SetDraft(int(set_match.group(1)), heading_text, lineno)
                sets.append(current_set)
                current = None
                continue

        expected = len(current_set.questions) + 1 if current_set else 1
        start = _question_start(raw, expected)
        if start:
            if current_set is None:
                orphans += 1
                continue
            number, rest = start
            prompt, difficulty = _split_difficulty(rest)
            current = _QuestionDraft(number=number, line=lineno, difficulty=difficulty)
            answer = _ANSWER_RE.match(prompt)
            if answer:
                current.in_answer = True
                if answer.group(1).strip():
                    current.answer.append(answer.group(1).strip())
            elif prompt:
                current.prompt.append(prompt)
            current_set.questions.append(current)
            continue

        if heading:
            # Any other heading ends the current question
            current = None
            continue
        if current is None or not raw.strip() or _RULE_RE.match(raw):
            continue

        plain = strip_emphasis(raw)
        answer = _ANSWER_RE.match(plain)
        if answer:
            current.in_answer = True
            if answer.group(1).strip():
                current.answer.append(answer.group(1).strip())
            continue
        difficulty = _DIFFICULTY_LINE_RE.match(plain)
        if difficulty and not current.in_answer:
            # The question header wins over a later Difficulty: line
            current.difficulty = current.difficulty or difficulty.group(1).strip().title()
            continue
        label = _QUESTION_LABEL_RE.match(plain)
        if label and not current.in_answer:
            current.prompt.append(label.group(1).strip())
            continue

        if current.in_answer:
            current.answer.append(plain)
        elif not current.prompt:
            current.prompt.append(plain)
        else:
            # Unlabelled text after the prompt is the answer
            current.in_answer = True
            current.answer.append(plain)

    if orphans:
        logger.debug(f"{rel_path}: {orphans} numbered lines before the first set heading ignored")
    result = tuple(s.build() for s in sets)
    logger.debug(f"Parsed {len(result)} interview sets from {rel_path}")
    return result
