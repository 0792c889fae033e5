"""
Module: extractor.mcq

Purpose:
    Parse MCQ banks (``mcq.md``) and their answer keys
    (``mcq-answers.md``). Both files are hand-written, so the parsers
    accept the numbering and option styles authors actually use:

    Questions:   ``### Q1. Stem``, ``## Question 1: Stem``, ``**1. Stem**``, ``1. Stem``
    Options:     ``A) text``, ``A. text``, ``(A) text``, ``- a) text``
    Topic tag:   ``**Topic:** CSS`` line, or ``[Topic: CSS]`` after the stem
    Answers:     ``### Q1`` + ``**Answer: B**``, ``1. B) text``, ``Q1: B``

    Malformed content (three options, a missing letter) is modelled as-is
    and left for the linter; only unreadable files raise.

Key Functions:
    - parse_mcq_bank(): Parse mcq.md from disk
    - parse_mcq_text(): Parse MCQ text
    - parse_answer_key(): Parse mcq-answers.md from disk
    - parse_answer_text(): Parse answer key text

Dependencies:
    - re (std)
    - extractor.markdown: Scanning helpers

Used By:
    - loading.loader: Week folders
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit.core.models.questions import (
    AnswerKey,
    AnswerKeyEntry,
    McqBank,
    McqQuestion,
)

from .markdown import match_numbered_start, read_markdown, scan_markdown, strip_emphasis

logger = logging.getLogger(__name__)

_HEADING_PREFIX_RE = re.compile(r"^ {0,3}#{1,6}\s+")
_OPTION_RE = re.compile(r"^\s*(?:[-*+]\s+)?\(?([A-Za-z])[).:]\s+(.+?)\s*$")
_TOPIC_LINE_RE = re.compile(r"^\s*(?:[-*+]\s+)?(?:topic|tags?)\s*:\s*(.+?)\s*$", re.IGNORECASE)
_TOPIC_SUFFIX_RE = re.compile(r"\s*[\[(]\s*(?:topic|tag)\s*:\s*([^\])]+?)\s*[\])]\s*$", re.IGNORECASE)
_ANSWER_LABEL_RE = re.compile(
    r"^\s*(?:[-*+]\s+)?(?:correct\s+)?answer\s*(?::|is\b\s*:?)\s*\(?([A-Za-z])\b\)?[).:]?\s*(.*)$",
    re.IGNORECASE,
)
_LEADING_LETTER_RE = re.compile(r"^\(?([A-Za-z])(?:\)|[.:]|\s*$|\s+[-–—])\s*(.*)$")
_EXPLANATION_LABEL_RE = re.compile(r"^\s*(?:[-*+]\s+)?(?:explanation|reason|why)\s*:\s*", re.IGNORECASE)
_RULE_RE = re.compile(r"^\s*(?:-{3,}|\*{3,}|_{3,})\s*$")


@dataclass
class _Start:
    number: int
    rest: str
    line: int
    explicit: bool


def _item_start(raw_line: str, lineno: int) -> Optional[_Start]:
    """
    Recognise a numbered question/answer start on one source line.

    Headings and bold-led lines may use any numbering form; a bare
    ``1.`` line only counts when it is not indented.
    """
    line = raw_line.rstrip()
    heading = _HEADING_PREFIX_RE.match(line)
    if heading:
        text = strip_emphasis(line[heading.end():])
        start = match_numbered_start(text)
        return _Start(start[0], start[1], lineno, True) if start else None

    if line.lstrip().startswith("**") or line.lstrip().startswith("__"):
        start = match_numbered_start(strip_emphasis(line))
        return _Start(start[0], start[1], lineno, True) if start else None

    if line[:1].isspace():
        return None
    start = match_numbered_start(line)
    if start:
        return _Start(start[0], strip_emphasis(start[1]), lineno, start[2])
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Question Bank
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class _QuestionDraft:
    number: int
    line: int
    stem_lines: List[str] = field(default_factory=list)
    options: List[List[str]] = field(default_factory=list)  # [letter, text]
    topic: str = ""
    closed: bool = False

    def build(self) -> McqQuestion:
        stem = "\n".join(self.stem_lines).strip()
        return McqQuestion(
            number=self.number,
            stem=stem,
            options=tuple((letter, text.strip()) for letter, text in self.options),
            topic=self.topic,
            line=self.line,
        )


def _opens_question(start: _Start, current: Optional[_QuestionDraft]) -> bool:
    # Bare "N." inside an open stem is a numbered list, not the next question
    if current is None or current.closed:
        return True
    return bool(current.options) and start.number == current.number + 1


def parse_mcq_bank(path: Path, rel_path: str) -> McqBank:
    """
    Parse an MCQ bank file.

    Raises:
        ParseError: If the file cannot be read
    """
    return parse_mcq_text(read_markdown(path, rel_path), rel_path)


def parse_mcq_text(text: str, rel_path: str) -> McqBank:
    """
    Parse MCQ bank text.

    Example:
        >>> bank = parse_mcq_text("### Q1. Pick one\\nA) x\\nB) y\\n", "week-05/mcq.md")
        >>> bank.questions[0].letters
        ('A', 'B')
    """
    scan = scan_markdown(text)
    drafts: List[_QuestionDraft] = []
    current: Optional[_QuestionDraft] = None

    for lineno, raw in scan.text_lines():
        start = _item_start(raw, lineno)
        if start and not start.explicit and not _opens_question(start, current):
            start = None

        if start:
            rest = start.rest
            topic = ""
            suffix = _TOPIC_SUFFIX_RE.search(rest)
            if suffix:
                topic = suffix.group(1).strip()
                rest = rest[: suffix.start()].strip()
            current = _QuestionDraft(number=start.number, line=lineno, topic=topic)
            if rest:
                current.stem_lines.append(rest)
            drafts.append(current)
            continue

        if current is None or current.closed:
            continue

        stripped = raw.strip()
        if not stripped or _RULE_RE.match(raw):
            continue
        if _HEADING_PREFIX_RE.match(raw):
            # A heading that is not a question ends the current question
            current.closed = True
            continue

        plain = strip_emphasis(raw)
        topic_match = _TOPIC_LINE_RE.match(plain)
        if topic_match:
            current.topic = topic_match.group(1).strip()
            continue
        if _ANSWER_LABEL_RE.match(plain):
            # Inline answers belong in the answer key, not in option text
            continue

        option = _OPTION_RE.match(plain)
        if option:
            letter = option.group(1).upper()
            if letter in {o[0] for o in current.options}:
                current.options[-1][1] += " " + plain
            else:
                current.options.append([letter, option.group(2)])
            continue

        if current.options:
            current.options[-1][1] += " " + plain
        else:
            current.stem_lines.append(plain)

    questions = []
    for draft in drafts:
        questions.append(draft.build())
    logger.debug(f"Parsed {len(questions)} questions from {rel_path}")
    return McqBank(path=rel_path, questions=tuple(questions))


# ─────────────────────────────────────────────────────────────────────────────
# Answer Key
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class _AnswerDraft:
    number: int
    line: int
    letter: str = ""
    explanation: List[str] = field(default_factory=list)

    def build(self) -> AnswerKeyEntry:
        return AnswerKeyEntry(
            number=self.number,
            letter=self.letter,
            explanation="\n".join(self.explanation).strip(),
            line=self.line,
        )


def _find_letter(text: str, allow_leading: bool) -> Optional[tuple[str, str]]:
    """
    Find an answer letter in one line of answer-key text.

    A leading letter (``B) ...``) wins over an ``Answer: X`` label, so
    the word "answer" later in an explanation never overrides it.

    Returns:
        (letter, trailing text) or None
    """
    if allow_leading:
        leading = _LEADING_LETTER_RE.match(text.strip())
        if leading:
            return leading.group(1).upper(), leading.group(2).strip(" -–—:.")
    label = _ANSWER_LABEL_RE.match(text)
    if label:
        return label.group(1).upper(), label.group(2).strip(" -–—:.")
    return None


def parse_answer_key(path: Path, rel_path: str) -> AnswerKey:
    """
    Parse an answer key file.

    Raises:
        ParseError: If the file cannot be read
    """
    return parse_answer_text(read_markdown(path, rel_path), rel_path)


def parse_answer_text(text: str, rel_path: str) -> AnswerKey:
    """
    Parse answer key text.

    A bare ``N.`` line opens an entry only when the same line names the
    letter, so numbered lists inside explanations stay explanation text.

    Example:
        >>> key = parse_answer_text("### Q1\\n**Answer: C**\\nBecause.\\n", "week-05/mcq-answers.md")
        >>> key.entries[0].letter, key.entries[0].explanation
        ('C', 'Because.')
    """
    scan = scan_markdown(text)
    drafts: List[_AnswerDraft] = []
    current: Optional[_AnswerDraft] = None

    for lineno, raw in scan.text_lines():
        start = _item_start(raw, lineno)
        if start and not start.explicit and _find_letter(start.rest, allow_leading=True) is None:
            start = None

        if start:
            current = _AnswerDraft(number=start.number, line=lineno)
            drafts.append(current)
            found = _find_letter(start.rest, allow_leading=True)
            if found:
                current.letter, trailing = found
                if trailing:
                    current.explanation.append(trailing)
            continue

        if current is None:
            continue
        stripped = raw.strip()
        if not stripped or _RULE_RE.match(raw):
            continue
        if _HEADING_PREFIX_RE.match(raw):
            current = None
            continue

        plain = strip_emphasis(raw)
        if not current.letter:
            found = _find_letter(plain, allow_leading=False)
            if found:
                current.letter, trailing = found
                if trailing:
                    current.explanation.append(_EXPLANATION_LABEL_RE.sub("", trailing))
                continue
        current.explanation.append(_EXPLANATION_LABEL_RE.sub("", plain))

    entries = tuple(draft.build() for draft in drafts)
    logger.debug(f"Parsed {len(entries)} answers from {rel_path}")
    return AnswerKey(path=rel_path, entries=entries)
