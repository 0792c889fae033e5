"""
Module: lint.rules

Purpose:
    Content-integrity rules for a loaded corpus. Each rule is a function
    ``(corpus, settings) -> Iterable[Issue]`` registered under a stable
    code with a default severity. Rules only read the Corpus; the files
    on disk are touched solely to check that link targets exist.

Key Functions:
    - rule(): Registration decorator
    - RULES: code -> Rule registry, in registration order
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator

from curriculum_toolkit.common.path_utils import resolve_link
from curriculum_toolkit.common.settings import LintSettings
from curriculum_toolkit.core.models import Corpus, TopicDocument

from .issues import ERROR, WARNING, Issue

Check = Callable[[Corpus, LintSettings], Iterable[Issue]]


@dataclass(frozen=True)
class Rule:
    """A registered lint rule."""

    code: str
    severity: str
    description: str
    check: Check


RULES: Dict[str, Rule] = {}


def rule(code: str, severity: str, description: str) -> Callable[[Check], Check]:
    def register(check: Check) -> Check:
        if code in RULES:
            raise ValueError(f"Duplicate lint rule code: {code}")
        RULES[code] = Rule(code, severity, description, check)
        return check
    return register


def _issue(code: str, path: str, line: int, message: str, **context) -> Issue:
    return Issue(code=code, severity=RULES[code].severity, path=path, line=line, message=message, context=context)


_WHITESPACE_RE = re.compile(r"\s+")


def _normalise_prompt(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip().rstrip("?.!").lower()


# ─────────────────────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────────────────────

@rule("parse-error", ERROR, "A corpus file could not be read")
def check_parse_errors(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for failure in corpus.load_errors:
        yield _issue("parse-error", failure.path, failure.line, failure.message)


# ─────────────────────────────────────────────────────────────────────────────
# MCQ banks and answer keys
# ─────────────────────────────────────────────────────────────────────────────

@rule("mcq-answer-missing", ERROR, "An MCQ bank has no answer key, or an answer key has no bank")
def check_answer_file_present(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        if week.mcq_bank and week.answer_key is None:
            yield _issue(
                "mcq-answer-missing", week.mcq_bank.path, 0,
                f"{settings.mcq_filename} has no {settings.answers_filename} beside it",
                missing=f"{week.name}/{settings.answers_filename}",
            )
        elif week.answer_key and week.mcq_bank is None:
            yield _issue(
                "mcq-answer-missing", week.answer_key.path, 0,
                f"{settings.answers_filename} has no {settings.mcq_filename} beside it",
                missing=f"{week.name}/{settings.mcq_filename}",
            )


@rule("mcq-count-mismatch", ERROR, "Question count differs from answer count")
def check_answer_count(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        if not (week.mcq_bank and week.answer_key):
            continue
        questions, answers = len(week.mcq_bank), len(week.answer_key)
        if questions != answers:
            yield _issue(
                "mcq-count-mismatch", week.answer_key.path, 0,
                f"{questions} questions but {answers} answers",
                questions=questions, answers=answers,
            )


@rule("mcq-ordinal-mismatch", ERROR, "Question and answer at the same position carry different numbers")
def check_answer_ordinals(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        if not (week.mcq_bank and week.answer_key):
            continue
        for ordinal, question, answer in week.mcq_bank.paired_with(week.answer_key):
            if question is None or answer is None:
                continue
            if question.number != answer.number:
                yield _issue(
                    "mcq-ordinal-mismatch", week.answer_key.path, answer.line,
                    f"answer #{ordinal} is numbered {answer.number} but question #{ordinal} is {question.number}",
                    ordinal=ordinal, question_number=question.number, answer_number=answer.number,
                )


@rule("mcq-numbering", WARNING, "Question numbers are not contiguous from 1 or repeat")
def check_question_numbering(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        bank = week.mcq_bank
        if not bank:
            continue
        seen: Dict[int, int] = {}
        gap_reported = False
        for ordinal, question in enumerate(bank.questions, start=1):
            if question.number in seen:
                yield _issue(
                    "mcq-numbering", bank.path, question.line,
                    f"question number {question.number} repeats (first on line {seen[question.number]})",
                    number=question.number,
                )
            else:
                seen[question.number] = question.line
                if question.number != ordinal and not gap_reported:
                    gap_reported = True
                    yield _issue(
                        "mcq-numbering", bank.path, question.line,
                        f"expected question {ordinal}, found {question.number}",
                        expected=ordinal, found=question.number,
                    )


@rule("mcq-option-count", ERROR, "A question does not have the configured options lettered A.. in order")
def check_option_count(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    expected = tuple(string.ascii_uppercase[: settings.mcq_option_count])
    for week in corpus.weeks:
        if not week.mcq_bank:
            continue
        for question in week.mcq_bank.questions:
            if question.letters == expected:
                continue
            if len(question.options) != len(expected):
                message = f"question {question.number} has {len(question.options)} options, expected {len(expected)}"
            else:
                message = (
                    f"question {question.number} options are lettered {''.join(question.letters)}, "
                    f"expected {''.join(expected)}"
                )
            yield _issue(
                "mcq-option-count", week.mcq_bank.path, question.line, message,
                number=question.number, letters=list(question.letters),
            )


@rule("mcq-answer-letter", ERROR, "An answer letter is not among the paired question's options")
def check_answer_letters(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        if not (week.mcq_bank and week.answer_key):
            continue
        for _, question, answer in week.mcq_bank.paired_with(week.answer_key):
            if question is None or answer is None:
                continue
            if not answer.letter:
                yield _issue(
                    "mcq-answer-letter", week.answer_key.path, answer.line,
                    f"answer {answer.number} names no option letter",
                    number=answer.number,
                )
            elif answer.letter not in question.letters:
                yield _issue(
                    "mcq-answer-letter", week.answer_key.path, answer.line,
                    f"answer {answer.number} is {answer.letter} but question {question.number} "
                    f"offers {''.join(question.letters) or 'no options'}",
                    number=answer.number, letter=answer.letter,
                )


@rule("mcq-missing-topic", WARNING, "A question has no topic tag")
def check_topic_tags(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    if not settings.require_topic_tags:
        return
    for week in corpus.weeks:
        if not week.mcq_bank:
            continue
        for question in week.mcq_bank.questions:
            if not question.topic.strip():
                yield _issue(
                    "mcq-missing-topic", week.mcq_bank.path, question.line,
                    f"question {question.number} has no topic tag",
                    number=question.number,
                )


@rule("mcq-missing-explanation", WARNING, "An answer key entry has no explanation")
def check_explanations(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        if not week.answer_key:
            continue
        for entry in week.answer_key.entries:
            if not entry.explanation.strip():
                yield _issue(
                    "mcq-missing-explanation", week.answer_key.path, entry.line,
                    f"answer {entry.number} has no explanation",
                    number=entry.number,
                )


# ─────────────────────────────────────────────────────────────────────────────
# Interview sets
# ─────────────────────────────────────────────────────────────────────────────

@rule("interview-set-size", ERROR, "An interview set does not hold the configured number of questions")
def check_set_size(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        for interview_set in week.interview_sets:
            if interview_set.size != settings.interview_set_size:
                yield _issue(
                    "interview-set-size", week.interview_path or week.name, interview_set.line,
                    f"student {interview_set.student} set has {interview_set.size} questions, "
                    f"expected {settings.interview_set_size}",
                    student=interview_set.student, size=interview_set.size,
                )


@rule("interview-set-count", ERROR, "A week's interview set count differs from the configured count")
def check_set_count(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week_name, expected in sorted(settings.expected_interview_sets.items()):
        week = corpus.find_week(week_name)
        if week is None:
            continue
        found = len(week.interview_sets)
        if found != expected:
            yield _issue(
                "interview-set-count", week.interview_path or week.name, 0,
                f"{found} interview sets, expected {expected}",
                found=found, expected=expected,
            )


@rule("interview-student-numbering", ERROR, "Student numbers repeat or are not 1..N")
def check_student_numbering(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        path = week.interview_path or week.name
        seen: Dict[int, int] = {}
        for interview_set in week.interview_sets:
            if interview_set.student in seen:
                yield _issue(
                    "interview-student-numbering", path, interview_set.line,
                    f"student {interview_set.student} already has a set (line {seen[interview_set.student]})",
                    student=interview_set.student,
                )
            else:
                seen[interview_set.student] = interview_set.line
        missing = sorted(set(range(1, len(seen) + 1)) - set(seen))
        if missing:
            yield _issue(
                "interview-student-numbering", path, 0,
                f"student numbers are not 1..{len(seen)}; missing {missing}",
                missing=missing,
            )


@rule("interview-missing-answer", WARNING, "An interview question has no answer text")
def check_interview_answers(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        for interview_set in week.interview_sets:
            for question in interview_set.questions:
                if not question.answer.strip():
                    yield _issue(
                        "interview-missing-answer", week.interview_path or week.name, question.line,
                        f"student {interview_set.student} question {question.number} has no answer",
                        student=interview_set.student, number=question.number,
                    )


@rule("interview-duplicate-question", WARNING, "The same interview prompt appears in two sets")
def check_duplicate_prompts(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for week in corpus.weeks:
        first_seen: Dict[str, int] = {}
        for interview_set in week.interview_sets:
            for question in interview_set.questions:
                key = _normalise_prompt(question.prompt)
                if not key:
                    continue
                owner = first_seen.setdefault(key, interview_set.student)
                if owner != interview_set.student:
                    yield _issue(
                        "interview-duplicate-question", week.interview_path or week.name, question.line,
                        f"student {interview_set.student} question {question.number} repeats a "
                        f"question from student {owner}",
                        student=interview_set.student, first_student=owner,
                    )


# ─────────────────────────────────────────────────────────────────────────────
# Topic documents
# ─────────────────────────────────────────────────────────────────────────────

@rule("topic-missing-title", ERROR, "A topic document has no level-1 title")
def check_titles(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for doc in corpus.all_documents:
        if not doc.title:
            yield _issue("topic-missing-title", doc.path, 1, "document has no level-1 title")


@rule("topic-missing-overview", WARNING, "A module document has no Overview section")
def check_overviews(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for doc in corpus.all_documents:
        if doc.module is not None and not doc.has_overview:
            yield _issue("topic-missing-overview", doc.path, 0, "module document has no Overview section")


@rule("topic-missing-checklist", WARNING, "A module document has no Summary Checklist")
def check_checklists(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for doc in corpus.all_documents:
        if doc.module is not None and not doc.has_summary_checklist:
            yield _issue("topic-missing-checklist", doc.path, 0, "module document has no Summary Checklist")


@rule("markdown-unclosed-fence", ERROR, "A code fence is never closed")
def check_fences(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for doc in corpus.all_documents:
        if doc.unclosed_fence_line is not None:
            yield _issue(
                "markdown-unclosed-fence", doc.path, doc.unclosed_fence_line,
                "code fence is never closed",
            )


def _broken_links(corpus: Corpus, doc: TopicDocument, links) -> Iterator[tuple]:
    for link in links:
        target = link.path_part
        if link.is_external or not target:
            continue
        resolved = resolve_link(doc.path, target, corpus.root)
        if resolved is None:
            yield link, "points outside the corpus"
        elif not resolved.exists():
            yield link, "does not exist"


@rule("next-steps-broken-link", ERROR, "A Next Steps link does not resolve")
def check_next_steps_links(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for doc in corpus.all_documents:
        for link, reason in _broken_links(corpus, doc, doc.next_steps):
            yield _issue(
                "next-steps-broken-link", doc.path, link.line,
                f"Next Steps link {link.target!r} {reason}",
                target=link.target,
            )


@rule("broken-link", WARNING, "A relative link does not resolve")
def check_links(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for doc in corpus.all_documents:
        next_steps = set(doc.next_steps)
        others = [link for link in doc.links if link not in next_steps]
        for link, reason in _broken_links(corpus, doc, others):
            yield _issue(
                "broken-link", doc.path, link.line,
                f"link {link.target!r} {reason}",
                target=link.target,
            )


@rule("module-reference-unknown", ERROR, "A 'Module N' reference names no existing module")
def check_module_refs(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    known = corpus.module_numbers
    for doc in corpus.all_documents:
        for number, line in doc.module_refs:
            if number not in known:
                yield _issue(
                    "module-reference-unknown", doc.path, line,
                    f"Module {number} is referenced but no {number:02d}-* directory exists",
                    module=number,
                )


# ─────────────────────────────────────────────────────────────────────────────
# Demo projects
# ─────────────────────────────────────────────────────────────────────────────

@rule("demo-missing-entrypoint", ERROR, "A demo service has no @SpringBootApplication class")
def check_demo_entrypoints(corpus: Corpus, settings: LintSettings) -> Iterator[Issue]:
    for stage in corpus.demo_stages:
        for service in stage.services:
            if stage.entrypoints.get(service):
                continue
            path = stage.path if service == stage.name else f"{stage.path}/{service}"
            yield _issue(
                "demo-missing-entrypoint", path, 0,
                f"service {service} has no @SpringBootApplication class",
                stage=stage.name, service=service,
            )
