"""
Module: builder.output.zip_writer

Purpose:
    Export a quiz as editable markdown in a ZIP archive, for teachers
    who want to adapt questions before printing.

Key Functions:
    - write_quiz_zip(): Main entry point

Dependencies:
    - zipfile (std)
    - core.models.selection: SelectionResult

Used By:
    - builder.controller: Build pipeline (optional output)
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import List

from curriculum_toolkit.core.models.selection import SelectionResult

logger = logging.getLogger(__name__)

QUIZ_MD = "quiz.md"
ANSWERS_MD = "answers.md"
README = "README.txt"


def zip_members(include_answers: bool = True) -> List[str]:
    """Names written by write_quiz_zip, in archive order."""
    members = [README, QUIZ_MD]
    if include_answers:
        members.append(ANSWERS_MD)
    return members


def write_quiz_zip(
    result: SelectionResult,
    output_path: Path,
    *,
    title: str = "Curriculum Quiz",
    include_answers: bool = True,
) -> Path:
    """
    Export the quiz as markdown in a ZIP archive.

    Creates a ZIP file with structure:
        quiz.zip
        ├── README.txt     # Summary and question list
        ├── quiz.md        # Questions and options
        └── answers.md     # Letters and explanations (optional)

    Args:
        result: SelectionResult with selected questions
        output_path: Path for .zip file (will append .zip if missing)
        title: Quiz title
        include_answers: Whether to include answers.md

    Returns:
        Path to created ZIP file
    """
    if not output_path.suffix == ".zip":
        output_path = output_path.with_suffix(".zip")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Creating ZIP export at {output_path}")

    with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(README, _generate_readme(result, title))
        zf.writestr(QUIZ_MD, _quiz_markdown(result, title))
        if include_answers:
            zf.writestr(ANSWERS_MD, _answers_markdown(result, title))

    return output_path


def _quiz_markdown(result: SelectionResult, title: str) -> str:
    lines = [f"# {title}", ""]
    for position, item in enumerate(result.questions, start=1):
        lines.append(f"### Q{position}. {item.question.stem}")
        lines.append(f"**Topic:** {item.topic}")
        lines.append("")
        for letter, text in item.question.options:
            lines.append(f"{letter}) {text}")
        lines.append("")
    return "\n".join(lines)


def _answers_markdown(result: SelectionResult, title: str) -> str:
    lines = [f"# {title}: Answers", ""]
    for position, item in enumerate(result.questions, start=1):
        lines.append(f"### Q{position}")
        lines.append(f"**Answer: {item.answer.letter}**")
        if item.answer.explanation:
            lines.append("")
            lines.append(item.answer.explanation)
        lines.append("")
    return "\n".join(lines)


def _generate_readme(result: SelectionResult, title: str) -> str:
    """Generate README.txt content."""
    lines = [
        f"{title} - Exported Questions",
        "=" * 50,
        "",
        f"Questions: {result.question_count} (requested {result.target_count})",
        f"Topics: {', '.join(sorted(result.covered_topics))}",
        "",
        "=" * 50,
        "Question List:",
        "",
    ]
    for position, item in enumerate(result.questions, start=1):
        lines.append(f"{position}. {item.week} Q{item.question.number}")
        lines.append(f"   Topic: {item.topic}")
        lines.append("")

    lines.extend([
        "=" * 50,
        "Usage:",
        f"- {QUIZ_MD} holds the questions, numbered in quiz order.",
        f"- {ANSWERS_MD} (when present) uses the same numbering.",
        "",
    ])
    return "\n".join(lines)
