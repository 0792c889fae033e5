"""
Module: builder.output.answer_key

Purpose:
    Render the answer key for a quiz: the correct letter and option text
    for each quiz position, the source week and question number, the
    topic, and the explanation from ``mcq-answers.md``.

Key Functions:
    - render_answer_key_pdf(): Write the answer key PDF
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from curriculum_toolkit.core.models.selection import SelectionResult

from .renderer import BODY_FONT, BOLD_FONT, OPTION_INDENT_PT, QUESTION_GAP_PT, PdfTextWriter

logger = logging.getLogger(__name__)


def render_answer_key_pdf(
    selection: SelectionResult,
    output_path: Path,
    *,
    title: str = "Curriculum Quiz",
    show_footer: bool = True,
) -> int:
    """
    Render the answer key PDF.

    Returns:
        Number of pages written
    """
    writer = PdfTextWriter(output_path, show_footer=show_footer)
    writer.heading(f"{title}: Answer Key")

    for position, item in enumerate(selection.questions, start=1):
        letter = item.answer.letter
        option = item.question.option_text(letter) or ""
        items: List[Tuple[str, float, str]] = [
            (f"{position}. {letter}) {option}", 0, BOLD_FONT),
            (f"{item.week} Q{item.question.number} | {item.topic}", OPTION_INDENT_PT, BODY_FONT),
        ]
        if item.answer.explanation:
            items.append((item.answer.explanation, OPTION_INDENT_PT, BODY_FONT))
        writer.block(items, gap=QUESTION_GAP_PT)

    pages = writer.save()
    logger.info(f"Rendered answer key for {selection.question_count} questions to {output_path}")
    return pages
