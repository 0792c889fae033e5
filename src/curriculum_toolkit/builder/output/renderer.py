"""
Module: builder.output.renderer

Purpose:
    Render a quiz SelectionResult to PDF using ReportLab. Questions are
    laid out as wrapped text flowing down A4 pages; a question is never
    split across pages unless it is taller than a page.

Key Functions:
    - render_quiz_pdf(): Main rendering function

Key Classes:
    - PdfTextWriter: Cursor-based text layout shared with the answer key

Dependencies:
    - reportlab: PDF generation
    - core.models.selection: SelectionResult

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from curriculum_toolkit.core.models.selection import SelectionResult

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH_PT, A4_HEIGHT_PT = A4
MARGIN_PT = 56
BOTTOM_MARGIN_PT = 48  # Leaves room for the footer
BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
BODY_SIZE = 10.5
TITLE_SIZE = 16
LEADING = 14
OPTION_INDENT_PT = 18
QUESTION_GAP_PT = 12

# Footer configuration
FOOTER_FONT_SIZE = 7

# Characters the standard PDF fonts cannot show
_PDF_REPLACEMENTS = {
    "→": "->",
    "←": "<-",
    "⇒": "=>",
    "≤": "<=",
    "≥": ">=",
    "≠": "!=",
    "✓": "[x]",
    "✔": "[x]",
    "✗": "[ ]",
    " ": " ",
}


def _get_footer_text() -> str:
    """Get footer text with current version number."""
    from curriculum_toolkit import __version__

    return f"Generated with Curriculum Toolkit v{__version__}"


def pdf_safe(text: str) -> str:
    """Replace characters outside the standard font encoding."""
    for char, replacement in _PDF_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("cp1252", errors="replace").decode("cp1252")


class PdfTextWriter:
    """
    Flowing text layout on a ReportLab canvas.

    Tracks a vertical cursor, starts new pages when a block does not fit
    and draws the footer on every finished page.

    Example:
        >>> writer = PdfTextWriter(Path("quiz.pdf"))
        >>> writer.heading("Week 5 Quiz")
        >>> writer.block([("1. What does CSS stand for?", 0, BOLD_FONT)])
        >>> writer.save()
        1
    """

    def __init__(self, output_path: Path, *, show_footer: bool = True) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path = output_path
        self.show_footer = show_footer
        self.page_count = 1
        self._canvas = canvas.Canvas(str(output_path), pagesize=A4)
        self._canvas.setTitle(output_path.stem)
        self._y = A4_HEIGHT_PT - MARGIN_PT
        self._width = A4_WIDTH_PT - 2 * MARGIN_PT

    def heading(self, text: str, size: float = TITLE_SIZE) -> None:
        for line in simpleSplit(pdf_safe(text), BOLD_FONT, size, self._width):
            self._ensure_space(size + 4)
            self._canvas.setFont(BOLD_FONT, size)
            self._canvas.drawString(MARGIN_PT, self._y - size, line)
            self._y -= size + 4
        self._y -= LEADING / 2

    def paragraph(self, text: str, *, indent: float = 0, font: str = BODY_FONT) -> None:
        self.block([(text, indent, font)])

    def block(self, items: Sequence[Tuple[str, float, str]], *, gap: float = 0) -> None:
        """
        Draw (text, indent, font) items as one unit.

        The unit moves to a fresh page when it does not fit in the space
        left on the current one.
        """
        lines: List[Tuple[str, float, str]] = []
        for text, indent, font in items:
            for raw in pdf_safe(text).splitlines() or [""]:
                wrapped = simpleSplit(raw, font, BODY_SIZE, self._width - indent) or [""]
                lines.extend((segment, indent, font) for segment in wrapped)

        height = len(lines) * LEADING + gap
        if height <= A4_HEIGHT_PT - MARGIN_PT - BOTTOM_MARGIN_PT:
            self._ensure_space(height)
        for segment, indent, font in lines:
            self._ensure_space(LEADING)
            self._canvas.setFont(font, BODY_SIZE)
            self._canvas.drawString(MARGIN_PT + indent, self._y - BODY_SIZE, segment)
            self._y -= LEADING
        self._y -= gap

    def save(self) -> int:
        """Finish the document. Returns the page count."""
        self._finish_page()
        self._canvas.save()
        return self.page_count

    def _ensure_space(self, height: float) -> None:
        if self._y - height < BOTTOM_MARGIN_PT:
            self._finish_page()
            self._canvas.showPage()
            self.page_count += 1
            self._y = A4_HEIGHT_PT - MARGIN_PT

    def _finish_page(self) -> None:
        if self.show_footer:
            _draw_footer(self._canvas, A4_WIDTH_PT)


def _draw_footer(c: canvas.Canvas, page_width_pt: float) -> None:
    """
    Draw centered footer with version info, 15pt from the page bottom.

    Args:
        c: ReportLab canvas
        page_width_pt: Page width in points
    """
    footer_text = _get_footer_text()

    c.saveState()
    c.setFont("Helvetica", FOOTER_FONT_SIZE)
    c.setFillColorRGB(0.4, 0.4, 0.4)
    text_width = c.stringWidth(footer_text, "Helvetica", FOOTER_FONT_SIZE)
    c.drawString((page_width_pt - text_width) / 2, 15, footer_text)
    c.restoreState()


def render_quiz_pdf(
    selection: SelectionResult,
    output_path: Path,
    *,
    title: str = "Curriculum Quiz",
    show_footer: bool = True,
) -> int:
    """
    Render selected questions to a quiz PDF.

    Questions are numbered 1..N in quiz order; the source week and
    number appear only in the answer key.

    Args:
        selection: Selected questions
        output_path: Path to write PDF
        title: Title on the first page
        show_footer: Draw the version footer

    Returns:
        Number of pages written

    Example:
        >>> render_quiz_pdf(selection, Path("output/quiz.pdf"))
        3
    """
    if selection.question_count == 0:
        logger.warning("Empty selection, creating quiz with title only")

    writer = PdfTextWriter(output_path, show_footer=show_footer)
    writer.heading(title)
    writer.paragraph(
        f"{selection.question_count} questions. Choose one answer for each question."
    )
    writer.paragraph("Name: ______________________    Date: ____________")
    writer.paragraph("")

    for position, item in enumerate(selection.questions, start=1):
        items: List[Tuple[str, float, str]] = [(f"{position}. {item.question.stem}", 0, BOLD_FONT)]
        for letter, text in item.question.options:
            items.append((f"{letter}) {text}", OPTION_INDENT_PT, BODY_FONT))
        writer.block(items, gap=QUESTION_GAP_PT)

    pages = writer.save()
    logger.info(f"Rendered {selection.question_count} questions on {pages} pages to {output_path}")
    return pages
