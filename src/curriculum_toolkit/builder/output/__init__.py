"""
Module: builder.output

Purpose:
    Quiz output: quiz and answer key PDFs (ReportLab) and the optional
    markdown ZIP export.
"""

from .renderer import render_quiz_pdf, PdfTextWriter
from .answer_key import render_answer_key_pdf
from .zip_writer import write_quiz_zip

__all__ = [
    "render_quiz_pdf",
    "render_answer_key_pdf",
    "write_quiz_zip",
    "PdfTextWriter",
]
