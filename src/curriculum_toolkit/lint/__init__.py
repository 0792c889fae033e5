"""
Module: lint

Purpose:
    Content-integrity checks over a loaded corpus: MCQ/answer alignment,
    interview set sizes, document structure, links and module references,
    and demo entry points.

Key Functions:
    - lint_corpus(): Run the rules, return a LintReport
    - render(): Text or JSON output

Used By:
    - cli: ``curriculum lint``
"""

from .issues import ERROR, WARNING, Issue, LintReport
from .rules import RULES, Rule
from .runner import lint_corpus, selected_rules
from .report import FORMATS, render, render_json, render_text

__all__ = [
    "ERROR",
    "WARNING",
    "Issue",
    "LintReport",
    "RULES",
    "Rule",
    "lint_corpus",
    "selected_rules",
    "FORMATS",
    "render",
    "render_json",
    "render_text",
]
