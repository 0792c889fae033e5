"""Text and JSON rendering of lint reports."""

from __future__ import annotations

import json

from .issues import LintReport

FORMATS = ("text", "json")


def render_text(report: LintReport) -> str:
    """
    One ``path:line: severity code message`` line per issue plus a summary.

    Example:
        week-05/mcq-answers.md:0: error mcq-count-mismatch 40 questions but 39 answers
        1 error, 0 warnings
    """
    lines = [str(issue) for issue in report.issues]
    errors = report.error_count
    warnings = report.warning_count
    lines.append(
        f"{errors} error{'s' if errors != 1 else ''}, "
        f"{warnings} warning{'s' if warnings != 1 else ''}"
    )
    return "\n".join(lines) + "\n"


def render_json(report: LintReport) -> str:
    return json.dumps(report.to_dict(), indent=2) + "\n"


def render(report: LintReport, fmt: str = "text") -> str:
    if fmt == "text":
        return render_text(report)
    if fmt == "json":
        return render_json(report)
    raise ValueError(f"Unknown report format {fmt!r}; expected one of {FORMATS}")
