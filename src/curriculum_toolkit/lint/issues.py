"""
Module: lint.issues

Purpose:
    Result types for corpus linting: a single Issue and the LintReport
    that aggregates them. Counts are calculated from the issue list,
    never stored.

Key Classes:
    - Issue: One finding at a path and line
    - LintReport: Sorted issues plus calculated counts
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

ERROR = "error"
WARNING = "warning"
SEVERITIES = (ERROR, WARNING)


@dataclass(frozen=True)
class Issue:
    """
    One lint finding (immutable).

    Attributes:
        code: Stable rule code ("mcq-count-mismatch")
        severity: "error" or "warning"
        path: File or directory relative to the corpus root
        line: 1-based line, 0 when the finding concerns a whole file
        message: Human readable description
        context: Extra structured data (counts, numbers, targets)
    """

    code: str
    severity: str
    path: str
    line: int
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.severity not in SEVERITIES:
            raise ValueError(f"severity must be one of {SEVERITIES}: {self.severity!r}")
        if self.line < 0:
            raise ValueError(f"line must be non-negative: {self.line}")

    @property
    def sort_key(self) -> tuple:
        return (self.path, self.line, self.code, self.message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "severity": self.severity,
            "path": self.path,
            "line": self.line,
            "message": self.message,
            "context": dict(self.context),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Issue:
        return cls(
            code=data["code"],
            severity=data["severity"],
            path=data["path"],
            line=data.get("line", 0),
            message=data["message"],
            context=dict(data.get("context", {})),
        )

    def __str__(self) -> str:
        return f"{self.path}:{self.line}: {self.severity} {self.code} {self.message}"


@dataclass(frozen=True)
class LintReport:
    """
    Outcome of linting a corpus.

    Attributes:
        root: Corpus root the report describes
        issues: Findings sorted by (path, line, code)
        rules_run: Codes of the rules that ran
    """

    root: str
    issues: tuple[Issue, ...] = ()
    rules_run: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.issues, key=lambda i: i.sort_key))
        if ordered != self.issues:
            object.__setattr__(self, "issues", ordered)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == WARNING)

    @property
    def ok(self) -> bool:
        return self.error_count == 0

    def by_code(self, code: Optional[str] = None) -> Dict[str, tuple[Issue, ...]] | tuple[Issue, ...]:
        """
        Group issues by rule code.

        Args:
            code: When given, return only that code's issues

        Returns:
            code -> issues mapping (codes sorted), or the issues for one code
        """
        grouped: Dict[str, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.code, []).append(issue)
        if code is not None:
            return tuple(grouped.get(code, ()))
        return {c: tuple(grouped[c]) for c in sorted(grouped)}

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "ok": self.ok,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "rules_run": list(self.rules_run),
            "issues": [i.to_dict() for i in self.issues],
        }
