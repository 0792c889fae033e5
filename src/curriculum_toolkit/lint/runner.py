"""
Module: lint.runner

Purpose:
    Run the registered lint rules over a corpus and collect a LintReport.
    Rules are independent readers of an immutable Corpus, so they run on
    a small thread pool; issues are sorted afterwards so the report does
    not depend on completion order.

Key Functions:
    - lint_corpus(): Run enabled rules, apply severity overrides
    - selected_rules(): Rules enabled by the settings
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional

from curriculum_toolkit.common.settings import LintSettings
from curriculum_toolkit.core.models import Corpus

from .issues import Issue, LintReport
from .rules import RULES, Rule

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


def selected_rules(settings: LintSettings) -> List[Rule]:
    """Registered rules minus ``settings.disabled_rules``, in registration order."""
    unknown = sorted(
        set(settings.disabled_rules).union(settings.severity_overrides) - set(RULES)
    )
    if unknown:
        logger.warning(f"Settings name unknown lint rules: {unknown}")
    return [r for r in RULES.values() if settings.is_enabled(r.code)]


def _run_rule(rule: Rule, corpus: Corpus, settings: LintSettings) -> List[Issue]:
    issues = list(rule.check(corpus, settings))
    logger.debug(f"Rule {rule.code}: {len(issues)} issues")
    return issues


def lint_corpus(
    corpus: Corpus,
    settings: Optional[LintSettings] = None,
    *,
    max_workers: int = DEFAULT_WORKERS,
) -> LintReport:
    """
    Lint a loaded corpus.

    Args:
        corpus: Loaded corpus
        settings: Lint settings (defaults when None)
        max_workers: Thread pool size; 1 runs rules inline

    Returns:
        LintReport with issues sorted by (path, line, code)

    Example:
        >>> report = lint_corpus(load_corpus(root))
        >>> report.ok
        True
    """
    settings = settings or LintSettings()
    rules = selected_rules(settings)

    if max_workers > 1 and len(rules) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(rules))) as pool:
            results = list(pool.map(lambda r: _run_rule(r, corpus, settings), rules))
    else:
        results = [_run_rule(r, corpus, settings) for r in rules]

    issues: List[Issue] = []
    for rule, found in zip(rules, results):
        severity = settings.severity_for(rule.code, rule.severity)
        if severity != rule.severity:
            found = [replace(issue, severity=severity) for issue in found]
        issues.extend(found)

    report = LintReport(
        root=str(corpus.root),
        issues=tuple(issues),
        rules_run=tuple(r.code for r in rules),
    )
    logger.info(
        f"Linted {corpus.root}: {report.error_count} errors, {report.warning_count} warnings "
        f"from {len(rules)} rules"
    )
    return report
