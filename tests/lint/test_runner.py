"""
Tests for running lint rules and applying settings.
"""

import logging

from curriculum_toolkit.common.settings import LintSettings
from curriculum_toolkit.lint import ERROR, RULES, WARNING, lint_corpus, selected_rules
from curriculum_toolkit.loading import load_corpus


def break_corpus(root):
    """One error (count mismatch) and one warning (missing explanation)."""
    answers = root / "week-05" / "mcq-answers.md"
    text = answers.read_text(encoding="utf-8")
    text = text[: text.index("### Q4")]
    text = text.replace("Explanation: A leading dot selects by class.\n", "")
    answers.write_text(text, encoding="utf-8")


class TestSelectedRules:

    def test_defaults_select_every_rule(self):
        assert [r.code for r in selected_rules(LintSettings())] == list(RULES)

    def test_disabled_rules_dropped(self):
        settings = LintSettings(disabled_rules=("broken-link", "mcq-numbering"))
        codes = [r.code for r in selected_rules(settings)]
        assert "broken-link" not in codes
        assert "mcq-numbering" not in codes
        assert len(codes) == len(RULES) - 2

    def test_unknown_code_when_selecting_then_warns(self, caplog):
        settings = LintSettings(disabled_rules=("no-such-rule",), severity_overrides={"also-unknown": "error"})
        with caplog.at_level(logging.WARNING, logger="curriculum_toolkit"):
            selected_rules(settings)
        assert "['also-unknown', 'no-such-rule']" in caplog.text


class TestLintCorpus:

    def test_error_and_warning_counted(self, sample_corpus):
        break_corpus(sample_corpus)
        report = lint_corpus(load_corpus(sample_corpus))
        assert report.error_count == 1
        assert report.warning_count == 1
        assert not report.ok

    def test_disabled_rule_not_reported(self, sample_corpus):
        break_corpus(sample_corpus)
        settings = LintSettings(disabled_rules=("mcq-count-mismatch",))
        report = lint_corpus(load_corpus(sample_corpus, settings), settings)
        assert report.ok
        assert "mcq-count-mismatch" not in report.rules_run

    def test_severity_override_downgrades_error(self, sample_corpus):
        break_corpus(sample_corpus)
        settings = LintSettings(severity_overrides={"mcq-count-mismatch": WARNING})
        report = lint_corpus(load_corpus(sample_corpus, settings), settings)
        assert report.ok
        assert report.warning_count == 2

    def test_severity_override_upgrades_warning(self, sample_corpus):
        break_corpus(sample_corpus)
        settings = LintSettings(severity_overrides={"mcq-missing-explanation": ERROR})
        report = lint_corpus(load_corpus(sample_corpus, settings), settings)
        assert report.error_count == 2
        assert report.warning_count == 0

    def test_order_same_when_run_inline_or_pooled(self, sample_corpus):
        """Issues sort by (path, line, code) whatever order rules finish in."""
        break_corpus(sample_corpus)
        (sample_corpus / "04-html" / "01-intro.md").write_text("no title here\n", encoding="utf-8")
        corpus = load_corpus(sample_corpus)

        pooled = lint_corpus(corpus, max_workers=8)
        inline = lint_corpus(corpus, max_workers=1)
        assert pooled.issues == inline.issues
        keys = [(i.path, i.line, i.code) for i in pooled.issues]
        assert keys == sorted(keys)

    def test_summary_logged(self, sample_corpus, caplog):
        with caplog.at_level(logging.INFO, logger="curriculum_toolkit"):
            lint_corpus(load_corpus(sample_corpus))
        assert "0 errors, 0 warnings" in caplog.text
