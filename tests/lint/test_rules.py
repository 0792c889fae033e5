"""
Tests for the individual lint rules.

Each test breaks one thing in the lint-clean sample corpus and checks
that the matching rule reports it at the right place.
"""

from pathlib import Path

import pytest

from curriculum_toolkit.common.settings import LintSettings
from curriculum_toolkit.lint import ERROR, RULES, WARNING, lint_corpus
from curriculum_toolkit.loading import load_corpus


def edit(root: Path, rel: str, old: str, new: str) -> None:
    """Replace the first occurrence of old in a corpus file."""
    path = root / rel
    text = path.read_text(encoding="utf-8")
    assert old in text, f"{old!r} not in {rel}"
    path.write_text(text.replace(old, new, 1), encoding="utf-8")


def lint(root: Path, **settings):
    settings = LintSettings(**settings)
    return lint_corpus(load_corpus(root, settings), settings)


class TestRegistry:

    def test_all_rule_codes_registered(self):
        assert len(RULES) == 22
        assert list(RULES)[0] == "parse-error"
        assert all(r.severity in (ERROR, WARNING) for r in RULES.values())

    def test_clean_corpus_has_no_issues(self, sample_corpus):
        report = lint(sample_corpus)
        assert report.issues == ()
        assert report.ok
        assert set(report.rules_run) == set(RULES)


class TestLoadingRules:

    def test_parse_error_reported(self, sample_corpus):
        (sample_corpus / "04-html" / "02-bad.md").write_bytes(b"# Bad\n\xc3\x28\n")
        (issue,) = lint(sample_corpus).by_code("parse-error")
        assert issue.path == "04-html/02-bad.md"
        assert issue.line == 2
        assert issue.severity == ERROR


class TestMcqRules:

    def test_answer_file_missing(self, sample_corpus):
        (sample_corpus / "week-05" / "mcq-answers.md").unlink()
        (issue,) = lint(sample_corpus).by_code("mcq-answer-missing")
        assert issue.path == "week-05/mcq.md"
        assert issue.context["missing"] == "week-05/mcq-answers.md"

    def test_question_file_missing(self, sample_corpus):
        (sample_corpus / "week-05" / "mcq.md").unlink()
        (issue,) = lint(sample_corpus).by_code("mcq-answer-missing")
        assert issue.path == "week-05/mcq-answers.md"

    def test_count_mismatch_when_answer_removed_then_error(self, sample_corpus):
        path = sample_corpus / "week-05" / "mcq-answers.md"
        text = path.read_text(encoding="utf-8")
        path.write_text(text[: text.index("### Q4")], encoding="utf-8")

        report = lint(sample_corpus)
        (issue,) = report.by_code("mcq-count-mismatch")
        assert issue.message == "4 questions but 3 answers"
        assert issue.context == {"questions": 4, "answers": 3}
        assert not report.ok

    def test_ordinal_mismatch(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq-answers.md", "### Q2", "### Q5")
        (issue,) = lint(sample_corpus).by_code("mcq-ordinal-mismatch")
        assert issue.message == "answer #2 is numbered 5 but question #2 is 2"
        assert issue.path == "week-05/mcq-answers.md"

    def test_numbering_gap(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq.md", "### Q3.", "### Q7.")
        (issue,) = lint(sample_corpus).by_code("mcq-numbering")
        assert issue.severity == WARNING
        assert issue.context == {"expected": 3, "found": 7}

    def test_numbering_repeat(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq.md", "### Q4.", "### Q3.")
        issues = lint(sample_corpus).by_code("mcq-numbering")
        assert any("question number 3 repeats" in i.message for i in issues)

    def test_option_missing(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq.md", "D) card > p\n", "")
        (issue,) = lint(sample_corpus).by_code("mcq-option-count")
        assert issue.message == "question 2 has 3 options, expected 4"

    def test_option_count_setting(self, sample_corpus):
        issues = lint(sample_corpus, mcq_option_count=5).by_code("mcq-option-count")
        assert [i.context["number"] for i in issues] == [1, 2, 3, 4]

    def test_answer_letter_not_an_option(self, sample_corpus):
        edit(
            sample_corpus, "week-05/mcq-answers.md",
            "**Answer: B**\nExplanation: A leading dot", "**Answer: E**\nExplanation: A leading dot",
        )
        (issue,) = lint(sample_corpus).by_code("mcq-answer-letter")
        assert issue.message == "answer 2 is E but question 2 offers ABCD"
        assert issue.context["letter"] == "E"

    def test_missing_topic(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq.md", "**Topic:** HTML\n", "")
        (issue,) = lint(sample_corpus).by_code("mcq-missing-topic")
        assert issue.context == {"number": 1}
        assert issue.line == 3

    def test_missing_topic_when_tags_optional_then_silent(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq.md", "**Topic:** HTML\n", "")
        assert lint(sample_corpus, require_topic_tags=False).by_code("mcq-missing-topic") == ()

    def test_missing_explanation(self, sample_corpus):
        edit(sample_corpus, "week-05/mcq-answers.md", "Explanation: HTML stands for Hyper Text Markup Language.\n", "")
        report = lint(sample_corpus)
        (issue,) = report.by_code("mcq-missing-explanation")
        assert issue.context == {"number": 1}
        assert report.ok


class TestInterviewRules:

    INTERVIEWS = "week-06/interview-questions.md"

    def test_set_too_small(self, sample_corpus):
        path = sample_corpus / self.INTERVIEWS
        text = path.read_text(encoding="utf-8")
        path.write_text(text[: text.index("### Q5 (Hard): How would you version")], encoding="utf-8")

        (issue,) = lint(sample_corpus).by_code("interview-set-size")
        assert issue.path == self.INTERVIEWS
        assert issue.message == "student 2 set has 4 questions, expected 5"

    def test_set_size_setting(self, sample_corpus):
        issues = lint(sample_corpus, interview_set_size=4).by_code("interview-set-size")
        assert [i.context["student"] for i in issues] == [1, 2]

    def test_set_count(self, sample_corpus):
        report = lint(sample_corpus, expected_interview_sets={"week-06": 3, "week-99": 1})
        (issue,) = report.by_code("interview-set-count")
        assert issue.message == "2 interview sets, expected 3"
        assert issue.line == 0

    def test_student_number_gap(self, sample_corpus):
        edit(sample_corpus, self.INTERVIEWS, "## Student 2", "## Student 3")
        (issue,) = lint(sample_corpus).by_code("interview-student-numbering")
        assert issue.context == {"missing": [2]}

    def test_student_number_repeat(self, sample_corpus):
        edit(sample_corpus, self.INTERVIEWS, "## Student 2", "## Student 1")
        issues = lint(sample_corpus).by_code("interview-student-numbering")
        assert any("student 1 already has a set" in i.message for i in issues)

    def test_missing_answer(self, sample_corpus):
        edit(sample_corpus, self.INTERVIEWS, "**Answer:** PUT replaces the resource.\n", "")
        (issue,) = lint(sample_corpus).by_code("interview-missing-answer")
        assert issue.context == {"student": 2, "number": 2}
        assert issue.severity == WARNING

    def test_duplicate_prompt_across_sets(self, sample_corpus):
        edit(sample_corpus, self.INTERVIEWS, "What is REST?", "What is a  Bean")
        (issue,) = lint(sample_corpus).by_code("interview-duplicate-question")
        assert issue.message == "student 2 question 1 repeats a question from student 1"


class TestDocumentRules:

    def test_missing_title(self, sample_corpus):
        edit(sample_corpus, "05-css/01-selectors.md", "# CSS Selectors\n\n", "")
        (issue,) = lint(sample_corpus).by_code("topic-missing-title")
        assert (issue.path, issue.line) == ("05-css/01-selectors.md", 1)

    def test_missing_overview(self, sample_corpus):
        edit(sample_corpus, "05-css/01-selectors.md", "## Overview\nSelectors pick elements to style.\n\n", "")
        (issue,) = lint(sample_corpus).by_code("topic-missing-overview")
        assert issue.path == "05-css/01-selectors.md"

    def test_loose_documents_exempt_from_structure_rules(self, sample_corpus):
        report = lint(sample_corpus)
        assert report.by_code("topic-missing-overview") == ()
        assert report.by_code("topic-missing-checklist") == ()

    def test_missing_checklist(self, sample_corpus):
        edit(sample_corpus, "05-css/01-selectors.md", "## Summary Checklist\n- Use a class selector\n\n", "")
        (issue,) = lint(sample_corpus).by_code("topic-missing-checklist")
        assert issue.severity == WARNING

    def test_unclosed_fence(self, sample_corpus):
        edit(sample_corpus, "05-css/01-selectors.md", ".card { color: red; }\n```\n", ".card { color: red; }\n")
        (issue,) = lint(sample_corpus).by_code("markdown-unclosed-fence")
        assert (issue.path, issue.line) == ("05-css/01-selectors.md", 9)

    def test_next_steps_broken_link(self, sample_corpus):
        edit(sample_corpus, "05-css/01-selectors.md", "../04-html/01-intro.md", "../04-html/99-missing.md")
        report = lint(sample_corpus)
        (issue,) = report.by_code("next-steps-broken-link")
        assert issue.line == 17
        assert issue.message == "Next Steps link '../04-html/99-missing.md' does not exist"
        assert report.by_code("broken-link") == ()

    def test_body_link_broken(self, sample_corpus):
        edit(sample_corpus, "04-html/01-intro.md", "See [CSS](../05-css/01-selectors.md)", "See [CSS](../05-css/missing.md)")
        report = lint(sample_corpus)
        (issue,) = report.by_code("broken-link")
        assert (issue.path, issue.line) == ("04-html/01-intro.md", 16)
        assert report.ok

    def test_link_outside_corpus(self, sample_corpus):
        edit(sample_corpus, "README.md", "04-html/01-intro.md", "../../outside.md")
        (issue,) = lint(sample_corpus).by_code("broken-link")
        assert "points outside the corpus" in issue.message

    @pytest.mark.parametrize("target", ["https://spring.io/guides", "mailto:team@example.com", "#overview"])
    def test_external_and_anchor_links_ignored(self, sample_corpus, target):
        edit(sample_corpus, "README.md", "04-html/01-intro.md", target)
        assert lint(sample_corpus).by_code("broken-link") == ()

    def test_unknown_module_reference(self, sample_corpus):
        edit(sample_corpus, "04-html/01-intro.md", "Proceed to Module 05", "Proceed to Module 09")
        (issue,) = lint(sample_corpus).by_code("module-reference-unknown")
        assert issue.line == 23
        assert issue.message == "Module 9 is referenced but no 09-* directory exists"


class TestDemoRules:

    def test_missing_entrypoint(self, sample_corpus):
        edit(
            sample_corpus,
            "resources/demo/spring/stage-1-hello/src/main/java/com/example/HelloApplication.java",
            "@SpringBootApplication\n", "",
        )
        (issue,) = lint(sample_corpus).by_code("demo-missing-entrypoint")
        assert issue.path == "resources/demo/spring/stage-1-hello"
        assert issue.context == {"stage": "stage-1-hello", "service": "stage-1-hello"}
