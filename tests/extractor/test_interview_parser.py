"""
Unit tests for interview question set parsing.
"""

import logging

import pytest

from curriculum_toolkit.extractor.interviews import (
    _split_difficulty,
    parse_interview_sets,
    parse_interview_text,
)

MIXED_SETS = """\
# Interview Questions

1. Warm-up question before any set

## Set 3 - Priya

**Q1 - Medium: What is JPA?**
**Answer:** The Java persistence specification.

**Q2 [Hard] What is the N+1 problem?**
Difficulty: ignored because the header already set it
Answer: One query for the parent plus one per child.
1. Fetch the parents
   2. Fetch each child

3. What is a transaction? - Easy
A unit of work that commits or rolls back as a whole.

### Question 4
Question: How do you map a one-to-many relation?
Difficulty: medium
Model answer: Use @OneToMany with mappedBy on the owning side.

## Student 4

### Q1: Why use DTOs?

```java
// 2. not a question inside code
```
"""


class TestSplitDifficulty:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("(Easy): What is a bean?", ("What is a bean?", "Easy")),
            ("[difficulty: hard] Explain AOP", ("Explain AOP", "Hard")),
            ("What is a bean? (Medium)", ("What is a bean?", "Medium")),
            ("- Very Hard: Tune the JVM", ("Tune the JVM", "Very Hard")),
            ("Medium: What is JPA?", ("What is JPA?", "Medium")),
            ("What is a bean? - Hard", ("What is a bean?", "Hard")),
            ("Explain (briefly) the context", ("Explain (briefly) the context", "")),
        ],
    )
    def test_forms(self, text, expected):
        assert _split_difficulty(text) == expected


class TestParseInterviewText:

    @pytest.fixture
    def sets(self):
        return parse_interview_text(MIXED_SETS, "week-06/interview-questions.md")

    def test_set_headings(self, sets):
        assert [(s.student, s.label) for s in sets] == [(3, "Set 3 - Priya"), (4, "Student 4")]

    def test_question_numbers_and_sizes(self, sets):
        assert [q.number for q in sets[0].questions] == [1, 2, 3, 4]
        assert sets[1].size == 1

    def test_difficulty_forms(self, sets):
        assert [q.difficulty for q in sets[0].questions] == ["Medium", "Hard", "Easy", "Medium"]

    def test_prompts(self, sets):
        prompts = [q.prompt for q in sets[0].questions]
        assert prompts == [
            "What is JPA?",
            "What is the N+1 problem?",
            "What is a transaction?",
            "How do you map a one-to-many relation?",
        ]

    def test_answers(self, sets):
        questions = sets[0].questions
        assert questions[0].answer == "The Java persistence specification."
        assert questions[1].answer.startswith("One query for the parent plus one per child.")
        assert "Fetch the parents" in questions[1].answer
        assert questions[2].answer == "A unit of work that commits or rolls back as a whole."
        assert questions[3].answer == "Use @OneToMany with mappedBy on the owning side."

    def test_question_without_answer(self, sets):
        assert sets[1].questions[0].prompt == "Why use DTOs?"
        assert sets[1].questions[0].answer == ""

    def test_orphan_questions_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="curriculum_toolkit.extractor.interviews"):
            parse_interview_text(MIXED_SETS, "week-06/interview-questions.md")
        assert "1 numbered lines before the first set heading" in caplog.text

    def test_no_sets(self):
        assert parse_interview_text("# Nothing here\n", "x.md") == ()


def test_parse_from_disk(sample_corpus):
    sets = parse_interview_sets(
        sample_corpus / "week-06" / "interview-questions.md", "week-06/interview-questions.md"
    )
    assert [s.student for s in sets] == [1, 2]
    assert all(s.size == 5 for s in sets)
    assert sets[0].questions[2].prompt == "What does @Autowired do?"
    assert sets[0].questions[4].difficulty == "Hard"
