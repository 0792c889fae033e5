"""
Unit Tests for MCQ Models

Tests for McqQuestion, AnswerKeyEntry, McqBank and AnswerKey.
"""

import pytest

from curriculum_toolkit.core.models.questions import (
    AnswerKey,
    AnswerKeyEntry,
    McqBank,
    McqQuestion,
)


OPTIONS = (("A", "Hyper Text"), ("B", "High Tech"), ("C", "Home Tool"), ("D", "Hyperlinks"))


class TestMcqQuestion:
    """Tests for McqQuestion dataclass."""

    def test_init_when_valid_data_then_creates_question(self):
        """Valid question data should be created successfully."""
        q = McqQuestion(1, "What does HTML stand for?", OPTIONS, "HTML", 3)
        assert q.number == 1
        assert q.topic == "HTML"
        assert q.letters == ("A", "B", "C", "D")

    def test_init_when_number_zero_then_raises_error(self):
        """Question numbers start at 1."""
        with pytest.raises(ValueError, match="must be >= 1"):
            McqQuestion(0, "Stem", OPTIONS)

    def test_init_when_duplicate_letters_then_raises_error(self):
        """Option letters must be unique."""
        with pytest.raises(ValueError, match="Duplicate option letters"):
            McqQuestion(1, "Stem", (("A", "x"), ("A", "y")))

    def test_init_when_three_options_then_modelled(self):
        """Content defects are modelled, not rejected."""
        q = McqQuestion(2, "Stem", OPTIONS[:3])
        assert len(q.options) == 3

    def test_option_text_is_case_insensitive(self):
        q = McqQuestion(1, "Stem", OPTIONS)
        assert q.option_text("b") == "High Tech"
        assert q.option_text("E") is None

    def test_is_immutable(self):
        """Frozen dataclass rejects assignment."""
        q = McqQuestion(1, "Stem", OPTIONS)
        with pytest.raises(AttributeError):
            q.stem = "Other"  # type: ignore[misc]

    def test_dict_roundtrip(self):
        q = McqQuestion(4, "Stem", OPTIONS, "CSS", 12)
        assert McqQuestion.from_dict(q.to_dict()) == q


class TestAnswerKeyEntry:
    """Tests for AnswerKeyEntry dataclass."""

    def test_init_when_lowercase_letter_then_raises_error(self):
        with pytest.raises(ValueError, match="upper-case letter"):
            AnswerKeyEntry(1, "b")

    def test_init_when_two_letters_then_raises_error(self):
        with pytest.raises(ValueError, match="upper-case letter"):
            AnswerKeyEntry(1, "AB")

    def test_init_when_letter_empty_then_allowed(self):
        """An entry naming no letter is modelled for the linter."""
        entry = AnswerKeyEntry(3, "")
        assert entry.letter == ""

    def test_init_when_number_zero_then_raises_error(self):
        with pytest.raises(ValueError):
            AnswerKeyEntry(0, "A")


class TestMcqBank:
    """Tests for bank lookup and ordinal pairing."""

    @pytest.fixture
    def bank(self) -> McqBank:
        return McqBank(
            path="week-05/mcq.md",
            questions=(
                McqQuestion(1, "One", OPTIONS),
                McqQuestion(2, "Two", OPTIONS),
                McqQuestion(2, "Two again", OPTIONS),
            ),
        )

    def test_get_when_number_repeats_then_first_wins(self, bank):
        assert bank.get(2).stem == "Two"
        assert bank.get(9) is None

    def test_numbers_and_len(self, bank):
        assert bank.numbers == (1, 2, 2)
        assert len(bank) == 3

    def test_paired_with_when_key_shorter_then_pads_with_none(self, bank):
        """Pairing runs to the longer side."""
        key = AnswerKey("week-05/mcq-answers.md", (AnswerKeyEntry(1, "A"),))
        pairs = list(bank.paired_with(key))

        assert [ordinal for ordinal, _, _ in pairs] == [1, 2, 3]
        assert pairs[0][2].letter == "A"
        assert pairs[1][2] is None
        assert pairs[2][1].stem == "Two again"

    def test_paired_with_when_key_longer_then_question_none(self):
        bank = McqBank("week-05/mcq.md", (McqQuestion(1, "One", OPTIONS),))
        key = AnswerKey("week-05/mcq-answers.md", (AnswerKeyEntry(1, "A"), AnswerKeyEntry(2, "B")))
        pairs = list(bank.paired_with(key))
        assert pairs[1][1] is None
        assert pairs[1][2].number == 2

    def test_answer_key_get(self):
        key = AnswerKey("k.md", (AnswerKeyEntry(1, "A"), AnswerKeyEntry(2, "C")))
        assert key.get(2).letter == "C"
        assert key.get(3) is None
        assert len(key) == 2
