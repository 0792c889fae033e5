"""
Tests for keyword search over the sample corpus.
"""

import pytest

from curriculum_toolkit.keyword import KeywordEntry, KeywordIndex
from curriculum_toolkit.keyword.models import _normalize
from curriculum_toolkit.loading import load_corpus


@pytest.fixture
def index(sample_corpus):
    index = KeywordIndex()
    index.prime(load_corpus(sample_corpus))
    return index


class TestPrime:

    def test_entry_count(self, index):
        # 4 MCQs, 10 interview questions, at least one section per document
        mcq_and_interview = 4 + 10
        assert index.entry_count > mcq_and_interview

    def test_prime_replaces_entries(self, index, tmp_path):
        index.prime(load_corpus(tmp_path))
        assert index.entry_count == 0

    def test_first_duplicate_id_wins(self, sample_corpus):
        mcq = sample_corpus / "week-05" / "mcq.md"
        mcq.write_text(mcq.read_text(encoding="utf-8").replace("### Q4.", "### Q3."), encoding="utf-8")
        index = KeywordIndex()
        index.prime(load_corpus(sample_corpus))
        entry = index.search(["annotation"]).get_entry("mcq:week-05:3")
        assert entry.title.startswith("Which annotation")


class TestSearch:

    def test_exact_match(self, index):
        result = index.search(['"bean"'])
        assert result.entry_ids == {"interview:week-06:1:2", "mcq:week-05:3"}
        assert result.fields_for_entry("mcq:week-05:3") == {"option D"}
        assert result.fields_for_entry("interview:week-06:1:2") == {"prompt"}

    def test_fuzzy_match_finds_substrings(self, index):
        result = index.search(["bean"])
        assert "interview:week-06:1:5" in result.entry_ids
        assert result.fields_for_entry("interview:week-06:1:5") == {"answer"}

    def test_fuzzy_ignores_case_and_whitespace(self, index):
        result = index.search(["Spring  Boot"])
        assert "interview:week-06:1:1" in result.entry_ids
        assert result.ids_of_kind("mcq") == {"mcq:week-05:3", "mcq:week-05:4"}

    def test_ids_of_kind(self, index):
        result = index.search(['"class"'])
        assert result.ids_of_kind("mcq") == {"mcq:week-05:2"}
        docs = result.ids_of_kind("doc")
        assert docs
        assert all(d.startswith("doc:05-css/01-selectors.md#") for d in docs)

    def test_match_all_intersects(self, index):
        result = index.search(['"bean"', "annotation"])
        assert result.keywords == ('"bean"', "annotation")
        assert result.entries_matching_all == {"mcq:week-05:3"}
        assert "interview:week-06:1:2" in result.entry_ids
        assert result.ids_of_kind("interview", match_all=True) == frozenset()

    def test_per_keyword_hits(self, index):
        result = index.search(["selector", "port"])
        assert "mcq:week-05:2" in result.keyword_hits["selector"]
        assert "interview:week-06:1:4" in result.keyword_hits["port"]

    @pytest.mark.parametrize("keywords", [[], ["", "   "], ['""']])
    def test_blank_keywords_return_empty(self, index, keywords):
        result = index.search(keywords)
        assert result.is_empty
        assert result.entries_matching_all == frozenset()

    def test_repeated_keyword_counted_once(self, index):
        result = index.search(["bean", " bean "])
        assert result.keywords == ("bean",)

    def test_entry_location(self, index):
        entry = index.search(['"bean"']).get_entry("mcq:week-05:3")
        assert entry.kind == "mcq"
        assert entry.path == "week-05/mcq.md"
        assert entry.fields["topic"] == "Spring Boot"


class TestKeywordEntry:

    def test_substring_match_uses_normalised_text(self):
        entry = KeywordEntry(entry_id="mcq:w:1", kind="mcq", fields={"stem": "Dependency  Injection"})
        assert entry.matches_substring(_normalize("dependency injection")) == {"stem"}
        assert entry.matches_substring("beans") == set()

    def test_normalize(self):
        assert _normalize(" Spring\tBoot \n") == "springboot"
