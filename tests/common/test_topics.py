"""
Unit tests for topic label helpers.
"""

import pytest

from curriculum_toolkit.common.topics import (
    FALLBACK_TOPIC,
    module_label,
    normalise_topic_label,
    normalise_topic_tag,
    resolve_topic_tag,
)


class TestNormaliseTopicLabel:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("4. HTML", "04. HTML"),
            ("04) HTML", "04. HTML"),
            ("4 HTML", "04. HTML"),
            ("12.", "12."),
            ("Spring Boot", "Spring Boot"),
        ],
    )
    def test_formats(self, raw, expected):
        assert normalise_topic_label(raw) == expected

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_is_unknown(self, raw):
        assert normalise_topic_label(raw) == "00. Unknown"


class TestModuleLabel:

    @pytest.mark.parametrize(
        "number, slug, expected",
        [
            (4, "html", "04. HTML"),
            (21, "spring-boot", "21. Spring Boot"),
            (5, "rest-apis", "05. REST APIs"),
            (20, "typescript", "20. TypeScript"),
            (26, "devops", "26. DevOps"),
        ],
    )
    def test_known_word_forms(self, number, slug, expected):
        assert module_label(number, slug) == expected


class TestTopicTags:

    def test_normalise_collapses_whitespace_and_case(self):
        assert normalise_topic_tag("  Spring   MVC ") == "spring mvc"
        assert normalise_topic_tag(None) == ""

    def test_resolve_uses_alias(self):
        assert resolve_topic_tag(" js ", {"JS": "JavaScript"}) == "JavaScript"

    def test_resolve_keeps_spelling_without_alias(self):
        assert resolve_topic_tag("Spring  MVC") == "Spring MVC"

    def test_resolve_empty_is_fallback(self):
        assert resolve_topic_tag("   ") == FALLBACK_TOPIC
