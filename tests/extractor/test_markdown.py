"""
Unit tests for the shared markdown scanner.
"""

import pytest

from curriculum_toolkit.extractor.markdown import (
    ParseError,
    match_numbered_start,
    read_markdown,
    scan_markdown,
    section_range,
    split_sections,
    strip_emphasis,
)


class TestScanMarkdown:

    def test_heading_inside_fence_ignored(self):
        """A YAML comment inside a fence is not a heading."""
        scan = scan_markdown("# Title\n```yaml\n# not a heading\n```\n")

        assert [h.text for h in scan.headings] == ["Title"]
        assert scan.in_fence == (False, True, True, True)
        block = scan.code_blocks[0]
        assert (block.language, block.content, block.line) == ("yaml", "# not a heading", 2)
        assert scan.unclosed_fence_line is None

    def test_unclosed_fence_reported(self):
        scan = scan_markdown("# T\n```java\nclass A {}\n")
        assert scan.unclosed_fence_line == 2
        assert scan.code_blocks[0].content == "class A {}"

    def test_fence_closes_only_with_same_character(self):
        scan = scan_markdown("~~~\n```\n~~~\n# After\n")
        assert scan.code_blocks[0].content == "```"
        assert [h.text for h in scan.headings] == ["After"]

    def test_links_outside_inline_code(self):
        scan = scan_markdown('See [CSS](../05-css/) and `[x](y)` and ![img](a.png "title")\n')
        assert [(link.text, link.target) for link in scan.links] == [("CSS", "../05-css/"), ("img", "a.png")]

    def test_links_inside_fence_ignored(self):
        scan = scan_markdown("```md\n[x](missing.md)\n```\n")
        assert scan.links == ()

    def test_closing_hashes_stripped(self):
        scan = scan_markdown("## Overview ##\n")
        assert scan.headings[0].text == "Overview"
        assert scan.headings[0].level == 2

    def test_text_lines_skip_fenced_lines(self):
        scan = scan_markdown("a\n```\nb\n```\nc\n")
        assert scan.text_lines() == [(1, "a"), (5, "c")]


class TestSplitSections:

    def test_title_and_sections(self):
        scan = scan_markdown("# T\n## Overview\nIntro\n## 2. Selectors\nBody\n### Detail\nMore\n")
        title, sections = split_sections(scan)

        assert title == "T"
        assert [(s.title, s.level, s.number) for s in sections] == [
            ("Overview", 2, None),
            ("2. Selectors", 2, 2),
            ("Detail", 3, None),
        ]
        assert sections[1].body == "Body"
        assert sections[2].body == "More"

    def test_missing_title_is_empty(self):
        title, sections = split_sections(scan_markdown("## Only section\ntext\n"))
        assert title == ""
        assert len(sections) == 1

    def test_section_range_includes_subsections(self):
        scan = scan_markdown("# T\n## A\ntext\n### A1\nmore\n## B\n")
        assert section_range(scan, scan.headings[1]) == (3, 5)


class TestMatchNumberedStart:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Question 3: What is REST?", (3, "What is REST?", True)),
            ("Q1. Pick one", (1, "Pick one", True)),
            ("Q 12 - Stem", (12, "Stem", True)),
            ("2) Which tag", (2, "Which tag", False)),
            ("4. Stem", (4, "Stem", False)),
        ],
    )
    def test_numbered_forms(self, text, expected):
        assert match_numbered_start(text) == expected

    @pytest.mark.parametrize("text", ["Quiz time", "Overview", "2024 was a year", "0. Zero", "Week 5 MCQ"])
    def test_not_numbered(self, text):
        assert match_numbered_start(text) is None


class TestHelpers:

    def test_strip_emphasis(self):
        assert strip_emphasis("**Answer:** `B`") == "Answer: B"

    def test_read_markdown_drops_bom(self, tmp_path):
        path = tmp_path / "a.md"
        path.write_bytes(b"\xef\xbb\xbf# T\n")
        assert read_markdown(path) == "# T\n"

    def test_read_markdown_invalid_utf8_reports_line(self, tmp_path):
        path = tmp_path / "bad.md"
        path.write_bytes(b"# T\n\xff\n")
        with pytest.raises(ParseError) as exc_info:
            read_markdown(path, "04-html/bad.md")
        assert exc_info.value.path == "04-html/bad.md"
        assert exc_info.value.line == 2

    def test_read_markdown_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="Cannot read"):
            read_markdown(tmp_path / "missing.md")
