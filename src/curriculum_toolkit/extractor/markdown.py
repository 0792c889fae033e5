"""
Module: extractor.markdown

Purpose:
    Line-oriented markdown scanning shared by every corpus parser.
    Finds ATX headings, fenced code blocks and inline links while
    keeping track of which lines sit inside code fences, so that a
    ``# comment`` in a YAML snippet is never taken for a heading.

Key Functions:
    - read_markdown(): Read a corpus file as UTF-8 or raise ParseError
    - scan_markdown(): Headings, code blocks, links and fence mask
    - split_sections(): Title and Section list from a scan
    - strip_emphasis(): Remove bold/italic/code markers from a line
    - match_numbered_start(): Recognise "Q1." / "Question 1:" / "1." starts

Dependencies:
    - re (std)
    - curriculum_toolkit.core.models.documents: Section, CodeBlock, Link

Used By:
    - extractor.documents, extractor.mcq, extractor.interviews
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit.core.models.documents import CodeBlock, Link, Section


class ParseError(Exception):
    """Error reading or decoding a corpus file."""

    def __init__(self, message: str, path: str = "", line: int = 0):
        super().__init__(message)
        self.path = path
        self.line = line


_FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})\s*(.*)$")
_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:\s+(.*?))?\s*$")
_CLOSING_HASHES_RE = re.compile(r"\s+#+\s*$")
_LINK_RE = re.compile(r"!?\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)")
_INLINE_CODE_RE = re.compile(r"`+[^`]*`+")
_EMPHASIS_RE = re.compile(r"\*\*|__|\*|`")
_SECTION_NUMBER_RE = re.compile(r"^(\d+)[.)]\s+\S")

# "Q1.", "Q 1:", "Question 1 -", "1." / "1)" (number requires punctuation)
_NUMBERED_START_RE = re.compile(
    r"^(?:q(?:uestion)?\s*#?\s*(\d+)\b\s*[.:)\-–—]?|(\d+)\s*[.:)])\s*(.*)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Heading:
    """ATX heading outside code fences."""

    level: int
    text: str
    line: int


@dataclass(frozen=True)
class MarkdownScan:
    """
    Result of scanning one markdown file.

    Attributes:
        lines: Source lines without line endings
        in_fence: Per-line flag, True for fence delimiters and fenced content
        headings: Headings in source order
        code_blocks: Fenced code blocks in source order
        links: Inline links (and images) outside fences and inline code
        unclosed_fence_line: Opening line of a fence that never closes
    """

    lines: tuple[str, ...]
    in_fence: tuple[bool, ...]
    headings: tuple[Heading, ...]
    code_blocks: tuple[CodeBlock, ...]
    links: tuple[Link, ...]
    unclosed_fence_line: Optional[int] = None

    def text_lines(self) -> list[tuple[int, str]]:
        """(line number, text) for every line outside code fences."""
        return [
            (i + 1, line)
            for i, line in enumerate(self.lines)
            if not self.in_fence[i]
        ]


def read_markdown(path: Path, display_path: str = "") -> str:
    """
    Read a corpus file as UTF-8 text.

    A leading byte-order mark is dropped.

    Raises:
        ParseError: If the file cannot be read or is not valid UTF-8
    """
    shown = display_path or str(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ParseError(f"Cannot read {shown}: {e}", path=shown) from e
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        line = raw[: e.start].count(b"\n") + 1
        raise ParseError(f"{shown} is not valid UTF-8: {e.reason}", path=shown, line=line) from e


def scan_markdown(text: str) -> MarkdownScan:
    """
    Scan markdown text.

    Args:
        text: Whole file contents

    Returns:
        MarkdownScan for the text

    Example:
        >>> scan = scan_markdown("# Title\\n```yaml\\n# not a heading\\n```\\n")
        >>> [h.text for h in scan.headings]
        ['Title']
    """
    lines = tuple(text.splitlines())
    in_fence: List[bool] = []
    headings: List[Heading] = []
    code_blocks: List[CodeBlock] = []
    links: List[Link] = []

    fence_char = ""
    fence_len = 0
    fence_start = 0
    fence_lang = ""
    fence_body: List[str] = []

    for lineno, line in enumerate(lines, start=1):
        if fence_char:
            stripped = line.strip()
            if (
                stripped
                and stripped[0] == fence_char
                and set(stripped) == {fence_char}
                and len(stripped) >= fence_len
                and len(line) - len(line.lstrip(" ")) <= 3
            ):
                code_blocks.append(CodeBlock(fence_lang, "\n".join(fence_body), fence_start))
                fence_char = ""
                fence_body = []
            else:
                fence_body.append(line)
            in_fence.append(True)
            continue

        fence = _FENCE_RE.match(line)
        if fence and not (fence.group(2)[0] == "`" and "`" in fence.group(3)):
            fence_char = fence.group(2)[0]
            fence_len = len(fence.group(2))
            fence_start = lineno
            info = fence.group(3).strip()
            fence_lang = info.split()[0] if info else ""
            in_fence.append(True)
            continue

        in_fence.append(False)

        heading = _HEADING_RE.match(line)
        if heading:
            heading_text = _CLOSING_HASHES_RE.sub("", heading.group(2) or "").strip()
            headings.append(Heading(len(heading.group(1)), heading_text, lineno))

        for match in _LINK_RE.finditer(_INLINE_CODE_RE.sub("", line)):
            links.append(Link(text=match.group(1).strip(), target=match.group(2), line=lineno))

    unclosed = None
    if fence_char:
        unclosed = fence_start
        code_blocks.append(CodeBlock(fence_lang, "\n".join(fence_body), fence_start))

    return MarkdownScan(
        lines=lines,
        in_fence=tuple(in_fence),
        headings=tuple(headings),
        code_blocks=tuple(code_blocks),
        links=tuple(links),
        unclosed_fence_line=unclosed,
    )


def split_sections(scan: MarkdownScan) -> tuple[str, tuple[Section, ...]]:
    """
    Split a scan into title and sections.

    The title is the first level-1 heading. Every level 2+ heading opens
    a section whose body runs to the next heading of any level.

    Returns:
        (title, sections); title is empty when there is no level-1 heading
    """
    title = ""
    sections: List[Section] = []
    headings = scan.headings

    for i, heading in enumerate(headings):
        if heading.level == 1:
            if not title:
                title = heading.text
            continue
        end = headings[i + 1].line - 1 if i + 1 < len(headings) else len(scan.lines)
        body = "\n".join(scan.lines[heading.line:end]).strip()
        number_match = _SECTION_NUMBER_RE.match(heading.text)
        sections.append(
            Section(
                title=heading.text,
                level=heading.level,
                line=heading.line,
                body=body,
                number=int(number_match.group(1)) if number_match else None,
            )
        )
    return title, tuple(sections)


def section_range(scan: MarkdownScan, heading: Heading) -> tuple[int, int]:
    """
    Line range owned by a heading, subsections included.

    Returns:
        (first, last) 1-based inclusive line numbers after the heading
    """
    last = len(scan.lines)
    for other in scan.headings:
        if other.line > heading.line and other.level <= heading.level:
            last = other.line - 1
            break
    return heading.line + 1, last


def strip_emphasis(text: str) -> str:
    """Remove ``**``, ``__``, ``*`` and backtick markers and surrounding space."""
    return _EMPHASIS_RE.sub("", text).strip()


def match_numbered_start(text: str) -> Optional[tuple[int, str, bool]]:
    """
    Recognise a numbered item start.

    Args:
        text: Heading text or a line with emphasis already stripped

    Returns:
        (number, remainder, explicit) or None. ``explicit`` is True for
        the "Q1"/"Question 1" forms, False for bare "1." / "1)".

    Example:
        >>> match_numbered_start("Question 3: What is REST?")
        (3, 'What is REST?', True)
        >>> match_numbered_start("2) Which tag")
        (2, 'Which tag', False)
    """
    match = _NUMBERED_START_RE.match(text.strip())
    if not match or int(match.group(1) or match.group(2)) < 1:
        return None
    if match.group(1):
        return int(match.group(1)), match.group(3).strip(), True
    return int(match.group(2)), match.group(3).strip(), False
