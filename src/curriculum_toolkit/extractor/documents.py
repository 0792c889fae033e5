"""
Module: extractor.documents

Purpose:
    Build a TopicDocument from a lesson markdown file: title, Overview,
    numbered concept sections, code illustrations, Summary Checklist,
    and the Next Steps pointer (links and "Module N" references).

Key Functions:
    - parse_topic_document(): Parse a file on disk
    - parse_topic_text(): Parse already-read text (used by tests and week files)

Dependencies:
    - re (std)
    - extractor.markdown: Scanning and section splitting

Used By:
    - loading.loader: Module and loose documents
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit.core.models.documents import Link, TopicDocument

from .markdown import (
    MarkdownScan,
    read_markdown,
    scan_markdown,
    section_range,
    split_sections,
    strip_emphasis,
)

logger = logging.getLogger(__name__)

_OVERVIEW_RE = re.compile(r"^(?:\d+[.)]\s*)?overview\b", re.IGNORECASE)
_CHECKLIST_RE = re.compile(r"^(?:\d+[.)]\s*)?(?:summary\s+)?checklist\b", re.IGNORECASE)
_NEXT_STEPS_RE = re.compile(r"^(?:\d+[.)]\s*)?next\s+steps?\b", re.IGNORECASE)
_NEXT_STEPS_INLINE_RE = re.compile(r"^\s*(?:[-*]\s+)?next\s+steps?\s*:", re.IGNORECASE)
_MODULE_REF_RE = re.compile(r"\bmodule[\s-]+(\d{1,2})\b", re.IGNORECASE)
_CHECKLIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(?:\[[ xX]\]\s*)?(.+?)\s*$")


def parse_topic_document(path: Path, root: Path, module: Optional[str] = None) -> TopicDocument:
    """
    Parse a lesson file.

    Args:
        path: Absolute file path
        root: Corpus root (document paths are stored relative to it)
        module: Owning module directory name, None outside modules

    Returns:
        TopicDocument

    Raises:
        ParseError: If the file cannot be read
    """
    rel = path.resolve().relative_to(root.resolve()).as_posix()
    text = read_markdown(path, rel)
    return parse_topic_text(text, rel, module=module)


def parse_topic_text(text: str, rel_path: str, module: Optional[str] = None) -> TopicDocument:
    """
    Parse lesson markdown text.

    Example:
        >>> doc = parse_topic_text("# CSS\\n## Overview\\nStyling.\\n", "05-css/intro.md")
        >>> doc.overview
        'Styling.'
    """
    scan = scan_markdown(text)
    title, sections = split_sections(scan)

    overview_section = next((s for s in sections if _OVERVIEW_RE.match(s.title)), None)

    checklist: List[str] = []
    for heading in scan.headings:
        if heading.level >= 2 and _CHECKLIST_RE.match(heading.text):
            checklist.extend(_checklist_items(scan, *section_range(scan, heading)))

    next_steps, module_refs = _next_steps(scan)

    if scan.unclosed_fence_line is not None:
        logger.debug(f"{rel_path}: code fence opened on line {scan.unclosed_fence_line} never closes")

    return TopicDocument(
        path=rel_path,
        module=module,
        title=strip_emphasis(title),
        overview=overview_section.body if overview_section else "",
        has_overview=overview_section is not None,
        sections=sections,
        code_blocks=scan.code_blocks,
        links=scan.links,
        next_steps=next_steps,
        module_refs=module_refs,
        checklist=tuple(checklist),
        unclosed_fence_line=scan.unclosed_fence_line,
    )


def _checklist_items(scan: MarkdownScan, first: int, last: int) -> List[str]:
    items = []
    for lineno in range(first, last + 1):
        if scan.in_fence[lineno - 1]:
            continue
        match = _CHECKLIST_ITEM_RE.match(scan.lines[lineno - 1])
        if match:
            items.append(strip_emphasis(match.group(1)))
    return items


def _next_steps_lines(scan: MarkdownScan) -> set[int]:
    """Lines belonging to Next Steps headings or inline "Next Steps:" paragraphs."""
    owned: set[int] = set()
    for heading in scan.headings:
        if heading.level >= 2 and _NEXT_STEPS_RE.match(strip_emphasis(heading.text)):
            first, last = section_range(scan, heading)
            owned.update(range(first, last + 1))

    lineno = 1
    total = len(scan.lines)
    while lineno <= total:
        line = scan.lines[lineno - 1]
        if not scan.in_fence[lineno - 1] and _NEXT_STEPS_INLINE_RE.match(strip_emphasis(line)):
            # The labelled paragraph runs to the next blank line or heading
            while lineno <= total and scan.lines[lineno - 1].strip():
                if lineno > 1 and scan.lines[lineno - 1].lstrip().startswith("#"):
                    break
                owned.add(lineno)
                lineno += 1
            continue
        lineno += 1
    return owned


def _next_steps(scan: MarkdownScan) -> tuple[tuple[Link, ...], tuple[tuple[int, int], ...]]:
    owned = _next_steps_lines(scan)
    if not owned:
        return (), ()

    links = tuple(link for link in scan.links if link.line in owned)
    refs = []
    for lineno in sorted(owned):
        if scan.in_fence[lineno - 1]:
            continue
        for match in _MODULE_REF_RE.finditer(scan.lines[lineno - 1]):
            refs.append((int(match.group(1)), lineno))
    return links, tuple(refs)
