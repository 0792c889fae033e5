"""
Module: extractor

Purpose:
    Markdown and source-tree parsers that turn corpus files into
    core.models records. Parsers never modify the corpus; unreadable
    files raise ParseError, malformed content is modelled as-is.

Key Functions:
    - scan_markdown() / split_sections(): Shared markdown scanning
    - parse_topic_document(): Lesson files
    - parse_mcq_bank() / parse_answer_key(): Week MCQ files
    - parse_interview_sets(): Week interview files
    - scan_demo_stage(): Spring demo stages

Used By:
    - curriculum_toolkit.loading: Corpus discovery
"""

from .markdown import MarkdownScan, ParseError, scan_markdown, split_sections
from .documents import parse_topic_document, parse_topic_text
from .mcq import parse_answer_key, parse_answer_text, parse_mcq_bank, parse_mcq_text
from .interviews import parse_interview_sets, parse_interview_text
from .demos import scan_demo_stage

__all__ = [
    "MarkdownScan",
    "ParseError",
    "scan_markdown",
    "split_sections",
    "parse_topic_document",
    "parse_topic_text",
    "parse_mcq_bank",
    "parse_mcq_text",
    "parse_answer_key",
    "parse_answer_text",
    "parse_interview_sets",
    "parse_interview_text",
    "scan_demo_stage",
]
