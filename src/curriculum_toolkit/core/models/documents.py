"""
Module: documents

Purpose:
    Provides the TopicDocument dataclass and its building blocks
    (Section, CodeBlock, Link). A topic document is a lesson file inside
    a numbered module directory: a title, an Overview, numbered concept
    sections with code illustrations, a Summary Checklist and a
    Next Steps pointer to the following module.

Key Functions:
    - TopicDocument.concept_sections: Numbered sections, calculated
    - TopicDocument.has_summary_checklist: Calculated from checklist items
    - TopicDocument.to_dict() / TopicDocument.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - functools (std)

Used By:
    - extractor.documents: Builds TopicDocument from markdown
    - lint.rules: Structure and link checks
    - keyword.index: Section text search
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

_EXTERNAL_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|#|//)")


@dataclass(frozen=True)
class CodeBlock:
    """
    Fenced code illustration inside a document.

    Attributes:
        language: Info string of the opening fence ("java", "yaml"), may be empty
        content: Raw code between the fences
        line: 1-based line of the opening fence
    """

    language: str
    content: str
    line: int

    def to_dict(self) -> dict:
        return {"language": self.language, "content": self.content, "line": self.line}

    @classmethod
    def from_dict(cls, data: dict) -> CodeBlock:
        return cls(
            language=data.get("language", ""),
            content=data.get("content", ""),
            line=data["line"],
        )


@dataclass(frozen=True)
class Link:
    """
    Inline markdown link ``[text](target)``.

    Attributes:
        text: Link text
        target: Raw link target, including any ``#fragment``
        line: 1-based source line
    """

    text: str
    target: str
    line: int

    @property
    def is_external(self) -> bool:
        """True for URLs, ``mailto:`` and same-page anchors."""
        return bool(_EXTERNAL_RE.match(self.target))

    @property
    def path_part(self) -> str:
        """Target without fragment or query."""
        return self.target.split("#", 1)[0].split("?", 1)[0]

    def to_dict(self) -> dict:
        return {"text": self.text, "target": self.target, "line": self.line}

    @classmethod
    def from_dict(cls, data: dict) -> Link:
        return cls(text=data.get("text", ""), target=data["target"], line=data["line"])


@dataclass(frozen=True)
class Section:
    """
    Heading-delimited section of a document.

    Attributes:
        title: Heading text without the leading hashes
        level: Heading level (2-6)
        line: 1-based line of the heading
        body: Text between this heading and the next heading of any level
        number: Leading number of a numbered concept heading
            ("3. Flexbox" -> 3), None otherwise
    """

    title: str
    level: int
    line: int
    body: str = ""
    number: Optional[int] = None

    def __post_init__(self) -> None:
        if not (2 <= self.level <= 6):
            raise ValueError(f"Section level must be 2-6: {self.level}")

    def to_dict(self) -> dict:
        d = {"title": self.title, "level": self.level, "line": self.line, "body": self.body}
        if self.number is not None:
            d["number"] = self.number
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Section:
        return cls(
            title=data["title"],
            level=data["level"],
            line=data["line"],
            body=data.get("body", ""),
            number=data.get("number"),
        )


@dataclass(frozen=True)
class TopicDocument:
    """
    Lesson document (immutable).

    Attributes:
        path: Path relative to the corpus root, POSIX separators
        module: Owning module directory ("04-html") or None for week/loose files
        title: Level-1 heading text, empty when missing
        overview: Body of the Overview section, empty when missing
        sections: All level 2+ sections in document order
        code_blocks: Fenced code illustrations
        links: Every inline link outside code fences
        next_steps: Links inside the Next Steps section
        module_refs: Module numbers named in prose ("proceed to Module 13")
        checklist: Items of the Summary Checklist section
        unclosed_fence_line: Line of a code fence that never closes

    Invariants:
        - path is relative (never starts with "/")
        - derived values (concept sections, languages) are calculated

    Example:
        >>> doc.title
        'CSS Selectors'
        >>> [s.number for s in doc.concept_sections]
        [1, 2, 3]
    """

    path: str
    module: Optional[str]
    title: str
    overview: str = ""
    sections: tuple[Section, ...] = ()
    code_blocks: tuple[CodeBlock, ...] = ()
    links: tuple[Link, ...] = ()
    next_steps: tuple[Link, ...] = ()
    module_refs: tuple[tuple[int, int], ...] = ()  # (module number, line)
    checklist: tuple[str, ...] = ()
    has_overview: bool = False
    unclosed_fence_line: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.path or self.path.startswith("/"):
            raise ValueError(f"path must be relative to the corpus root: {self.path!r}")

    @cached_property
    def concept_sections(self) -> tuple[Section, ...]:
        """Numbered concept sections ("1. Introduction", "2. Selectors", ...)."""
        return tuple(s for s in self.sections if s.number is not None)

    @property
    def has_summary_checklist(self) -> bool:
        return bool(self.checklist)

    @cached_property
    def code_languages(self) -> frozenset[str]:
        return frozenset(b.language.lower() for b in self.code_blocks if b.language)

    def get_section(self, title: str) -> Optional[Section]:
        """Find the first section whose title matches case-insensitively."""
        wanted = title.strip().lower()
        for section in self.sections:
            if section.title.strip().lower() == wanted:
                return section
        return None

    def to_dict(self) -> dict:
        d = {
            "path": self.path,
            "module": self.module,
            "title": self.title,
            "overview": self.overview,
            "has_overview": self.has_overview,
            "sections": [s.to_dict() for s in self.sections],
            "code_blocks": [b.to_dict() for b in self.code_blocks],
            "links": [link.to_dict() for link in self.links],
            "next_steps": [link.to_dict() for link in self.next_steps],
            "module_refs": [list(ref) for ref in self.module_refs],
            "checklist": list(self.checklist),
        }
        if self.unclosed_fence_line is not None:
            d["unclosed_fence_line"] = self.unclosed_fence_line
        return d

    @classmethod
    def from_dict(cls, data: dict) -> TopicDocument:
        return cls(
            path=data["path"],
            module=data.get("module"),
            title=data.get("title", ""),
            overview=data.get("overview", ""),
            has_overview=data.get("has_overview", False),
            sections=tuple(Section.from_dict(s) for s in data.get("sections", [])),
            code_blocks=tuple(CodeBlock.from_dict(b) for b in data.get("code_blocks", [])),
            links=tuple(Link.from_dict(link) for link in data.get("links", [])),
            next_steps=tuple(Link.from_dict(link) for link in data.get("next_steps", [])),
            module_refs=tuple(tuple(ref) for ref in data.get("module_refs", [])),
            checklist=tuple(data.get("checklist", [])),
            unclosed_fence_line=data.get("unclosed_fence_line"),
        )

    def __repr__(self) -> str:
        return f"TopicDocument({self.path!r}, title={self.title!r}, sections={len(self.sections)})"
