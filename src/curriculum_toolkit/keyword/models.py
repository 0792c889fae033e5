"""
Module: keyword.models

Purpose:
    Data models for keyword search. An entry is one searchable corpus
    item (an MCQ, an interview question or a document section) holding
    named text fields; a result aggregates hits across keywords.

Key Classes:
    - KeywordEntry: Indexed text for one corpus item
    - KeywordSearchResult: Aggregated search results

Dependencies:
    - dataclasses (std)

Used By:
    - keyword.index: KeywordIndex
    - builder.controller: Keyword filtering
    - cli: ``curriculum search``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Set

MCQ = "mcq"
INTERVIEW = "interview"
DOCUMENT = "doc"


@dataclass(frozen=True)
class KeywordEntry:
    """
    Indexed text for a single corpus item.

    Attributes:
        entry_id: Stable id ("mcq:week-05:12", "interview:week-06:3:2",
            "doc:05-css/01-selectors.md#2. Specificity")
        kind: "mcq", "interview" or "doc"
        title: Short display text (stem, prompt or section title)
        fields: Field name -> searchable text ("stem", "option B", "answer")
        path: Source file relative to the corpus root
        line: 1-based source line

    Example:
        >>> entry = KeywordEntry(
        ...     entry_id="mcq:week-05:1",
        ...     kind="mcq",
        ...     title="Which selector has the highest specificity?",
        ...     fields={"stem": "Which selector ...", "option A": "#id"},
        ... )
    """
    entry_id: str
    kind: str
    title: str = ""
    fields: Dict[str, str] = field(default_factory=dict)
    path: str = ""
    line: int = 0

    def matches_substring(self, term: str) -> Set[str]:
        """
        Find fields containing term after normalisation.

        Args:
            term: Normalized search term (lowercase, no whitespace)

        Returns:
            Set of matching field names
        """
        return {name for name, text in self.fields.items() if term in _normalize(text)}

    def matches_exact(self, pattern) -> Set[str]:
        """
        Find fields matching a compiled word-boundary pattern.

        Returns:
            Set of matching field names
        """
        return {name for name, text in self.fields.items() if pattern.search(text)}


@dataclass
class KeywordSearchResult:
    """
    Result of a keyword search across the corpus.

    Attributes:
        keywords: Keywords searched, in the order given
        keyword_hits: keyword -> matching entry ids
        keyword_field_hits: keyword -> (entry id -> matching field names)
        aggregate_fields: entry id -> matching field names across keywords
        entries: entry id -> KeywordEntry for every matched entry

    Example:
        >>> result.keyword_hits["bean"]
        {'interview:week-06:1:2', 'mcq:week-06:4'}
        >>> result.entries_matching_all
        frozenset({'mcq:week-06:4'})
    """
    keywords: tuple[str, ...] = ()
    keyword_hits: Dict[str, Set[str]] = field(default_factory=dict)
    keyword_field_hits: Dict[str, Dict[str, Set[str]]] = field(default_factory=dict)
    aggregate_fields: Dict[str, Set[str]] = field(default_factory=dict)
    entries: Dict[str, KeywordEntry] = field(default_factory=dict)

    @property
    def entry_ids(self) -> FrozenSet[str]:
        """All matching entry ids (union across keywords)."""
        return frozenset(self.aggregate_fields.keys())

    @property
    def entries_matching_all(self) -> FrozenSet[str]:
        """Entry ids matched by every keyword."""
        if not self.keywords:
            return frozenset()
        hits = [self.keyword_hits.get(kw, set()) for kw in self.keywords]
        return frozenset(set.intersection(*hits)) if hits else frozenset()

    @property
    def is_empty(self) -> bool:
        return len(self.aggregate_fields) == 0

    @property
    def total_entries(self) -> int:
        return len(self.aggregate_fields)

    def ids_of_kind(self, kind: str, *, match_all: bool = False) -> FrozenSet[str]:
        """Matching entry ids of one kind ("mcq", "interview", "doc")."""
        ids = self.entries_matching_all if match_all else self.entry_ids
        return frozenset(i for i in ids if i.startswith(f"{kind}:"))

    def fields_for_entry(self, entry_id: str) -> Set[str]:
        return self.aggregate_fields.get(entry_id, set())

    def get_entry(self, entry_id: str) -> Optional[KeywordEntry]:
        return self.entries.get(entry_id)


def _normalize(text: str) -> str:
    """Normalize text for loose matching: lowercase, remove whitespace."""
    return "".join(text.lower().split())


def mcq_entry_id(week: str, number: int) -> str:
    return f"{MCQ}:{week}:{number}"


def interview_entry_id(week: str, student: int, number: int) -> str:
    return f"{INTERVIEW}:{week}:{student}:{number}"


def document_entry_id(path: str, section: str) -> str:
    return f"{DOCUMENT}:{path}#{section}"
