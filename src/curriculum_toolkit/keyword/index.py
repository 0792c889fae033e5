"""
Module: keyword.index

Purpose:
    In-memory keyword index over a loaded corpus: MCQ stems and options,
    interview prompts and answers, and topic document sections.
    Supports exact (word-boundary) and fuzzy (substring) matching.

Key Classes:
    - KeywordIndex: Main index class with search method

Dependencies:
    - re: Regex for exact matching
    - concurrent.futures: Parallel search
    - curriculum_toolkit.core.models: Corpus

Used By:
    - builder.controller: Keyword filtering pipeline
    - cli: ``curriculum search``
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Dict, Iterator, List, Set

from curriculum_toolkit.core.models import Corpus

from .models import (
    DOCUMENT,
    INTERVIEW,
    MCQ,
    KeywordEntry,
    KeywordSearchResult,
    _normalize,
    document_entry_id,
    interview_entry_id,
    mcq_entry_id,
)

logger = logging.getLogger(__name__)


def _corpus_entries(corpus: Corpus) -> Iterator[KeywordEntry]:
    for week in corpus.weeks:
        if week.mcq_bank:
            for question in week.mcq_bank.questions:
                fields = {"stem": question.stem}
                for letter, text in question.options:
                    fields[f"option {letter}"] = text
                if question.topic:
                    fields["topic"] = question.topic
                yield KeywordEntry(
                    entry_id=mcq_entry_id(week.name, question.number),
                    kind=MCQ,
                    title=question.stem,
                    fields=fields,
                    path=week.mcq_bank.path,
                    line=question.line,
                )
        for interview_set in week.interview_sets:
            for question in interview_set.questions:
                yield KeywordEntry(
                    entry_id=interview_entry_id(week.name, interview_set.student, question.number),
                    kind=INTERVIEW,
                    title=question.prompt,
                    fields={"prompt": question.prompt, "answer": question.answer},
                    path=week.interview_path or week.name,
                    line=question.line,
                )

    for doc in corpus.all_documents:
        for section in doc.sections:
            yield KeywordEntry(
                entry_id=document_entry_id(doc.path, section.title),
                kind=DOCUMENT,
                title=f"{doc.title} / {section.title}" if doc.title else section.title,
                fields={"title": section.title, "body": section.body},
                path=doc.path,
                line=section.line,
            )


class KeywordIndex:
    """
    In-memory keyword index built from a Corpus.

    Thread-safe for concurrent searches.

    Example:
        >>> index = KeywordIndex()
        >>> index.prime(corpus)
        >>> result = index.search(["dependency injection", '"bean"'])
        >>> sorted(result.ids_of_kind("mcq"))
        ['mcq:week-06:4', 'mcq:week-06:11']
    """

    def __init__(self) -> None:
        """Initialize empty keyword index."""
        self._entries: Dict[str, KeywordEntry] = {}
        self._lock = Lock()

    def prime(self, corpus: Corpus) -> None:
        """
        Populate the index from a corpus.

        Clears any existing entries first. When two items share an id
        (a repeated question number, two sections with one title) the
        first one wins.
        """
        with self._lock:
            self._entries.clear()
            duplicates = 0
            for entry in _corpus_entries(corpus):
                if entry.entry_id in self._entries:
                    duplicates += 1
                    continue
                self._entries[entry.entry_id] = entry
            if duplicates:
                logger.debug(f"Skipped {duplicates} entries with duplicate ids")
            logger.info(f"Indexed {len(self._entries)} entries for keyword search")

    def search(self, keywords: List[str]) -> KeywordSearchResult:
        """
        Search for entries matching keywords.

        Supports two matching modes:
        - Exact: Wrap keyword in quotes ("bean") for word-boundary matching
        - Fuzzy: Plain keyword (bean) for substring matching, ignoring
          case and whitespace

        Args:
            keywords: List of terms to search for

        Returns:
            KeywordSearchResult with matching entry ids and field names
        """
        clean_keywords = [kw.strip() for kw in keywords if kw and kw.strip()]
        if not clean_keywords:
            return KeywordSearchResult()

        keyword_tuples = []
        for kw in dict.fromkeys(clean_keywords):
            if len(kw) >= 2 and kw.startswith('"') and kw.endswith('"'):
                term = kw[1:-1].strip()
                if term:
                    keyword_tuples.append((kw, term, True))
            else:
                keyword_tuples.append((kw, _normalize(kw), False))
        if not keyword_tuples:
            return KeywordSearchResult()

        keyword_hits: Dict[str, Set[str]] = {}
        keyword_field_hits: Dict[str, Dict[str, Set[str]]] = {}
        aggregate_fields: Dict[str, Set[str]] = {}

        with self._lock:
            entries = dict(self._entries)

        if len(keyword_tuples) > 1:
            with ThreadPoolExecutor(max_workers=min(4, len(keyword_tuples))) as pool:
                future_map = {
                    pool.submit(self._match_keyword, term, is_exact, entries): kw_orig
                    for kw_orig, term, is_exact in keyword_tuples
                }
                for future, kw_orig in future_map.items():
                    self._aggregate_results(
                        kw_orig, future.result(),
                        keyword_hits, keyword_field_hits, aggregate_fields,
                    )
        else:
            kw_orig, term, is_exact = keyword_tuples[0]
            self._aggregate_results(
                kw_orig, self._match_keyword(term, is_exact, entries),
                keyword_hits, keyword_field_hits, aggregate_fields,
            )

        return KeywordSearchResult(
            keywords=tuple(kw for kw, _, _ in keyword_tuples),
            keyword_hits=keyword_hits,
            keyword_field_hits=keyword_field_hits,
            aggregate_fields=aggregate_fields,
            entries={eid: entries[eid] for eid in aggregate_fields},
        )

    def _aggregate_results(
        self,
        keyword: str,
        per_keyword: Dict[str, Set[str]],
        keyword_hits: Dict[str, Set[str]],
        keyword_field_hits: Dict[str, Dict[str, Set[str]]],
        aggregate_fields: Dict[str, Set[str]],
    ) -> None:
        """Aggregate results from a single keyword search."""
        keyword_field_hits[keyword] = per_keyword
        keyword_hits[keyword] = set(per_keyword.keys())
        for eid, names in per_keyword.items():
            aggregate_fields.setdefault(eid, set()).update(names)

    def _match_keyword(
        self,
        term: str,
        is_exact: bool,
        entries: Dict[str, KeywordEntry],
    ) -> Dict[str, Set[str]]:
        """
        Find entries/fields matching a keyword.

        Returns:
            Dict mapping entry_id -> set of matching field names
        """
        matches: Dict[str, Set[str]] = {}
        pattern = re.compile(fr"\b{re.escape(term)}\b", re.IGNORECASE) if is_exact else None

        for eid, entry in entries.items():
            matched = entry.matches_exact(pattern) if pattern else entry.matches_substring(term)
            if matched:
                matches[eid] = matched
        return matches

    @property
    def entry_count(self) -> int:
        """Number of indexed entries."""
        return len(self._entries)
