"""
Module: common.topics

Purpose:
    Helpers for working with curriculum topic labels. Module directories
    ("04-html", "21-spring-boot") and MCQ topic tags ("Spring MVC",
    "spring mvc ") are both free text; these functions turn them into
    canonical labels so filters, reports and quiz coverage compare like
    with like.

Key Functions:
    - normalise_topic_label(): "4. Html" / "04) Html" -> "04. Html"
    - module_label(): Directory slug to display label ("21-spring-boot" -> "21. Spring Boot")
    - normalise_topic_tag(): Collapse whitespace and case for comparison
    - resolve_topic_tag(): Canonical tag using configured aliases

Used By:
    - loading.loader: Module labels
    - builder.selection: Topic coverage and filters
    - lint.rules: Topic tag checks
"""

from __future__ import annotations

import re
from typing import Mapping, Optional


__all__ = [
    "normalise_topic_label",
    "module_label",
    "normalise_topic_tag",
    "resolve_topic_tag",
    "FALLBACK_TOPIC",
]


_TOPIC_PREFIX_RE = re.compile(r"^\s*(\d+)(?:[\.)\]]\s*|\s+)(.*)$")
_WHITESPACE_RE = re.compile(r"\s+")
FALLBACK_TOPIC = "Untagged"

# Slug words whose display form is not simple title case
_WORD_FORMS = {
    "api": "API",
    "apis": "APIs",
    "css": "CSS",
    "devops": "DevOps",
    "faq": "FAQ",
    "faqs": "FAQs",
    "html": "HTML",
    "http": "HTTP",
    "javascript": "JavaScript",
    "jdbc": "JDBC",
    "jpa": "JPA",
    "js": "JS",
    "json": "JSON",
    "junit": "JUnit",
    "mcq": "MCQ",
    "mvc": "MVC",
    "oop": "OOP",
    "rest": "REST",
    "sql": "SQL",
    "typescript": "TypeScript",
    "yaml": "YAML",
}


def normalise_topic_label(value: Optional[str]) -> str:
    """
    Normalize a numbered label to standard format "NN. Topic Name".

    Args:
        value: Raw label (e.g., "4. HTML", "04) HTML", "4 HTML").

    Returns:
        Label with zero-padded number and period (e.g., "04. HTML").
        Returns "00. Unknown" if value is empty; unnumbered values are
        returned stripped.

    Example:
        >>> normalise_topic_label("4. HTML")
        '04. HTML'
        >>> normalise_topic_label(None)
        '00. Unknown'
    """
    if not value:
        return "00. Unknown"
    match = _TOPIC_PREFIX_RE.match(value)
    if not match:
        return value.strip()
    number = int(match.group(1))
    remainder = match.group(2).strip()
    if remainder:
        return f"{number:02d}. {remainder}"
    return f"{number:02d}."


def module_label(number: int, slug: str) -> str:
    """
    Display label for a module directory.

    Example:
        >>> module_label(21, "spring-boot")
        '21. Spring Boot'
        >>> module_label(5, "rest-apis")
        '05. REST APIs'
    """
    words = [w for w in re.split(r"[-_\s]+", slug) if w]
    title = " ".join(_WORD_FORMS.get(w.lower(), w.capitalize()) for w in words)
    return normalise_topic_label(f"{number}. {title}" if title else f"{number}.")


def normalise_topic_tag(value: Optional[str]) -> str:
    """
    Normalize an MCQ topic tag for comparison.

    Returns:
        Lowercase tag with whitespace collapsed. Empty string if None.
    """
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip().lower()


def resolve_topic_tag(
    value: Optional[str],
    aliases: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Resolve a topic tag to its canonical display form.

    Aliases map normalized tags to canonical names, e.g.
    ``{"js": "JavaScript", "spring boot": "Spring Boot"}``. Tags without
    an alias keep their own spelling with whitespace collapsed.

    Returns:
        Canonical tag, or FALLBACK_TOPIC when value is empty.

    Example:
        >>> resolve_topic_tag("  js ", {"js": "JavaScript"})
        'JavaScript'
    """
    key = normalise_topic_tag(value)
    if not key:
        return FALLBACK_TOPIC
    if aliases:
        for alias, canonical in aliases.items():
            if normalise_topic_tag(alias) == key:
                return canonical
    return _WHITESPACE_RE.sub(" ", value or "").strip()
