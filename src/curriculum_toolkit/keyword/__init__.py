"""
Keyword Module.

Provides keyword search over MCQs, interview questions and topic
document sections.
"""

from .index import KeywordIndex
from .models import KeywordEntry, KeywordSearchResult

__all__ = ["KeywordIndex", "KeywordEntry", "KeywordSearchResult"]
