"""
Module: loading

Purpose:
    Corpus discovery. Classifies directories under a corpus root and
    runs the extractor parsers over them.

Key Functions:
    - load_corpus(): Load a whole corpus into a Corpus
    - discover_markdown(): Sorted markdown files under a directory

Used By:
    - lint, keyword, builder.controller, cli
"""

from .loader import LoaderError, discover_markdown, load_corpus

__all__ = [
    "LoaderError",
    "discover_markdown",
    "load_corpus",
]
