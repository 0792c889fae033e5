"""Path and directory-name utilities.

Provides shared functions for recognising corpus directories
(modules, weeks, demo stages) and resolving relative links between
corpus files.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import unquote

_MODULE_DIR_RE = re.compile(r"^(\d{2})-([a-z0-9][a-z0-9-]*)$")
_WEEK_DIR_RE = re.compile(r"^week-(\d{1,2})$")
_STAGE_DIR_RE = re.compile(r"^stage-(\d+)-([a-z0-9][a-z0-9-]*)$")


def parse_module_dir(name: str) -> Optional[tuple[int, str]]:
    """Parse a module directory name.

    Examples:
        >>> parse_module_dir("12-testing")
        (12, 'testing')
        >>> parse_module_dir("week-05") is None
        True
    """
    match = _MODULE_DIR_RE.match(name)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def parse_week_dir(name: str) -> Optional[int]:
    """Parse a week folder name ("week-06" -> 6)."""
    match = _WEEK_DIR_RE.match(name)
    return int(match.group(1)) if match else None


def parse_stage_dir(name: str) -> Optional[tuple[int, str]]:
    """Parse a demo stage directory ("stage-9-microservices" -> (9, 'microservices'))."""
    match = _STAGE_DIR_RE.match(name)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def relative_posix(path: Path, root: Path) -> str:
    """Path relative to root with POSIX separators."""
    return path.resolve().relative_to(root.resolve()).as_posix()


def resolve_link(doc_path: str, target: str, root: Path) -> Optional[Path]:
    """Resolve a relative link target against the linking document.

    Args:
        doc_path: Linking document, relative to root
        target: Link path without fragment, possibly URL-encoded
        root: Corpus root

    Returns:
        Absolute path the link points to, or None when the target
        escapes the corpus root.

    Examples:
        >>> resolve_link("04-html/01-intro.md", "../05-css/", Path("/c"))
        PosixPath('/c/05-css')
    """
    target = unquote(target)
    if target.startswith("/"):
        candidate = PurePosixPath(target.lstrip("/"))
    else:
        candidate = PurePosixPath(doc_path).parent / target

    parts: list[str] = []
    for part in candidate.parts:
        if part in ("", "."):
            continue
        if part == "..":
            if not parts:
                return None
            parts.pop()
        else:
            parts.append(part)
    return root.joinpath(*parts)
