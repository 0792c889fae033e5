"""
Module: loading.loader

Purpose:
    Discover and parse a curriculum corpus from disk. Walks the root for
    numbered module directories, week folders, the Spring demo tree and
    loose markdown files, and assembles an immutable Corpus.

    A file that fails to parse is logged and recorded in
    ``Corpus.load_errors``; loading carries on so the linter can report
    every defect in one pass.

Key Functions:
    - load_corpus(): Load a whole corpus
    - discover_markdown(): Markdown files under a directory, sorted

Key Classes:
    - LoaderError: Raised when the root itself is unusable

Dependencies:
    - pathlib (std)
    - curriculum_toolkit.extractor: File parsers
    - curriculum_toolkit.common: Settings, directory names

Used By:
    - lint, keyword, builder.controller, cli
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from curriculum_toolkit.common.path_utils import (
    parse_module_dir,
    parse_stage_dir,
    parse_week_dir,
    relative_posix,
)
from curriculum_toolkit.common.settings import LintSettings
from curriculum_toolkit.common.topics import module_label
from curriculum_toolkit.core.models import (
    AnswerKey,
    Corpus,
    CourseModule,
    DemoStage,
    InterviewSet,
    LoadFailure,
    McqBank,
    TopicDocument,
    WeekFolder,
)
from curriculum_toolkit.extractor import (
    ParseError,
    parse_answer_key,
    parse_interview_sets,
    parse_mcq_bank,
    parse_topic_document,
    scan_demo_stage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoaderError(Exception):
    """Error loading a corpus root."""
    pass


class _Collector:
    """Runs parsers, turning ParseError into recorded LoadFailures."""

    def __init__(self) -> None:
        self.failures: List[LoadFailure] = []

    def attempt(self, rel_path: str, parse: Callable[[], T]) -> Optional[T]:
        try:
            return parse()
        except ParseError as e:
            logger.warning(f"Skipping {rel_path}: {e}")
            self.failures.append(LoadFailure(path=e.path or rel_path, message=str(e), line=e.line))
            return None

    def unreadable_dir(self, root: Path) -> Callable[[Path, OSError], None]:
        """Handler for discover_markdown that records unlistable directories."""
        def record(directory: Path, error: OSError) -> None:
            self.failures.append(LoadFailure(
                path=relative_posix(directory, root),
                message=f"Cannot list directory: {error}",
            ))
        return record


def _skipped(path: Path, settings: LintSettings) -> bool:
    return path.name.startswith(".") or path.name in settings.exclude


def discover_markdown(
    directory: Path,
    settings: LintSettings,
    on_error: Optional[Callable[[Path, OSError], None]] = None,
) -> List[Path]:
    """
    Find markdown files under a directory.

    Hidden and excluded directories are not entered. A directory that
    cannot be listed is logged, passed to ``on_error`` and skipped.

    Returns:
        Paths sorted by their POSIX form
    """
    try:
        children = list(directory.iterdir())
    except OSError as e:
        logger.warning(f"Skipping directory {directory}: {e}")
        if on_error is not None:
            on_error(directory, e)
        return []

    found: List[Path] = []
    for child in children:
        if _skipped(child, settings):
            continue
        if child.is_dir():
            found.extend(discover_markdown(child, settings, on_error))
        elif child.is_file() and child.suffix.lower() == ".md":
            found.append(child)
    return sorted(found, key=lambda p: p.as_posix())


def _load_documents(
    paths: List[Path], root: Path, module: Optional[str], collector: _Collector
) -> tuple[TopicDocument, ...]:
    docs = []
    for path in paths:
        rel = relative_posix(path, root)
        doc = collector.attempt(rel, lambda p=path: parse_topic_document(p, root, module=module))
        if doc is not None:
            docs.append(doc)
    return tuple(sorted(docs, key=lambda d: d.path))


def _load_module(path: Path, root: Path, settings: LintSettings, collector: _Collector) -> CourseModule:
    number, slug = parse_module_dir(path.name)
    paths = discover_markdown(path, settings, collector.unreadable_dir(root))
    documents = _load_documents(paths, root, path.name, collector)
    logger.debug(f"Module {path.name}: {len(documents)} documents")
    return CourseModule(
        name=path.name,
        number=number,
        slug=slug,
        label=module_label(number, slug),
        documents=documents,
    )


def _load_week(path: Path, root: Path, settings: LintSettings, collector: _Collector) -> WeekFolder:
    number = parse_week_dir(path.name)
    mcq_path = path / settings.mcq_filename
    answers_path = path / settings.answers_filename
    interview_path = path / settings.interview_filename

    mcq_bank: Optional[McqBank] = None
    if mcq_path.is_file():
        rel = relative_posix(mcq_path, root)
        mcq_bank = collector.attempt(rel, lambda: parse_mcq_bank(mcq_path, rel))

    answer_key: Optional[AnswerKey] = None
    if answers_path.is_file():
        rel = relative_posix(answers_path, root)
        answer_key = collector.attempt(rel, lambda: parse_answer_key(answers_path, rel))

    interview_sets: tuple[InterviewSet, ...] = ()
    interview_rel: Optional[str] = None
    if interview_path.is_file():
        interview_rel = relative_posix(interview_path, root)
        parsed = collector.attempt(interview_rel, lambda: parse_interview_sets(interview_path, interview_rel))
        interview_sets = parsed or ()

    special = {settings.mcq_filename, settings.answers_filename, settings.interview_filename}
    found = discover_markdown(path, settings, collector.unreadable_dir(root))
    others = [p for p in found if not (p.parent == path and p.name in special)]
    documents = _load_documents(others, root, None, collector)

    logger.debug(
        f"Week {path.name}: {len(mcq_bank) if mcq_bank else 0} questions, "
        f"{len(answer_key) if answer_key else 0} answers, {len(interview_sets)} interview sets"
    )
    return WeekFolder(
        name=path.name,
        number=number,
        mcq_bank=mcq_bank,
        answer_key=answer_key,
        interview_sets=interview_sets,
        interview_path=interview_rel,
        documents=documents,
    )


def _load_demo_stages(root: Path, settings: LintSettings, collector: _Collector) -> tuple[DemoStage, ...]:
    demo_root = root / settings.demo_root
    if not demo_root.is_dir():
        return ()
    stages = []
    for child in sorted(demo_root.iterdir()):
        if not child.is_dir() or _skipped(child, settings) or parse_stage_dir(child.name) is None:
            continue
        stage = collector.attempt(relative_posix(child, root), lambda c=child: scan_demo_stage(c, root))
        if stage is not None:
            stages.append(stage)
    return tuple(sorted(stages, key=lambda s: (s.number, s.name)))


def load_corpus(root: Path, settings: Optional[LintSettings] = None) -> Corpus:
    """
    Load a curriculum corpus.

    Process:
    1. Classify the root's immediate children (modules, weeks, other)
    2. Parse module documents, week files and loose markdown
    3. Scan demo stages under ``settings.demo_root``
    4. Sort everything and collect load failures

    Args:
        root: Corpus root directory
        settings: Lint settings (defaults when None)

    Returns:
        Corpus

    Raises:
        LoaderError: If root does not exist or is not a directory

    Example:
        >>> corpus = load_corpus(Path("curriculum"))
        >>> [m.name for m in corpus.modules][:2]
        ['04-html', '05-css']
    """
    settings = settings or LintSettings()
    if not root.exists():
        raise LoaderError(f"Corpus root does not exist: {root}")
    if not root.is_dir():
        raise LoaderError(f"Corpus root is not a directory: {root}")
    root = root.resolve()

    collector = _Collector()
    modules: List[CourseModule] = []
    weeks: List[WeekFolder] = []
    loose_paths: List[Path] = []

    try:
        children = sorted(root.iterdir())
    except OSError as e:
        raise LoaderError(f"Cannot list corpus root {root}: {e}") from e

    for child in children:
        if _skipped(child, settings):
            continue
        if child.is_dir():
            if parse_module_dir(child.name):
                modules.append(_load_module(child, root, settings, collector))
            elif parse_week_dir(child.name) is not None:
                weeks.append(_load_week(child, root, settings, collector))
            else:
                loose_paths.extend(discover_markdown(child, settings, collector.unreadable_dir(root)))
        elif child.is_file() and child.suffix.lower() == ".md":
            loose_paths.append(child)

    loose_documents = _load_documents(sorted(loose_paths, key=lambda p: p.as_posix()), root, None, collector)
    demo_stages = _load_demo_stages(root, settings, collector)

    corpus = Corpus(
        root=root,
        modules=tuple(sorted(modules, key=lambda m: (m.number, m.name))),
        weeks=tuple(sorted(weeks, key=lambda w: (w.number, w.name))),
        demo_stages=demo_stages,
        loose_documents=loose_documents,
        load_errors=tuple(sorted(collector.failures, key=lambda f: (f.path, f.line))),
    )
    logger.info(
        f"Loaded corpus {root}: {len(corpus.modules)} modules, {len(corpus.weeks)} weeks, "
        f"{len(corpus.demo_stages)} demo stages, {len(corpus.all_documents)} documents"
    )
    if corpus.load_errors:
        logger.warning(f"{len(corpus.load_errors)} files could not be loaded")
    return corpus
