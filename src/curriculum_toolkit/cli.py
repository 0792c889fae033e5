"""
Command-line entry point: ``curriculum``.

Subcommands:
    lint    Check corpus integrity (exit 1 when errors are found)
    index   Export corpus_index.json and questions.jsonl
    search  Keyword search over questions, interview sets and documents
    stats   Corpus counts and code languages
    build   Build a quiz PDF and answer key

Exit codes: 0 success, 1 lint errors, 2 usage/loader/config failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import List, Optional

from curriculum_toolkit import __version__
from curriculum_toolkit.builder import BuildError, QuizConfig, build_quiz
from curriculum_toolkit.common.logging_utils import configure_logging, verbosity_to_level
from curriculum_toolkit.common.settings import ConfigError, LintSettings, load_settings
from curriculum_toolkit.core.models import Corpus
from curriculum_toolkit.core.schemas import ValidationError
from curriculum_toolkit.core.utils import export_index
from curriculum_toolkit.keyword import KeywordIndex
from curriculum_toolkit.lint import FORMATS, lint_corpus, render
from curriculum_toolkit.loading import LoaderError, load_corpus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LINT_ERRORS = 1
EXIT_FAILURE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="curriculum",
        description="Lint, index, search and build quizzes from a curriculum corpus.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable)")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less logging (repeatable)")
    parser.add_argument("--log-file", type=Path, help="Also write DEBUG logging to this file")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("root", type=Path, help="Corpus root directory")
    common.add_argument("--config", type=Path, help="Settings file (default: ROOT/curriculum.json)")

    sub = parser.add_subparsers(dest="command", required=True)

    lint = sub.add_parser("lint", parents=[common], help="Check corpus integrity")
    lint.add_argument("--format", choices=FORMATS, default="text")
    lint.add_argument("--output", type=Path, help="Write the report to a file instead of stdout")
    lint.set_defaults(handler=_cmd_lint)

    index = sub.add_parser("index", parents=[common], help="Export corpus index and questions")
    index.add_argument("--output", type=Path, required=True, help="Output directory")
    index.set_defaults(handler=_cmd_index)

    search = sub.add_parser("search", parents=[common], help="Keyword search")
    search.add_argument("keywords", nargs="+", metavar="KEYWORD", help='Plain = fuzzy, "quoted" = whole word')
    search.add_argument("--all", action="store_true", help="Only entries matching every keyword")
    search.add_argument("--kind", choices=("mcq", "interview", "doc"), help="Restrict to one entry kind")
    search.set_defaults(handler=_cmd_search)

    stats = sub.add_parser("stats", parents=[common], help="Corpus statistics")
    stats.add_argument("--format", choices=FORMATS, default="text")
    stats.set_defaults(handler=_cmd_stats)

    build = sub.add_parser("build", parents=[common], help="Build a quiz PDF")
    build.add_argument("--count", type=int, required=True, help="Number of questions")
    build.add_argument("--week", action="append", default=[], help="Week to draw from (repeatable)")
    build.add_argument("--topic", action="append", default=[], help="Topic to draw from (repeatable)")
    build.add_argument("--keyword", action="append", default=[], help="Keyword filter (repeatable)")
    build.add_argument("--seed", type=int, default=42)
    build.add_argument("--output", type=Path, help="Base output directory (default: ./output)")
    build.add_argument("--title", default="Curriculum Quiz")
    build.add_argument("--zip", action="store_true", help="Also export a markdown ZIP")
    build.add_argument("--no-answer-key", action="store_true", help="Skip the answer key PDF")
    build.add_argument("--no-topic-coverage", action="store_true", help="Do not force one question per topic")
    build.add_argument("--shuffle", action="store_true", help="Shuffle question order")
    build.add_argument("--no-footer", action="store_true", help="Omit the version footer")
    build.set_defaults(handler=_cmd_build)

    return parser


def _settings(args: argparse.Namespace) -> LintSettings:
    return load_settings(args.config, corpus_root=args.root)


def _load(args: argparse.Namespace) -> tuple[Corpus, LintSettings]:
    settings = _settings(args)
    return load_corpus(args.root, settings), settings


def _emit(text: str, output: Optional[Path] = None) -> None:
    if output is None:
        sys.stdout.write(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {output}")


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def _cmd_lint(args: argparse.Namespace) -> int:
    corpus, settings = _load(args)
    report = lint_corpus(corpus, settings)
    _emit(render(report, args.format), args.output)
    return EXIT_OK if report.ok else EXIT_LINT_ERRORS


def _cmd_index(args: argparse.Namespace) -> int:
    corpus, _ = _load(args)
    index_path, questions_path = export_index(corpus, args.output)
    print(f"Wrote {index_path}")
    print(f"Wrote {questions_path}")
    return EXIT_OK


def _cmd_search(args: argparse.Namespace) -> int:
    corpus, _ = _load(args)
    index = KeywordIndex()
    index.prime(corpus)
    result = index.search(args.keywords)

    if args.kind:
        ids = result.ids_of_kind(args.kind, match_all=args.all)
    else:
        ids = result.entries_matching_all if args.all else result.entry_ids

    for entry_id in sorted(ids):
        entry = result.get_entry(entry_id)
        fields = ", ".join(sorted(result.fields_for_entry(entry_id)))
        title = " ".join(entry.title.split()) if entry else ""
        if len(title) > 80:
            title = title[:77] + "..."
        location = f"{entry.path}:{entry.line}" if entry else ""
        print(f"{entry_id}\t{location}\t[{fields}]\t{title}")
    logger.info(f"{len(ids)} entries matched")
    return EXIT_OK


def corpus_stats(corpus: Corpus) -> dict:
    """Counts shown by ``curriculum stats``."""
    languages: Counter = Counter()
    for doc in corpus.all_documents:
        for block in doc.code_blocks:
            languages[block.language.lower() or "(none)"] += 1
    return {
        "root": str(corpus.root),
        "modules": len(corpus.modules),
        "documents": len(corpus.all_documents),
        "weeks": len(corpus.weeks),
        "mcq_questions": corpus.question_count,
        "mcq_answers": sum(len(w.answer_key) for w in corpus.weeks if w.answer_key),
        "interview_sets": corpus.interview_set_count,
        "interview_questions": sum(s.size for w in corpus.weeks for s in w.interview_sets),
        "demo_stages": len(corpus.demo_stages),
        "load_errors": len(corpus.load_errors),
        "code_languages": dict(sorted(languages.items(), key=lambda kv: (-kv[1], kv[0]))),
    }


def _cmd_stats(args: argparse.Namespace) -> int:
    corpus, _ = _load(args)
    stats = corpus_stats(corpus)
    if args.format == "json":
        _emit(json.dumps(stats, indent=2) + "\n")
        return EXIT_OK

    lines = [f"Corpus: {stats['root']}"]
    for key in (
        "modules", "documents", "weeks", "mcq_questions", "mcq_answers",
        "interview_sets", "interview_questions", "demo_stages", "load_errors",
    ):
        lines.append(f"  {key.replace('_', ' ')}: {stats[key]}")
    if stats["code_languages"]:
        lines.append("  code languages:")
        for language, count in stats["code_languages"].items():
            lines.append(f"    {language}: {count}")
    _emit("\n".join(lines) + "\n")
    return EXIT_OK


def _cmd_build(args: argparse.Namespace) -> int:
    settings = _settings(args)
    try:
        config = QuizConfig(
            corpus_root=args.root,
            question_count=args.count,
            weeks=list(args.week),
            topics=list(args.topic),
            keywords=list(args.keyword),
            seed=args.seed,
            force_topic_coverage=not args.no_topic_coverage,
            shuffle=args.shuffle,
            output_dir=args.output,
            include_answer_key=not args.no_answer_key,
            export_zip=args.zip,
            title=args.title,
            show_footer=not args.no_footer,
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e

    result = build_quiz(config, settings)
    print(f"Quiz: {result.quiz_pdf}")
    if result.answer_key_pdf:
        print(f"Answer key: {result.answer_key_pdf}")
    if result.quiz_zip:
        print(f"ZIP: {result.quiz_zip}")
    for warning in result.warnings:
        logger.warning(warning)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Returns:
        Process exit code
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbosity_to_level(args.verbose, args.quiet), args.log_file)
    except OSError as e:
        parser.error(f"cannot open log file: {e}")

    try:
        return args.handler(args)
    except (ConfigError, LoaderError, BuildError, ValidationError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
