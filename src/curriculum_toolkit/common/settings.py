"""Corpus settings loading and validation.

Settings live in an optional ``curriculum.json`` at the corpus root (or a
file passed with ``--config``). Every field has a default, so a corpus
without a settings file lints with the reference curriculum's rules.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# =============================================================================
# Schema Versioning
# =============================================================================
# BACKWARD COMPATIBILITY POLICY:
# - Older settings files are accepted; a soft warning is logged
# - Newer settings files are accepted silently
# - Unknown keys are ignored with a warning
#
# Changelog:
#   v1: Initial settings (set sizes, file names, disabled rules)
#   v2: Added severity_overrides and topic_aliases
# =============================================================================
SETTINGS_SCHEMA_VERSION = 2
SETTINGS_FILENAME = "curriculum.json"

_SEVERITIES = ("error", "warning")


class ConfigError(RuntimeError):
    """Raised when a settings file is unreadable or holds invalid values."""


@dataclass(frozen=True)
class LintSettings:
    """
    Validated corpus settings (immutable).

    Attributes:
        mcq_filename: MCQ bank file name inside week folders
        answers_filename: Answer key file name inside week folders
        interview_filename: Interview question file name inside week folders
        mcq_option_count: Options every MCQ must have (A..)
        interview_set_size: Questions every interview set must hold
        expected_interview_sets: week name -> expected set count
        require_topic_tags: Report MCQs without a topic tag
        disabled_rules: Lint codes to skip
        severity_overrides: Lint code -> "error" | "warning"
        topic_aliases: Normalized tag -> canonical tag
        exclude: Directory names skipped during discovery
        demo_root: Demo projects directory, relative to the corpus root

    Example:
        >>> settings = LintSettings(expected_interview_sets={"week-06": 38})
        >>> settings.interview_set_size
        5
    """

    mcq_filename: str = "mcq.md"
    answers_filename: str = "mcq-answers.md"
    interview_filename: str = "interview-questions.md"
    mcq_option_count: int = 4
    interview_set_size: int = 5
    expected_interview_sets: Dict[str, int] = field(default_factory=dict)
    require_topic_tags: bool = True
    disabled_rules: Tuple[str, ...] = ()
    severity_overrides: Dict[str, str] = field(default_factory=dict)
    topic_aliases: Dict[str, str] = field(default_factory=dict)
    exclude: Tuple[str, ...] = ("node_modules", "target", "build", "dist")
    demo_root: str = "resources/demo/spring"

    def __post_init__(self) -> None:
        if not (2 <= self.mcq_option_count <= 26):
            raise ConfigError(f"mcq_option_count must be 2-26: {self.mcq_option_count}")
        if self.interview_set_size < 1:
            raise ConfigError(f"interview_set_size must be positive: {self.interview_set_size}")
        for week, count in self.expected_interview_sets.items():
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ConfigError(f"expected_interview_sets[{week!r}] must be a non-negative integer")
        for code, severity in self.severity_overrides.items():
            if severity not in _SEVERITIES:
                raise ConfigError(
                    f"severity_overrides[{code!r}] must be one of {_SEVERITIES}: {severity!r}"
                )
        for name in (self.mcq_filename, self.answers_filename, self.interview_filename):
            if not name or "/" in name or "\\" in name:
                raise ConfigError(f"Week file names must be plain file names: {name!r}")

    def is_enabled(self, code: str) -> bool:
        return code not in self.disabled_rules

    def severity_for(self, code: str, default: str) -> str:
        return self.severity_overrides.get(code, default)


def _expect(data: Dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = data[key]
    # bool is an int subclass; reject it where an int is expected
    if kind is int and isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    if not isinstance(value, kind):
        names = kind.__name__ if isinstance(kind, type) else "/".join(k.__name__ for k in kind)
        raise ConfigError(f"{key} must be {names}, got {type(value).__name__}")
    return value


def settings_from_dict(data: Dict[str, Any], *, source: str = "<dict>") -> LintSettings:
    """
    Build LintSettings from a decoded settings document.

    Raises:
        ConfigError: On wrongly typed or invalid values
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a JSON object: {source}")

    version = data.get("settings_schema_version", 1)
    if not isinstance(version, int) or isinstance(version, bool):
        raise ConfigError("settings_schema_version must be an integer")
    if version < SETTINGS_SCHEMA_VERSION:
        logger.warning(
            f"Settings {source} have settings_schema_version {version}, "
            f"expected {SETTINGS_SCHEMA_VERSION}. Newer options use defaults."
        )

    known = {f.name for f in fields(LintSettings)}
    unknown = sorted(set(data) - known - {"settings_schema_version"})
    if unknown:
        logger.warning(f"Ignoring unknown settings in {source}: {unknown}")

    kwargs: Dict[str, Any] = {}
    for key in ("mcq_filename", "answers_filename", "interview_filename", "demo_root"):
        if key in data:
            kwargs[key] = _expect(data, key, str)
    for key in ("mcq_option_count", "interview_set_size"):
        if key in data:
            kwargs[key] = _expect(data, key, int)
    if "require_topic_tags" in data:
        kwargs["require_topic_tags"] = _expect(data, "require_topic_tags", bool)
    for key in ("disabled_rules", "exclude"):
        if key in data:
            items = _expect(data, key, list)
            if not all(isinstance(i, str) for i in items):
                raise ConfigError(f"{key} must be a list of strings")
            kwargs[key] = tuple(items)
    for key in ("expected_interview_sets", "severity_overrides", "topic_aliases"):
        if key in data:
            kwargs[key] = dict(_expect(data, key, dict))

    return LintSettings(**kwargs)


def load_settings(path: Optional[Path] = None, *, corpus_root: Optional[Path] = None) -> LintSettings:
    """
    Load settings from an explicit file or the corpus root.

    Args:
        path: Explicit settings file; must exist when given
        corpus_root: Looked up for ``curriculum.json`` when path is None

    Returns:
        LintSettings (defaults when no file is found)

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON,
            or holds invalid values
    """
    if path is None:
        if corpus_root is None:
            return LintSettings()
        candidate = corpus_root / SETTINGS_FILENAME
        if not candidate.exists():
            logger.debug(f"No {SETTINGS_FILENAME} in {corpus_root}, using defaults")
            return LintSettings()
        path = candidate

    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read settings {path}: {e}") from e

    settings = settings_from_dict(data, source=str(path))
    logger.info(f"Loaded settings from {path}")
    return settings
