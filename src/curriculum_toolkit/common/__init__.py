"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .topics import (
    normalise_topic_label,
    module_label,
    normalise_topic_tag,
    resolve_topic_tag,
    FALLBACK_TOPIC,
)
from .settings import (
    LintSettings,
    ConfigError,
    load_settings,
    settings_from_dict,
    SETTINGS_SCHEMA_VERSION,
)

__all__ = [
    # topics
    "normalise_topic_label",
    "module_label",
    "normalise_topic_tag",
    "resolve_topic_tag",
    "FALLBACK_TOPIC",
    # settings
    "LintSettings",
    "ConfigError",
    "load_settings",
    "settings_from_dict",
    "SETTINGS_SCHEMA_VERSION",
]
