"""
Module: extractor.demos

Purpose:
    Inspect a Spring demo stage directory without building it. Java
    sources are read as text: ``@SpringBootApplication`` marks an entry
    point, ``*Test*.java`` files under ``src/test`` are test classes, and
    ``port 8081`` / ``server.port=8081`` announce listening ports.

Key Functions:
    - scan_demo_stage(): DemoStage for one ``stage-<N>-<slug>`` directory
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List

from curriculum_toolkit.common.path_utils import parse_stage_dir, relative_posix
from curriculum_toolkit.core.models.corpus import DemoStage

from .markdown import ParseError

logger = logging.getLogger(__name__)

_BUILD_FILES = ("pom.xml", "build.gradle", "build.gradle.kts")
_SKIP_DIRS = {"target", "build", "node_modules", ".git", ".gradle", ".idea", ".mvn"}

_ENTRYPOINT_RE = re.compile(r"@SpringBootApplication\b")
_CLASS_RE = re.compile(r"\bclass\s+(\w+)")
_JAVA_PORT_RE = re.compile(r"\bport\s*:?\s+(\d{2,5})\b", re.IGNORECASE)
_PROPERTIES_PORT_RE = re.compile(r"^\s*server\.port\s*[=:]\s*(\d{2,5})\s*$", re.MULTILINE)
_YAML_PORT_RE = re.compile(r"^\s*port\s*:\s*(\d{2,5})\s*$", re.MULTILINE)


def _is_service_dir(path: Path) -> bool:
    return path.is_dir() and (
        (path / "src").is_dir() or any((path / name).is_file() for name in _BUILD_FILES)
    )


def _walk(base: Path, pattern: str) -> Iterable[Path]:
    for path in sorted(base.rglob(pattern)):
        if any(part in _SKIP_DIRS for part in path.relative_to(base).parts):
            continue
        if path.is_file():
            yield path


def _read(path: Path, root: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read {relative_posix(path, root)}: {e}", path=relative_posix(path, root)) from e


def _valid_port(value: str) -> bool:
    return 1 <= int(value) <= 65535


def _scan_service(service_dir: Path, root: Path) -> tuple[List[str], List[str], List[int]]:
    entrypoints: List[str] = []
    tests: List[str] = []
    ports: set[int] = set()

    for java in _walk(service_dir, "*.java"):
        source = _read(java, root)
        rel_parts = java.relative_to(service_dir).parts
        marker = _ENTRYPOINT_RE.search(source)
        if marker:
            cls = _CLASS_RE.search(source, marker.end())
            entrypoints.append(cls.group(1) if cls else java.stem)
        if "test" in rel_parts and "Test" in java.stem:
            tests.append(java.stem)
        ports.update(int(p) for p in _JAVA_PORT_RE.findall(source) if _valid_port(p))

    for props in _walk(service_dir, "application*.properties"):
        ports.update(int(p) for p in _PROPERTIES_PORT_RE.findall(_read(props, root)) if _valid_port(p))
    for pattern in ("application*.yml", "application*.yaml"):
        for yml in _walk(service_dir, pattern):
            ports.update(int(p) for p in _YAML_PORT_RE.findall(_read(yml, root)) if _valid_port(p))

    return sorted(set(entrypoints)), sorted(set(tests)), sorted(ports)


def scan_demo_stage(path: Path, root: Path) -> DemoStage:
    """
    Scan a demo stage directory.

    Subdirectories holding ``src/`` or a build file are services. A stage
    with none of them is treated as one service named after the stage.

    Args:
        path: Stage directory (``stage-<N>-<slug>``)
        root: Corpus root

    Returns:
        DemoStage

    Raises:
        ValueError: If the directory name is not a stage name
        ParseError: If a source file cannot be read
    """
    parsed = parse_stage_dir(path.name)
    if parsed is None:
        raise ValueError(f"Not a demo stage directory: {path.name}")
    number, slug = parsed

    service_dirs = [
        child for child in sorted(path.iterdir())
        if not child.name.startswith(".") and child.name not in _SKIP_DIRS and _is_service_dir(child)
    ]
    if not service_dirs:
        services = {path.name: path}
    else:
        services = {child.name: child for child in service_dirs}

    entrypoints: Dict[str, tuple[str, ...]] = {}
    test_classes: Dict[str, tuple[str, ...]] = {}
    ports: Dict[str, tuple[int, ...]] = {}
    for name, service_dir in services.items():
        found_entry, found_tests, found_ports = _scan_service(service_dir, root)
        entrypoints[name] = tuple(found_entry)
        test_classes[name] = tuple(found_tests)
        ports[name] = tuple(found_ports)
        logger.debug(
            f"{path.name}/{name}: {len(found_entry)} entry points, "
            f"{len(found_tests)} test classes, ports {found_ports}"
        )

    return DemoStage(
        name=path.name,
        number=number,
        slug=slug,
        path=relative_posix(path, root),
        services=tuple(services),
        entrypoints=entrypoints,
        test_classes=test_classes,
        ports=ports,
    )
