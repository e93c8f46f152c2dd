"""
Package file discovery for extraction rules.

Applies a set of extraction rules to a local checkout, selecting package
files by each rule's ``fileMatch`` patterns.
"""

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict

from .regex import ExtractedDependency, ExtractionRule

logger = structlog.get_logger(__name__)

IGNORED_DIRECTORIES = frozenset({".git"})


class PackageFile(BaseModel):
    """Dependencies extracted from one package file."""

    model_config = ConfigDict(frozen=True)

    package_file: str
    deps: tuple[ExtractedDependency, ...]


def _iter_files(root: Path) -> Iterator[tuple[Path, str]]:
    """Yield ``(path, relative POSIX path)`` for every file, in sorted order."""
    for current, dirs, filenames in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIRECTORIES)
        current_path = Path(current)
        for name in sorted(filenames):
            path = current_path / name
            yield path, path.relative_to(root).as_posix()


def scan_text(
    path: str, text: str, rules: Iterable[ExtractionRule]
) -> list[ExtractedDependency]:
    """
    Extract dependencies from in-memory file content.

    Only rules whose ``fileMatch`` selects ``path`` are applied.
    """
    deps: list[ExtractedDependency] = []
    for rule in rules:
        if rule.applies_to(path):
            deps.extend(rule.extract(text, package_file=path))
    return deps


def scan_directory(
    root: str | Path, rules: Iterable[ExtractionRule]
) -> list[PackageFile]:
    """
    Extract dependencies from every matching file below ``root``.

    Args:
        root: Directory of a local checkout
        rules: Compiled extraction rules

    Returns:
        One entry per package file that produced at least one dependency
    """
    root_path = Path(root)
    rule_list = list(rules)
    results: list[PackageFile] = []

    for path, relative in _iter_files(root_path):
        if not any(rule.applies_to(relative) for rule in rule_list):
            continue

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            # Broken symlinks, unreadable or vanished files, binary content
            logger.warning(
                "Skipping unreadable package file", package_file=relative, error=str(e)
            )
            continue

        deps = scan_text(relative, text, rule_list)
        logger.info("Package file scanned", package_file=relative, deps=len(deps))
        if deps:
            results.append(PackageFile(package_file=relative, deps=tuple(deps)))

    return results
