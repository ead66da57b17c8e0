"""Name handling used throughout the project."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from .copier import ExclusionRuleSet

__all__ = ["PROJECT_SUFFIX", "contains", "detect_basename", "file_base", "replace_first"]


LOGGER = logging.getLogger(__name__)

PROJECT_SUFFIX = ".kicad_pro"


def file_base(new_basename: str, prefix: str = "dpx") -> str:
    """Return the name renamed entries carry in place of the old basename.

    The new basename is lowercased and ``prefix_`` is prepended unless it
    already starts with ``prefix_`` or ``prefix-``.
    """

    base = new_basename.lower()
    token = prefix.lower()
    if base.startswith((f"{token}_", f"{token}-")):
        return base
    return f"{token}_{base}"


def _pattern(old: str) -> re.Pattern[str]:
    return re.compile(re.escape(old), re.IGNORECASE)


def replace_first(name: str, old: str, new: str) -> str:
    """Replace the first case-insensitive occurrence of ``old`` in ``name``."""

    if not old:
        return name
    return _pattern(old).sub(lambda _match: new, name, count=1)


def contains(name: str, old: str) -> bool:
    """Whether ``name`` contains ``old``, ignoring case."""

    # must agree with replace_first
    return bool(old) and _pattern(old).search(name) is not None


def _find_project_files(source: Path, rules: ExclusionRuleSet | None) -> list[Path]:
    found: list[Path] = []
    for root, dirs, files in os.walk(source):
        if rules is not None:
            dirs[:] = [name for name in dirs if not rules.matches(name, is_dir=True)]
        for name in files:
            if name.endswith(PROJECT_SUFFIX):
                found.append(Path(root, name))
    return sorted(found, key=lambda path: (len(path.relative_to(source).parts), str(path)))


def detect_basename(source: str | Path, rules: ExclusionRuleSet | None = None) -> str:
    """Work out the name the source project goes by.

    A single ``*.kicad_pro`` file inside ``source`` provides the name. When
    several exist the shallowest one (ties broken by path) wins and the
    ambiguity is logged. Without any project file the directory name is used.
    Directories matched by ``rules`` are not searched.
    """

    source_path = Path(source)
    candidates = _find_project_files(source_path, rules)

    if not candidates:
        LOGGER.info("   No %s file found, using folder name: %s", PROJECT_SUFFIX, source_path.name)
        return source_path.name

    chosen = candidates[0]
    basename = chosen.name[: -len(PROJECT_SUFFIX)]
    if len(candidates) > 1:
        listed = ", ".join(str(path.relative_to(source_path)) for path in candidates)
        LOGGER.warning(
            "   Found %d %s files (%s); using %s",
            len(candidates),
            PROJECT_SUFFIX,
            listed,
            chosen.relative_to(source_path),
        )
    else:
        LOGGER.info("   Using project file %s", chosen.relative_to(source_path))

    if not basename:
        return source_path.name
    return basename
