"""Copy a project tree while leaving transient files behind."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable

from .errors import CopyError

__all__ = [
    "ARCHIVE_DIRECTORIES",
    "CopyResult",
    "ExclusionRule",
    "ExclusionRuleSet",
    "TreeCopier",
]


LOGGER = logging.getLogger(__name__)

ARCHIVE_DIRECTORIES = ("archive", "archives")

_JUNK_DIRECTORIES = (".git", ".svn", ".hg", ".idea", ".vscode", "__pycache__", "*-backups")
_JUNK_ENTRIES = (
    "*.lock",
    "*.kicad_sch-bak",
    "*~",
    "~*",
    "_*",
    "#*",
    "*_old",
    "*_old.*",
    "*.tmp",
    "*.bak",
    "*.autosave*",
)


@dataclass(frozen=True, slots=True)
class ExclusionRule:
    """A glob matched against a single path component."""

    pattern: str
    directory_only: bool = False

    def matches(self, name: str, *, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        return fnmatchcase(name, self.pattern)


@dataclass(frozen=True, slots=True)
class ExclusionRuleSet:
    """Set of rules deciding which entries are never copied."""

    rules: frozenset[ExclusionRule] = field(default_factory=frozenset)

    @classmethod
    def default(cls, *, copy_archives: bool = False) -> "ExclusionRuleSet":
        """Return the junk rules, plus the archive folders unless ``copy_archives``."""

        rules = {ExclusionRule(pattern, directory_only=True) for pattern in _JUNK_DIRECTORIES}
        rules.update(ExclusionRule(pattern) for pattern in _JUNK_ENTRIES)
        if not copy_archives:
            rules.update(ExclusionRule(name, directory_only=True) for name in ARCHIVE_DIRECTORIES)
        return cls(frozenset(rules))

    def matches(self, name: str, *, is_dir: bool) -> bool:
        return any(rule.matches(name, is_dir=is_dir) for rule in self.rules)

    def patterns(self) -> list[str]:
        return sorted(rule.pattern + ("/" if rule.directory_only else "") for rule in self.rules)


@dataclass(slots=True)
class CopyResult:
    """Outcome of a copy: where it went and what was left out."""

    destination: Path
    excluded: list[str] = field(default_factory=list)


def _is_real_dir(path: str) -> bool:
    # symlinks are copied as links, so they never count as directories
    return os.path.isdir(path) and not os.path.islink(path)


def _relative(path: str, root: Path) -> str:
    return Path(path).relative_to(root).as_posix()


@dataclass(slots=True)
class TreeCopier:
    """Copy a directory tree, skipping entries matched by ``rules``.

    Two strategies produce the same tree. ``"filter"`` skips excluded entries
    while copying, ``"prune"`` copies everything and deletes excluded entries
    afterwards.
    """

    rules: ExclusionRuleSet
    strategy: str = "filter"

    def copy(self, source: str | Path, destination: str | Path) -> CopyResult:
        """Copy ``source`` to ``destination``, which must not exist yet."""

        source_path = Path(source)
        destination_path = Path(destination)
        if self.strategy == "filter":
            copy_strategy = self._copy_filtered
        elif self.strategy == "prune":
            copy_strategy = self._copy_then_prune
        else:
            raise ValueError(f"unknown copy strategy '{self.strategy}'")

        try:
            excluded = copy_strategy(source_path, destination_path)
        except OSError as exc:
            raise CopyError(f"failed to copy {source_path} to {destination_path}: {exc}") from exc

        excluded.sort()
        for relative in excluded:
            LOGGER.debug("     excluded %s", relative)
        LOGGER.info("   Copied to %s (%d entries excluded)", destination_path, len(excluded))
        return CopyResult(destination=destination_path, excluded=excluded)

    def _ignore_callable(
        self, source: Path, excluded: list[str]
    ) -> Callable[[str, Iterable[str]], set[str]]:
        def ignore(directory: str, names: Iterable[str]) -> set[str]:
            ignored: set[str] = set()
            for name in names:
                path = os.path.join(directory, name)
                if self.rules.matches(name, is_dir=_is_real_dir(path)):
                    ignored.add(name)
                    excluded.append(_relative(path, source))
            return ignored

        return ignore

    def _copy_filtered(self, source: Path, destination: Path) -> list[str]:
        excluded: list[str] = []
        shutil.copytree(
            source,
            destination,
            symlinks=True,
            ignore=self._ignore_callable(source, excluded),
            copy_function=shutil.copy2,
        )
        return excluded

    def _copy_then_prune(self, source: Path, destination: Path) -> list[str]:
        shutil.copytree(source, destination, symlinks=True, copy_function=shutil.copy2)
        LOGGER.info("   Removing known junk from copy...")
        return self.prune(destination)

    def prune(self, root: str | Path) -> list[str]:
        """Delete every entry under ``root`` matched by the rules."""

        root_path = Path(root)
        removed: list[str] = []
        for directory, dirs, files in os.walk(root_path):
            kept: list[str] = []
            for name in dirs:
                path = os.path.join(directory, name)
                is_dir = _is_real_dir(path)
                if not self.rules.matches(name, is_dir=is_dir):
                    kept.append(name)
                    continue
                if is_dir:
                    shutil.rmtree(path)
                else:
                    os.unlink(path)
                removed.append(_relative(path, root_path))
            dirs[:] = kept

            for name in files:
                path = os.path.join(directory, name)
                if self.rules.matches(name, is_dir=False):
                    os.unlink(path)
                    removed.append(_relative(path, root_path))
        return removed
