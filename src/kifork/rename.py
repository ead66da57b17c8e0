"""Rename copied entries that still carry the old project name."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .copier import ARCHIVE_DIRECTORIES
from .errors import BackupError, RenameError
from .naming import contains, replace_first

__all__ = ["RenameEngine", "RenamePlan", "RenameResult", "create_backups_dir"]


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RenamePlan:
    """Moves scheduled for one pass, in execution order."""

    moves: list[tuple[Path, Path]] = field(default_factory=list)

    def add(self, source: Path, target: Path) -> None:
        self.moves.append((source, target))

    def __iter__(self) -> Iterator[tuple[Path, Path]]:
        return iter(self.moves)

    def __len__(self) -> int:
        return len(self.moves)

    def validate(self) -> None:
        """Raise :class:`RenameError` if a move would overwrite something."""

        order = {
            source: index for index, (source, target) in enumerate(self.moves) if source != target
        }
        targets: dict[Path, Path] = {}
        for index, (source, target) in enumerate(self.moves):
            if source == target:
                continue
            if target in targets:
                raise RenameError(
                    f"both {targets[target]} and {source} would be renamed to {target}"
                )
            targets[target] = source
            # a target vacated by an earlier move is free by the time we get to it
            if order.get(target, index) < index or not os.path.lexists(target):
                continue
            # case-only renames on case-insensitive filesystems point at the source itself
            if os.path.lexists(source) and os.path.samefile(source, target):
                continue
            raise RenameError(f"cannot rename {source}: {target} already exists")


@dataclass(slots=True)
class RenameResult:
    """Summary of a rename run."""

    matched: int = 0
    renamed: list[tuple[Path, Path]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.renamed)


def _in_archive(path: Path, root: Path) -> bool:
    return any(part in ARCHIVE_DIRECTORIES for part in path.relative_to(root).parts)


@dataclass(slots=True)
class RenameEngine:
    """Replace the old basename with ``file_base`` in names under a root.

    Matching ignores case and only the first occurrence in each name is
    replaced. Archive folders and their contents keep their names.
    """

    old_basename: str
    file_base: str

    def _target(self, path: Path) -> Path:
        return path.with_name(replace_first(path.name, self.old_basename, self.file_base))

    def _matching(self, root: Path, *, directories: bool) -> list[Path]:
        found: list[Path] = []
        for directory, dirs, files in os.walk(root):
            names = dirs if directories else files
            found.extend(
                Path(directory, name) for name in names if contains(name, self.old_basename)
            )
        return found

    def plan_directories(self, root: Path, result: RenameResult) -> RenamePlan:
        plan = RenamePlan()
        # deepest first so parents are still in place when children move
        for path in sorted(self._matching(root, directories=True), key=str, reverse=True):
            result.matched += 1
            if _in_archive(path, root):
                LOGGER.info("     Skipping archive folder entry: %s", path.relative_to(root))
                continue
            plan.add(path, self._target(path))
        return plan

    def plan_files(self, root: Path, result: RenameResult) -> RenamePlan:
        plan = RenamePlan()
        for path in sorted(self._matching(root, directories=False), key=str):
            result.matched += 1
            if _in_archive(path, root):
                LOGGER.info("     Skipping file in archive folder: %s", path.relative_to(root))
                continue
            plan.add(path, self._target(path))
        return plan

    def _apply(self, plan: RenamePlan, result: RenameResult) -> None:
        try:
            plan.validate()
        except RenameError as exc:
            raise RenameError(str(exc), result.renamed) from exc
        for source, target in plan:
            if source == target:
                continue
            try:
                os.rename(source, target)
            except OSError as exc:
                raise RenameError(
                    f"failed to rename {source} to {target.name}: {exc}", result.renamed
                ) from exc
            LOGGER.info("     %s -> %s", source.name, target.name)
            result.renamed.append((source, target))

    def run(self, root: str | Path) -> RenameResult:
        """Rename every matching directory, then every matching file, under ``root``."""

        root_path = Path(root)
        result = RenameResult()

        LOGGER.info("   Renaming directories...")
        self._apply(self.plan_directories(root_path, result), result)
        LOGGER.info("   Renaming files...")
        # enumerated after the directory pass so paths reflect the new names
        self._apply(self.plan_files(root_path, result), result)

        if result.matched == 0:
            LOGGER.info("   (skip) No files or directories containing '%s' found", self.old_basename)
        elif result.count == 0:
            LOGGER.info(
                "   (skip) %d matching entries, all inside archive folders", result.matched
            )
        else:
            LOGGER.info("   Renamed %d items", result.count)
        return result


def create_backups_dir(destination: str | Path, base: str) -> Path:
    """Create the empty ``<base>-backups`` folder, tolerating an existing one."""

    path = Path(destination) / f"{base}-backups"
    try:
        path.mkdir(exist_ok=True)
    except OSError as exc:
        raise BackupError(f"cannot create backups folder {path}: {exc}") from exc
    LOGGER.info("   Created: %s", path)
    return path
