"""Fork KiCad projects under a new name.

The package copies a project tree without its lock files, backups and VCS
metadata, renames everything that carries the old project name, and resets
the templated parts of the project README. The pieces can be used on their
own or driven end to end through :class:`ProjectForker` and the ``kifork``
command line.
"""

from __future__ import annotations

__version__ = "0.5.0"

from .assets import AssetVerifier
from .config import ForkConfig
from .copier import ExclusionRuleSet, TreeCopier
from .errors import (
    BackupError,
    CopyError,
    DestinationExistsError,
    ForkError,
    ReadmeRewriteError,
    RenameError,
    SourceNotFoundError,
    UsageError,
)
from .forker import ProjectForker
from .naming import detect_basename, file_base
from .readme import ReadmeDocument, ReadmeRewriter
from .rename import RenameEngine, create_backups_dir
from .report import ForkReport

__all__ = [
    "AssetVerifier",
    "BackupError",
    "CopyError",
    "DestinationExistsError",
    "ExclusionRuleSet",
    "ForkConfig",
    "ForkError",
    "ForkReport",
    "ProjectForker",
    "ReadmeDocument",
    "ReadmeRewriteError",
    "ReadmeRewriter",
    "RenameEngine",
    "RenameError",
    "SourceNotFoundError",
    "TreeCopier",
    "UsageError",
    "create_backups_dir",
    "detect_basename",
    "file_base",
]
