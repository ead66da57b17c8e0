"""Custom exception types raised while forking a project."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

__all__ = [
    "BackupError",
    "CopyError",
    "DestinationExistsError",
    "ForkError",
    "ReadmeRewriteError",
    "RenameError",
    "SourceNotFoundError",
    "UsageError",
]


class ForkError(RuntimeError):
    """Base class for failures that abort a fork.

    ``exit_code`` is the process status the command line reports for the
    failure.
    """

    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UsageError(ForkError):
    """Raised when the command line is missing required arguments."""

    exit_code = 1


class SourceNotFoundError(ForkError):
    """Raised when the source project directory does not exist."""

    exit_code = 2


class DestinationExistsError(ForkError):
    """Raised when the destination path is already taken."""

    exit_code = 3


class CopyError(ForkError):
    """Raised when the project tree cannot be copied."""

    exit_code = 4


class RenameError(ForkError):
    """Raised when an entry of the copied tree cannot be renamed.

    Renames are not rolled back, ``renamed`` lists the moves that had already
    been applied when the failure happened.
    """

    exit_code = 5

    def __init__(self, message: str, renamed: Sequence[tuple[Path, Path]] = ()) -> None:
        super().__init__(message)
        self.renamed = list(renamed)


class BackupError(ForkError):
    """Raised when the backups folder cannot be created."""

    exit_code = 6


class ReadmeRewriteError(ForkError):
    """Raised when the README cannot be read or written.

    The CLI reports this without failing the run.
    """
