"""Configuration record shared by the forker and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import DestinationExistsError, SourceNotFoundError, UsageError

__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_SHORT_DESCRIPTION",
    "DEFAULT_TAGLINE",
    "ForkConfig",
    "STRATEGIES",
]


DEFAULT_TAGLINE = "sassy tagline goes here"
DEFAULT_SHORT_DESCRIPTION = "short description goes here to tease interest"
DEFAULT_PREFIX = "dpx"
STRATEGIES = ("filter", "prune")


def _validate_basename(new_basename: str | None) -> str:
    if new_basename is None:
        raise UsageError("missing required argument: <new_project_basename>")
    name = new_basename.strip()
    if not name:
        raise UsageError("new project basename must not be empty")
    if name in {".", ".."}:
        raise UsageError(f"invalid project basename '{name}'")
    separators = {os.sep, os.altsep} - {None}
    if any(separator in name for separator in separators):
        raise UsageError(f"project basename '{name}' must not contain a path separator")
    return name


def _validate_prefix(prefix: str | None) -> str:
    token = (prefix or "").strip()
    if not token:
        raise UsageError("file prefix must not be empty")
    separators = {os.sep, os.altsep} - {None}
    if any(separator in token for separator in separators):
        raise UsageError(f"file prefix '{token}' must not contain a path separator")
    return token


@dataclass(frozen=True, slots=True)
class ForkConfig:
    """Validated inputs describing one fork.

    Attributes
    ----------
    source:
        Absolute path of the project directory being copied.
    new_basename:
        Name of the new project. The destination directory carries this name
        verbatim, renamed files use the lowercased and prefixed
        :func:`~kifork.naming.file_base` form.
    destination_parent:
        Absolute path of the directory that receives the new project. Defaults
        to the parent of :attr:`source`.
    tagline, short_description:
        Text substituted into the README header.
    change_about:
        Rewrite the ``fork...`` line of the README.
    keep_roadmap:
        Leave the README roadmap section untouched.
    remove_instructions:
        Blank out the Getting Started, Installation and Usage sections.
    copy_archives:
        Copy ``archive``/``archives`` folders instead of skipping them.
    prefix:
        Token prepended to renamed files, ``dpx`` unless overridden.
    strategy:
        Copy strategy, ``"filter"`` or ``"prune"``.
    """

    source: Path
    new_basename: str
    destination_parent: Path
    tagline: str = DEFAULT_TAGLINE
    short_description: str = DEFAULT_SHORT_DESCRIPTION
    change_about: bool = True
    keep_roadmap: bool = False
    remove_instructions: bool = False
    copy_archives: bool = False
    prefix: str = DEFAULT_PREFIX
    strategy: str = "filter"

    @property
    def destination(self) -> Path:
        """Directory the new project is written to."""

        return self.destination_parent / self.new_basename

    @classmethod
    def resolve(
        cls,
        source: str | Path | None,
        new_basename: str | None,
        destination_parent: str | Path | None = None,
        *,
        tagline: str = DEFAULT_TAGLINE,
        short_description: str = DEFAULT_SHORT_DESCRIPTION,
        change_about: bool = True,
        keep_roadmap: bool = False,
        remove_instructions: bool = False,
        copy_archives: bool = False,
        prefix: str = DEFAULT_PREFIX,
        strategy: str = "filter",
    ) -> "ForkConfig":
        """Validate raw inputs and build a :class:`ForkConfig`.

        Raises
        ------
        UsageError
            A required argument is missing or malformed.
        SourceNotFoundError
            ``source`` is not an existing directory.
        DestinationExistsError
            ``destination_parent / new_basename`` already exists.
        """

        if source is None or not str(source).strip():
            raise UsageError("missing required argument: <source_project_dir>")
        name = _validate_basename(new_basename)
        if strategy not in STRATEGIES:
            raise UsageError(f"unknown copy strategy '{strategy}'")
        token = _validate_prefix(prefix)

        source_path = Path(source).expanduser().resolve()
        if destination_parent is None or not str(destination_parent).strip():
            parent_path = source_path.parent
        else:
            parent_path = Path(destination_parent).expanduser().resolve()

        config = cls(
            source=source_path,
            new_basename=name,
            destination_parent=parent_path,
            tagline=tagline,
            short_description=short_description,
            change_about=change_about,
            keep_roadmap=keep_roadmap,
            remove_instructions=remove_instructions,
            copy_archives=copy_archives,
            prefix=token,
            strategy=strategy,
        )

        if not config.source.is_dir():
            raise SourceNotFoundError(f"source directory does not exist: {config.source}")
        # lexists so a dangling symlink still blocks the destination
        if os.path.lexists(config.destination):
            raise DestinationExistsError(f"destination already exists: {config.destination}")

        return config
