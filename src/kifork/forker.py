"""Fork pipeline tying the copy, rename and README steps together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path

from .assets import AssetVerifier
from .config import ForkConfig
from .copier import ExclusionRuleSet, TreeCopier
from .errors import ReadmeRewriteError
from .naming import detect_basename, file_base
from .readme import ReadmeRewriter
from .rename import RenameEngine, create_backups_dir
from .report import ForkReport, ReadmeStatus, RenamedEntry

__all__ = ["ProjectForker"]


LOGGER = logging.getLogger(__name__)


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


@dataclass(slots=True)
class ProjectForker:
    """Run every step of a fork for one :class:`ForkConfig`.

    The steps run strictly in order: detect the old name, copy, rename,
    create the backups folder, report library assets and rewrite the README.
    Copy and rename failures abort the run. A README failure is logged and
    recorded in the report while the rest of the fork stands.
    """

    config: ForkConfig
    verifier: AssetVerifier = field(default_factory=AssetVerifier)
    today: date | None = None

    def run(self) -> ForkReport:
        config = self.config
        destination = config.destination
        LOGGER.info("-- Source:       %s", config.source)
        LOGGER.info("-- New basename: %s", config.new_basename)
        LOGGER.info("-- Destination:  %s", destination)

        rules = ExclusionRuleSet.default(copy_archives=config.copy_archives)
        LOGGER.debug("   Exclusions: %s", " ".join(rules.patterns()))

        LOGGER.info(">> Detecting project files in source...")
        # archived revisions never name the project, even when they are copied
        old_basename = detect_basename(config.source, ExclusionRuleSet.default())
        LOGGER.info("   Looking for files containing: %s", old_basename)

        LOGGER.info(">> Copying project folder (excluding junk)...")
        if not config.copy_archives:
            LOGGER.info("   Excluding archive folders (use -A to include)")
        copied = TreeCopier(rules, config.strategy).copy(config.source, destination)

        LOGGER.info(">> Renaming ALL files and directories containing old basename...")
        base = file_base(config.new_basename, config.prefix)
        if base != config.new_basename.lower():
            LOGGER.info("   Adding %s_ prefix to filenames: %s", config.prefix, base)
        renamed = RenameEngine(old_basename, base).run(destination)

        LOGGER.info(">> Creating backups folder...")
        backups = create_backups_dir(destination, base)

        LOGGER.info(">> Verifying common library assets...")
        assets = self.verifier.scan(destination)

        LOGGER.info(">> Sanitizing README.md...")
        readme_status, readme_error = self._rewrite_readme(old_basename)

        return ForkReport(
            source=config.source,
            destination=destination,
            old_basename=old_basename,
            file_base=base,
            strategy=config.strategy,
            excluded=copied.excluded,
            renamed=[
                RenamedEntry(source=_relative(source, destination), target=_relative(target, destination))
                for source, target in renamed.renamed
            ],
            backups_dir=backups,
            assets=assets,
            readme=readme_status,
            readme_error=readme_error,
            created_at=datetime.now(tz=timezone.utc),
        )

    def _rewrite_readme(self, old_basename: str) -> tuple[ReadmeStatus, str | None]:
        config = self.config
        rewriter = ReadmeRewriter(
            old_basename=old_basename,
            new_basename=config.new_basename,
            tagline=config.tagline,
            short_description=config.short_description,
            change_about=config.change_about,
            keep_roadmap=config.keep_roadmap,
            remove_instructions=config.remove_instructions,
            today=self.today or date.today(),
        )
        try:
            rewritten = rewriter.rewrite(config.destination)
        except ReadmeRewriteError as exc:
            LOGGER.error("   README rewrite failed, copy and rename are kept: %s", exc)
            return ReadmeStatus.FAILED, str(exc)
        return (ReadmeStatus.REWRITTEN if rewritten else ReadmeStatus.MISSING), None
