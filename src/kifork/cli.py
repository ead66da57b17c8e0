"""Command line interface for forking KiCad projects."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, Sequence

from . import __version__
from .config import DEFAULT_PREFIX, DEFAULT_SHORT_DESCRIPTION, DEFAULT_TAGLINE, STRATEGIES, ForkConfig
from .errors import ForkError, RenameError, UsageError
from .forker import ProjectForker

LOGGER = logging.getLogger("kifork")


class _ArgumentParser(argparse.ArgumentParser):
    """Parser that reports bad invocations as :class:`UsageError`.

    argparse exits with status 2 on its own, which is reserved for a missing
    source directory.
    """

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="kifork",
        description=(
            "Copy a KiCad project folder, exclude junk, and rename main files to a new basename."
        ),
    )
    parser.add_argument("source", nargs="?", metavar="source_project_dir", help="Project to copy")
    parser.add_argument(
        "new_basename", nargs="?", metavar="new_project_basename", help="Name of the new project"
    )
    parser.add_argument(
        "destination_parent",
        nargs="?",
        metavar="destination_parent_dir",
        help="Directory that receives the new project (defaults to the source's parent)",
    )
    parser.add_argument(
        "-T", "--tagline", default=DEFAULT_TAGLINE, help="Custom tagline under the project name"
    )
    parser.add_argument(
        "-S",
        "--short-description",
        default=DEFAULT_SHORT_DESCRIPTION,
        help="Custom short description under the tagline",
    )
    parser.add_argument(
        "-D",
        "--keep-about",
        dest="change_about",
        action="store_false",
        help="Do not change the About section",
    )
    parser.add_argument(
        "-R", "--keep-roadmap", action="store_true", help="Do not clear the Roadmap section"
    )
    parser.add_argument(
        "-I",
        "--remove-instructions",
        action="store_true",
        help="Clear the Getting Started, Installation and Usage sections",
    )
    parser.add_argument(
        "-A",
        "--copy-archives",
        action="store_true",
        help="Copy archive folders (normally excluded)",
    )
    parser.add_argument(
        "--prefix", default=DEFAULT_PREFIX, help="Prefix added to renamed files (default: %(default)s)"
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default="filter",
        help="Copy while filtering, or copy everything and prune afterwards",
    )
    parser.add_argument("--report", type=Path, help="Write a JSON summary of the fork to this path")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every excluded entry")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(format="%(message)s")
    LOGGER.setLevel(level)


def _fail(exc: ForkError, parser: argparse.ArgumentParser | None = None) -> int:
    if parser is not None:
        sys.stderr.write(parser.format_usage())
    print(f"ERROR: {exc}", file=sys.stderr)
    if isinstance(exc, RenameError) and exc.renamed:
        print("Already renamed before the failure:", file=sys.stderr)
        for source, target in exc.renamed:
            print(f"  {source} -> {target}", file=sys.stderr)
    return exc.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(argv)
    except UsageError as exc:
        return _fail(exc, parser)

    _configure_logging(args)
    LOGGER.info("== KiCad Project Forker v%s ==", __version__)

    try:
        config = ForkConfig.resolve(
            args.source,
            args.new_basename,
            args.destination_parent,
            tagline=args.tagline,
            short_description=args.short_description,
            change_about=args.change_about,
            keep_roadmap=args.keep_roadmap,
            remove_instructions=args.remove_instructions,
            copy_archives=args.copy_archives,
            prefix=args.prefix,
            strategy=args.strategy,
        )
    except UsageError as exc:
        return _fail(exc, parser)
    except ForkError as exc:
        return _fail(exc)

    try:
        report = ProjectForker(config).run()
    except ForkError as exc:
        return _fail(exc)

    if args.report:
        try:
            report.write(args.report)
        except OSError as exc:
            # the fork itself is complete, only the summary is lost
            print(f"ERROR: could not write report to {args.report}: {exc}", file=sys.stderr)
        else:
            LOGGER.info("   Report written to %s", args.report)

    LOGGER.info("== Done ==")
    print(f"New project: {report.destination}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
