"""Rewrite the templated parts of a forked project's README."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Iterator

from .errors import ReadmeRewriteError

__all__ = [
    "INSTRUCTION_SECTIONS",
    "ReadmeDocument",
    "ReadmeRewriter",
    "replace_sections",
]


LOGGER = logging.getLogger(__name__)

README_NAME = "README.md"

ROADMAP_SECTIONS = ("Roadmap",)
ROADMAP_PLACEHOLDER = "- [ ] -"
INSTRUCTION_SECTIONS = ("Getting Started", "Installation", "Usage")
INSTRUCTIONS_PLACEHOLDER = "*"

_HEADING = re.compile(r"^(?P<level>#{1,6})[ \t]+(?P<title>.*?)[ \t#]*$")
_FENCE = re.compile(r"^ {0,3}(```|~~~)")
_TAGLINE = re.compile(r"^<h3.*>.*</h3>")
_SHORT_DESCRIPTION = re.compile(r'^(?P<indent>[ \t]+)<p align="center">(?P<rest>.*)$')
_ABOUT = re.compile(r"^fork.*$")


def _split_ending(line: str) -> tuple[str, str]:
    content = line.rstrip("\r\n")
    return content, line[len(content):]


class ReadmeDocument:
    """A text document held as lines that keep their own line endings.

    Iterating always starts again from the first line.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)

    @classmethod
    def from_text(cls, text: str) -> "ReadmeDocument":
        return cls(text.splitlines(keepends=True))

    @classmethod
    def load(cls, path: str | Path) -> "ReadmeDocument":
        with open(path, encoding="utf-8", newline="") as handle:
            return cls.from_text(handle.read())

    def save(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(self.text())

    @property
    def newline(self) -> str:
        """Line ending used by the document, ``"\\n"`` when it has none."""

        for line in self._lines:
            _, ending = _split_ending(line)
            if ending:
                return ending
        return "\n"

    def text(self) -> str:
        return "".join(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


def _replace_first_line(
    lines: Iterable[str],
    pattern: re.Pattern[str],
    build: Callable[[re.Match[str], str], list[str]],
) -> Iterator[str]:
    """Yield ``lines`` with the first line matching ``pattern`` swapped for ``build``'s output."""

    done = False
    for line in lines:
        content, ending = _split_ending(line)
        match = None if done else pattern.match(content)
        if match is None:
            yield line
            continue
        done = True
        yield from build(match, ending)


def _replace_description(lines: Iterable[str], description: str, newline: str) -> Iterator[str]:
    """Put ``description`` under the first indented ``<p align="center">`` marker.

    When the marker sits alone on its line, the old description text after it
    (up to a blank line or the next tag) is dropped.
    """

    searching, in_body = True, False
    for line in lines:
        content, ending = _split_ending(line)
        if in_body:
            stripped = content.strip()
            if stripped and not stripped.startswith("<"):
                continue
            in_body = False
        elif searching:
            match = _SHORT_DESCRIPTION.match(content)
            if match is not None:
                indent = match.group("indent")
                yield f'{indent}<p align="center">{ending or newline}'
                yield f"{indent}  {description}{ending}"
                searching = False
                in_body = not match.group("rest").strip()
                continue
        yield line


def replace_sections(
    lines: Iterable[str],
    titles: Iterable[str],
    placeholder: str,
    newline: str = "\n",
) -> Iterator[str]:
    """Replace the body of every section titled one of ``titles``.

    A body runs from the line after its heading up to the next heading of the
    same or a higher level, or the end of the document. The heading is kept
    and the body becomes ``placeholder`` between two blank lines. Headings
    inside fenced code blocks do not count.
    """

    wanted = {title.casefold() for title in titles}
    section_level: int | None = None
    fenced = False

    for line in lines:
        content, ending = _split_ending(line)

        if _FENCE.match(content):
            fenced = not fenced
            if section_level is None:
                yield line
            continue

        heading = None if fenced else _HEADING.match(content)
        if heading is not None:
            level = len(heading.group("level"))
            if section_level is not None and level <= section_level:
                section_level = None
            if section_level is None and heading.group("title").strip().casefold() in wanted:
                yield content + (ending or newline)
                yield newline
                yield placeholder + newline
                yield newline
                section_level = level
                continue

        if section_level is None:
            yield line


@dataclass(slots=True)
class ReadmeRewriter:
    """Apply the fork edits to a README, in order.

    1. every occurrence of the old basename becomes the lowercased new one
    2. the first ``<h3>`` header element becomes the tagline
    3. the first indented ``<p align="center">`` block gets the short description
    4. the first ``fork...`` line records where the project came from
    5. the Roadmap section is reset to an empty checklist item
    6. Getting Started, Installation and Usage are blanked on request
    """

    old_basename: str
    new_basename: str
    tagline: str
    short_description: str
    change_about: bool = True
    keep_roadmap: bool = False
    remove_instructions: bool = False
    today: date = field(default_factory=date.today)

    def _replace_basename(self, document: ReadmeDocument) -> ReadmeDocument:
        if not self.old_basename:
            return document
        new_name = self.new_basename.lower()
        pattern = re.compile(re.escape(self.old_basename), re.IGNORECASE)
        return ReadmeDocument.from_text(pattern.sub(lambda _match: new_name, document.text()))

    def _tagline(self, match: re.Match[str], ending: str) -> list[str]:
        content = match.string
        header = f'<h3 align="center"><i>{self.tagline}</i></h3>'
        return [header + content[match.end():] + ending]

    def _about(self, match: re.Match[str], ending: str) -> list[str]:
        return [f"forked from project '{self.old_basename}' on {self.today.isoformat()}{ending}"]

    def apply(self, document: ReadmeDocument) -> ReadmeDocument:
        """Return a rewritten copy of ``document``."""

        document = self._replace_basename(document)
        newline = document.newline

        lines: Iterable[str] = _replace_first_line(document, _TAGLINE, self._tagline)
        lines = _replace_description(lines, self.short_description, newline)
        if self.change_about:
            lines = _replace_first_line(lines, _ABOUT, self._about)
        if not self.keep_roadmap:
            lines = replace_sections(lines, ROADMAP_SECTIONS, ROADMAP_PLACEHOLDER, newline)
        if self.remove_instructions:
            lines = replace_sections(lines, INSTRUCTION_SECTIONS, INSTRUCTIONS_PLACEHOLDER, newline)

        return ReadmeDocument(lines)

    def rewrite(self, root: str | Path) -> bool:
        """Rewrite ``README.md`` under ``root`` in place.

        Returns ``False`` when there is no README to rewrite.
        """

        path = Path(root) / README_NAME
        if not path.is_file():
            LOGGER.info("   No %s found, skipping", README_NAME)
            return False

        LOGGER.info("   Replacing '%s' with '%s' (lowercase)", self.old_basename, self.new_basename.lower())
        try:
            document = self.apply(ReadmeDocument.load(path))
            document.save(path)
        except (OSError, UnicodeError) as exc:
            raise ReadmeRewriteError(f"could not rewrite {path}: {exc}") from exc

        LOGGER.info("   %s sanitized.", README_NAME)
        return True

