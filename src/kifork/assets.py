"""Report which local library assets ended up in the new project."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

__all__ = ["AssetVerifier", "DIRECTORY_HINTS", "FILE_HINTS"]


LOGGER = logging.getLogger(__name__)

FILE_HINTS = ("*.kicad_sym", "*.lib", "*.dcm", "*.kicad_footprint", "*.kicad_prl")
DIRECTORY_HINTS = ("*.pretty", "3d", "3D", "models", "library", "libs")


def _any_match(root: Path, pattern: str, *, directories: bool) -> bool:
    try:
        matches = list(root.glob(pattern))
    except OSError as exc:
        LOGGER.warning("   Could not scan %s for %s: %s", root, pattern, exc)
        return False
    if directories:
        return any(path.is_dir() for path in matches)
    return any(path.is_file() for path in matches)


@dataclass(slots=True)
class AssetVerifier:
    """Look for symbol, footprint and 3D model libraries at a project root.

    Only the top level of the project is inspected and nothing is modified.
    """

    file_hints: tuple[str, ...] = FILE_HINTS
    directory_hints: tuple[str, ...] = DIRECTORY_HINTS

    def scan(self, root: str | Path) -> list[str]:
        """Return the hints with at least one match directly under ``root``."""

        root_path = Path(root)
        found: list[str] = []
        for pattern in self.file_hints:
            if _any_match(root_path, pattern, directories=False):
                LOGGER.info("   Found files matching: %s", pattern)
                found.append(pattern)
        for pattern in self.directory_hints:
            if _any_match(root_path, pattern, directories=True):
                LOGGER.info("   Found directory: %s", pattern)
                found.append(pattern)

        if not found:
            LOGGER.info("   No obvious local libraries detected (that's fine if you use global libs).")
        return found
