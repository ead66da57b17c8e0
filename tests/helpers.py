from __future__ import annotations

from pathlib import Path
from typing import Mapping


def build_tree(root: Path, entries: Mapping[str, str | None]) -> Path:
    """Create files (``str`` contents) and empty directories (``None``) under ``root``."""

    root.mkdir(parents=True, exist_ok=True)
    for relative, contents in entries.items():
        path = root / relative
        if contents is None:
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents, encoding="utf-8")
    return root


def tree_listing(root: Path) -> list[str]:
    return sorted(path.relative_to(root).as_posix() for path in root.rglob("*"))
