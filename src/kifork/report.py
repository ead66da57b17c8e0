"""Machine-readable summary of a fork run."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReadmeStatus(str, Enum):
    """What happened to the README of the new project."""

    REWRITTEN = "rewritten"
    MISSING = "missing"
    FAILED = "failed"


class RenamedEntry(BaseModel):
    """One rename, with paths relative to the new project root."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str = Field(..., description="Path of the entry before it was renamed.")
    target: str = Field(..., description="Path of the entry after it was renamed.")


class ForkReport(BaseModel):
    """Outcome of copying, renaming and rewriting one project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: Path = Field(..., description="Absolute path of the copied project.")
    destination: Path = Field(..., description="Absolute path of the new project.")
    old_basename: str = Field(..., description="Name detected for the source project.")
    file_base: str = Field(..., description="Name renamed entries now carry.")
    strategy: str = Field(..., description="Copy strategy that produced the tree.")
    excluded: List[str] = Field(default_factory=list, description="Source entries left out of the copy.")
    renamed: List[RenamedEntry] = Field(default_factory=list, description="Renames applied in the new project.")
    backups_dir: Path = Field(..., description="Empty backups folder created in the new project.")
    assets: List[str] = Field(default_factory=list, description="Library asset hints found at the project root.")
    readme: ReadmeStatus = Field(default=ReadmeStatus.MISSING, description="State of the README rewrite.")
    readme_error: Optional[str] = Field(None, description="Why the README rewrite failed, if it did.")
    created_at: datetime = Field(..., description="When the fork finished.")

    def write(self, path: str | Path) -> Path:
        """Write the report as JSON to ``path``."""

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target


__all__ = ["ForkReport", "ReadmeStatus", "RenamedEntry"]
