from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests.helpers import build_tree

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def widget_project(tmp_path: Path) -> Path:
    """A small KiCad project with the usual junk lying around."""

    return build_tree(
        tmp_path / "widget_v1",
        {
            "widget_v1.kicad_pro": '{"meta": {"filename": "widget_v1.kicad_pro"}}\n',
            "widget_v1.kicad_sch": "(kicad_sch (version 20231120))\n",
            "widget_v1.kicad_pcb": "(kicad_pcb (version 20240108))\n",
            "widget_v1.lock": "",
            ".git/HEAD": "ref: refs/heads/main\n",
            ".git/objects": None,
            "widget_v1-backups/widget_v1-2024-01-01.zip": "zip",
            "_autosave-widget_v1.kicad_sch": "autosave",
            "~widget_v1.kicad_sch.lck": "lock",
            "power.kicad_sch": "(kicad_sch)\n",
            "power.kicad_sch-bak": "bak",
            "notes.txt~": "old notes",
            "widget_v1-lib.pretty/R_0603.kicad_mod": "(footprint R_0603)\n",
            "widget_v1.kicad_sym": "(kicad_symbol_lib)\n",
            "archive/widget_v1_rev0.kicad_pcb": "(kicad_pcb)\n",
            "archive/build.tmp": "tmp",
            "docs/widget_v1_block.svg": "<svg/>\n",
        },
    )
