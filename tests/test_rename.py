from __future__ import annotations

import os
from pathlib import Path

import pytest

from kifork.errors import BackupError, RenameError
from kifork.rename import RenameEngine, RenamePlan, create_backups_dir
from tests.helpers import build_tree, tree_listing


@pytest.fixture()
def engine() -> RenameEngine:
    return RenameEngine("widget_v1", "dpx_widget_v2")


def test_renames_files_and_nested_directories(tmp_path: Path, engine: RenameEngine):
    root = build_tree(
        tmp_path / "widget_v2",
        {
            "widget_v1.kicad_pro": "{}",
            "Widget_V1.kicad_sch": "",
            "widget_v1_hw/widget_v1_sub/widget_v1_power.kicad_sch": "",
            "widget_v1-lib.pretty/R_0603.kicad_mod": "",
            "power.kicad_sch": "",
        },
    )

    result = engine.run(root)

    assert tree_listing(root) == [
        "dpx_widget_v2-lib.pretty",
        "dpx_widget_v2-lib.pretty/R_0603.kicad_mod",
        "dpx_widget_v2.kicad_pro",
        "dpx_widget_v2.kicad_sch",
        "dpx_widget_v2_hw",
        "dpx_widget_v2_hw/dpx_widget_v2_sub",
        "dpx_widget_v2_hw/dpx_widget_v2_sub/dpx_widget_v2_power.kicad_sch",
        "power.kicad_sch",
    ]
    assert result.matched == 6
    assert result.count == 6
    assert not any("widget_v1" in name.lower() for name in tree_listing(root))


def test_archive_contents_keep_their_names(tmp_path: Path, engine: RenameEngine):
    root = build_tree(
        tmp_path / "widget_v2",
        {
            "archive/widget_v1_rev0.kicad_pcb": "",
            "archives/widget_v1_old/widget_v1.kicad_pro": "{}",
            "widget_v1.kicad_pcb": "",
        },
    )

    result = engine.run(root)

    assert (root / "archive" / "widget_v1_rev0.kicad_pcb").is_file()
    assert (root / "archives" / "widget_v1_old" / "widget_v1.kicad_pro").is_file()
    assert (root / "dpx_widget_v2.kicad_pcb").is_file()
    assert result.matched == 4
    assert result.count == 1


def test_reports_nothing_found(tmp_path: Path, engine: RenameEngine, caplog: pytest.LogCaptureFixture):
    root = build_tree(tmp_path / "widget_v2", {"power.kicad_sch": ""})
    with caplog.at_level("INFO", logger="kifork"):
        result = engine.run(root)
    assert result.matched == 0
    assert result.count == 0
    assert "No files or directories containing 'widget_v1' found" in caplog.text


def test_reports_everything_filtered(tmp_path: Path, engine: RenameEngine, caplog: pytest.LogCaptureFixture):
    root = build_tree(tmp_path / "widget_v2", {"archive/widget_v1.kicad_pcb": ""})
    with caplog.at_level("INFO", logger="kifork"):
        result = engine.run(root)
    assert result.matched == 1
    assert result.count == 0
    assert "all inside archive folders" in caplog.text


def test_sibling_collision_is_refused(tmp_path: Path, engine: RenameEngine):
    root = build_tree(tmp_path / "widget_v2", {"widget_v1.txt": "a", "WIDGET_V1.txt": "b"})
    with pytest.raises(RenameError):
        engine.run(root)
    assert sorted(os.listdir(root)) == ["WIDGET_V1.txt", "widget_v1.txt"]


def test_existing_target_is_refused(tmp_path: Path, engine: RenameEngine):
    root = build_tree(
        tmp_path / "widget_v2", {"widget_v1.kicad_pcb": "old", "dpx_widget_v2.kicad_pcb": "new"}
    )
    with pytest.raises(RenameError):
        engine.run(root)
    assert (root / "dpx_widget_v2.kicad_pcb").read_text(encoding="utf-8") == "new"


def test_plan_allows_target_vacated_earlier(tmp_path: Path):
    first, second, third = tmp_path / "a", tmp_path / "b", tmp_path / "c"
    first.write_text("a", encoding="utf-8")
    second.write_text("b", encoding="utf-8")

    plan = RenamePlan()
    plan.add(second, third)
    plan.add(first, second)
    plan.validate()

    reversed_plan = RenamePlan()
    reversed_plan.add(first, second)
    reversed_plan.add(second, third)
    with pytest.raises(RenameError):
        reversed_plan.validate()


def test_collision_after_directory_pass_reports_moved_directories(tmp_path: Path, engine: RenameEngine):
    root = build_tree(
        tmp_path / "widget_v2",
        {"widget_v1_hw/x.txt": "", "widget_v1.txt": "a", "WIDGET_V1.txt": "b"},
    )
    with pytest.raises(RenameError) as excinfo:
        engine.run(root)

    assert excinfo.value.renamed == [(root / "widget_v1_hw", root / "dpx_widget_v2_hw")]
    assert sorted(os.listdir(root)) == ["WIDGET_V1.txt", "dpx_widget_v2_hw", "widget_v1.txt"]


def test_failed_move_reports_partial_progress(
    tmp_path: Path, engine: RenameEngine, monkeypatch: pytest.MonkeyPatch
):
    root = build_tree(tmp_path / "widget_v2", {"widget_v1.a": "", "widget_v1.b": ""})
    real_rename = os.rename

    def flaky_rename(source, target):
        if str(source).endswith(".b"):
            raise PermissionError("denied")
        real_rename(source, target)

    monkeypatch.setattr("kifork.rename.os.rename", flaky_rename)
    with pytest.raises(RenameError) as excinfo:
        engine.run(root)

    assert [target.name for _, target in excinfo.value.renamed] == ["dpx_widget_v2.a"]
    assert (root / "dpx_widget_v2.a").exists()
    assert (root / "widget_v1.b").exists()


def test_create_backups_dir_is_idempotent(tmp_path: Path):
    path = create_backups_dir(tmp_path, "dpx_widget_v2")
    assert path == tmp_path / "dpx_widget_v2-backups"
    assert path.is_dir()
    assert create_backups_dir(tmp_path, "dpx_widget_v2") == path
    assert list(path.iterdir()) == []


def test_create_backups_dir_blocked_by_file(tmp_path: Path):
    (tmp_path / "dpx_widget_v2-backups").write_text("", encoding="utf-8")
    with pytest.raises(BackupError):
        create_backups_dir(tmp_path, "dpx_widget_v2")
