from __future__ import annotations

import os
from pathlib import Path

import pytest

from kifork.config import DEFAULT_SHORT_DESCRIPTION, DEFAULT_TAGLINE, ForkConfig
from kifork.errors import DestinationExistsError, SourceNotFoundError, UsageError


def test_resolve_defaults_destination_to_source_parent(widget_project: Path):
    config = ForkConfig.resolve(widget_project, "widget_v2")
    assert config.source == widget_project.resolve()
    assert config.destination_parent == widget_project.resolve().parent
    assert config.destination == widget_project.resolve().parent / "widget_v2"
    assert config.tagline == DEFAULT_TAGLINE
    assert config.short_description == DEFAULT_SHORT_DESCRIPTION
    assert config.change_about is True
    assert config.keep_roadmap is False
    assert config.remove_instructions is False
    assert config.copy_archives is False
    assert config.prefix == "dpx"


def test_resolve_makes_relative_paths_absolute(widget_project: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(widget_project.parent)
    forks = widget_project.parent / "forks"
    forks.mkdir()
    config = ForkConfig.resolve("widget_v1", "widget_v2", "forks")
    assert config.source.is_absolute()
    assert config.destination == forks.resolve() / "widget_v2"


def test_config_is_immutable(widget_project: Path):
    config = ForkConfig.resolve(widget_project, "widget_v2")
    with pytest.raises(AttributeError):
        config.new_basename = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "source, name",
    [
        (None, "widget_v2"),
        ("", "widget_v2"),
        ("widget_v1", None),
        ("widget_v1", "   "),
        ("widget_v1", ".."),
        ("widget_v1", "nested/name"),
    ],
)
def test_resolve_rejects_bad_usage(source, name):
    with pytest.raises(UsageError):
        ForkConfig.resolve(source, name)


@pytest.mark.parametrize("prefix", ["", "   ", "a/b", "../acme"])
def test_resolve_rejects_bad_prefix(widget_project: Path, prefix: str):
    with pytest.raises(UsageError):
        ForkConfig.resolve(widget_project, "widget_v2", prefix=prefix)
    assert not (widget_project.parent / "widget_v2").exists()


def test_resolve_rejects_unknown_strategy(widget_project: Path):
    with pytest.raises(UsageError):
        ForkConfig.resolve(widget_project, "widget_v2", strategy="rsync")


def test_resolve_requires_existing_source(tmp_path: Path):
    with pytest.raises(SourceNotFoundError):
        ForkConfig.resolve(tmp_path / "missing", "widget_v2")


def test_resolve_rejects_file_as_source(tmp_path: Path):
    source = tmp_path / "widget.kicad_pro"
    source.write_text("{}", encoding="utf-8")
    with pytest.raises(SourceNotFoundError):
        ForkConfig.resolve(source, "widget_v2")


def test_resolve_refuses_existing_destination(widget_project: Path):
    (widget_project.parent / "widget_v2").write_text("", encoding="utf-8")
    with pytest.raises(DestinationExistsError):
        ForkConfig.resolve(widget_project, "widget_v2")


def test_resolve_refuses_dangling_symlink_destination(widget_project: Path):
    os.symlink(widget_project.parent / "nowhere", widget_project.parent / "widget_v2")
    with pytest.raises(DestinationExistsError):
        ForkConfig.resolve(widget_project, "widget_v2")
