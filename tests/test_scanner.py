from __future__ import annotations

import os
from pathlib import Path

import pytest

from usageindex.config import ScanConfig
from usageindex.errors import InputNotFound
from usageindex.scanner.file_scanner import discover_example_files


def _touch(path: Path, text: str = "int x;\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_discover_example_files_filters(tmp_path: Path):
    _touch(tmp_path / "textures" / "textures_logo.c")
    _touch(tmp_path / "core" / "core_window.c")
    _touch(tmp_path / "core" / "core_camera.c")
    _touch(tmp_path / "core" / "README")
    _touch(tmp_path / "core" / "notes.txt")
    _touch(tmp_path / "core" / "upper.C")
    _touch(tmp_path / ".git" / "hook.c")
    _touch(tmp_path / "top_level.c")
    (tmp_path / "core" / "nested").mkdir()
    _touch(tmp_path / "core" / "nested" / "deep.c")

    found = discover_example_files(tmp_path, ScanConfig())

    assert [f.label for f in found] == [
        "core/core_camera.c",
        "core/core_window.c",
        "textures/textures_logo.c",
    ]
    assert found[0].path == tmp_path / "core" / "core_camera.c"


def test_discover_example_files_extension_override(tmp_path: Path):
    _touch(tmp_path / "core" / "a.c")
    _touch(tmp_path / "core" / "a.h")
    found = discover_example_files(tmp_path, ScanConfig(extensions=[".h"]))
    assert [f.label for f in found] == ["core/a.h"]


def test_discover_example_files_skips_symlinks_by_default(tmp_path: Path):
    _touch(tmp_path / "outside" / "real.c")
    (tmp_path / "examples" / "core").mkdir(parents=True)
    os.symlink(tmp_path / "outside" / "real.c", tmp_path / "examples" / "core" / "link.c")

    assert discover_example_files(tmp_path / "examples", ScanConfig()) == []
    found = discover_example_files(tmp_path / "examples", ScanConfig(follow_symlinks=True))
    assert [f.label for f in found] == ["core/link.c"]


def test_discover_example_files_missing_root(tmp_path: Path):
    with pytest.raises(InputNotFound):
        discover_example_files(tmp_path / "nope", ScanConfig())
