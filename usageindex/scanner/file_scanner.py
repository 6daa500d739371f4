from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from usageindex.config import ScanConfig
from usageindex.errors import InputNotFound
from usageindex.scanner.language_filter import allowed_extensions

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExampleFile:
    path: Path
    label: str


def _is_regular_file(path: Path, follow_symlinks: bool) -> bool:
    if path.is_symlink() and not follow_symlinks:
        return False
    return path.is_file()


def _list_dir(path: Path) -> list[Path]:
    return sorted(path.iterdir(), key=lambda p: p.name)


def discover_example_files(root: Path, scan_cfg: ScanConfig) -> list[ExampleFile]:
    """List source files one level below ``root``, grouped by subdirectory.

    Groups and files are both returned in lexicographic order so repeated
    runs over an unchanged tree produce identical output.
    """
    if not root.is_dir():
        raise InputNotFound(f"Examples directory not found: {root}")
    try:
        groups = _list_dir(root)
    except OSError as e:
        raise InputNotFound(f"Failed to open directory '{root}': {e}") from e

    exts = allowed_extensions(scan_cfg.languages, scan_cfg.extensions)
    found: list[ExampleFile] = []
    for group in groups:
        if group.name.startswith("."):
            continue
        if group.is_symlink() and not scan_cfg.follow_symlinks:
            continue
        if not group.is_dir():
            continue
        try:
            entries = _list_dir(group)
        except OSError as e:
            log.warning("Failed to open directory '%s': %s", group, e)
            continue
        for p in entries:
            if p.suffix not in exts:
                continue
            if not _is_regular_file(p, scan_cfg.follow_symlinks):
                continue
            found.append(ExampleFile(path=p, label=f"{group.name}/{p.name}"))

    log.debug("Discovered %s example files under %s", len(found), root)
    return found
