from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Collection, Iterator

from usageindex.errors import FileUnreadable
from usageindex.indexing.function_table import FunctionTable, UsageRecord
from usageindex.lexer.tokenizer import identifiers
from usageindex.scanner.file_scanner import ExampleFile
from usageindex.utils.progress import maybe_progress

log = logging.getLogger(__name__)

Match = tuple[str, UsageRecord]


@dataclass
class CollectStats:
    files_scanned: int = 0
    files_failed: int = 0
    usages_found: int = 0


def read_source(example: ExampleFile, encoding: str = "utf-8") -> str:
    try:
        return example.path.read_text(encoding=encoding, errors="replace")
    except OSError as e:
        raise FileUnreadable(f"Failed to open file '{example.path}': {e}") from e


def find_usages(text: str, label: str, names: Collection[str]) -> list[Match]:
    """Return ``(name, usage)`` for every identifier token equal to one of ``names``."""
    return [
        (tok.text, UsageRecord(source_label=label, line=tok.line, column=tok.column))
        for tok in identifiers(text)
        if tok.text in names
    ]


def scan_file(example: ExampleFile, names: Collection[str], encoding: str = "utf-8") -> list[Match]:
    return find_usages(read_source(example, encoding), example.label, names)


def _scan_all(
    files: list[ExampleFile],
    names: Collection[str],
    jobs: int,
    encoding: str,
) -> Iterator[tuple[ExampleFile, list[Match] | FileUnreadable]]:
    def task(example: ExampleFile) -> list[Match] | FileUnreadable:
        try:
            return scan_file(example, names, encoding)
        except FileUnreadable as e:
            return e

    if jobs <= 1:
        for example in files:
            yield example, task(example)
        return
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        # map() yields in submission order, keeping output deterministic.
        yield from zip(files, pool.map(task, files))


def collect_usages(
    table: FunctionTable,
    files: list[ExampleFile],
    *,
    jobs: int = 1,
    encoding: str = "utf-8",
    progress: bool = False,
) -> CollectStats:
    stats = CollectStats()
    names = frozenset(table.names())
    total = len(files)
    for current, (example, result) in enumerate(_scan_all(files, names, jobs, encoding), start=1):
        maybe_progress(progress, current, total, example.label)
        if isinstance(result, FileUnreadable):
            log.warning("%s", result)
            stats.files_failed += 1
            continue
        for name, usage in result:
            table.add_usage(name, usage)
        stats.files_scanned += 1
        stats.usages_found += len(result)
        log.debug("%s: %s usages", example.label, len(result))
    return stats
