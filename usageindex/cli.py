from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

from usageindex.config import Config, build_parser, resolve_config
from usageindex.errors import InputNotFound, UsageIndexError
from usageindex.indexing.function_table import FunctionTable
from usageindex.indexing.usage_collector import CollectStats, collect_usages
from usageindex.report.api_report import load_report
from usageindex.reporting.json_report import write_json_report
from usageindex.reporting.summary import build_summary
from usageindex.scanner.file_scanner import discover_example_files
from usageindex.utils.logging import configure_logging

log = logging.getLogger("usageindex")


def _print_summary(table: FunctionTable, stats: CollectStats, elapsed_sec: float) -> None:
    summary = build_summary(table, stats)
    print("Usage index summary")
    for key, value in summary.items():
        print(f"{key}: {value}")
    print(f"elapsed_sec: {elapsed_sec:.3f}")


def build_index(cfg: Config) -> tuple[FunctionTable, CollectStats]:
    report_path = Path(cfg.report_path)
    if not report_path.is_file():
        raise InputNotFound(f"Report file not found: {report_path}")
    table = load_report(report_path, cfg.report.marker, cfg.scan.encoding)

    files = discover_example_files(Path(cfg.examples_path), cfg.scan)
    if not files:
        log.warning("No example files matched under %s", cfg.examples_path)
    progress = cfg.logging.progress and not cfg.logging.quiet
    stats = collect_usages(
        table,
        files,
        jobs=cfg.scan.jobs,
        encoding=cfg.scan.encoding,
        progress=progress,
    )
    for name in table.unused():
        log.debug("Unused function: %s", name)
    return table, stats


def run(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = resolve_config(args)
    except ValueError as e:
        print(f"Usage error: {e}", file=sys.stderr)
        return 2

    configure_logging(cfg.logging.verbose, cfg.logging.quiet, cfg.logging.log_file)

    try:
        started = time.perf_counter()
        table, stats = build_index(cfg)
        # Only reached once parsing and collection both succeeded.
        write_json_report(Path(cfg.output_path), table, indent=cfg.output_cfg.indent)
        log.info(
            "Indexed %s usages of %s functions across %s files into %s",
            stats.usages_found,
            len(table),
            stats.files_scanned,
            cfg.output_path,
        )
        if cfg.output_cfg.summary:
            _print_summary(table, stats, max(0.0, time.perf_counter() - started))
        return 0
    except UsageIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
