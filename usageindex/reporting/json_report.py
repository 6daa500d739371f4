from __future__ import annotations

import json
from pathlib import Path

from usageindex.errors import OutputUnwritable
from usageindex.indexing.function_table import FunctionTable, UsageRecord


def _usage_to_json_item(u: UsageRecord) -> dict:
    return {
        "exampleName": u.example_name,
        "lineNumber": u.line,
        "lineOffset": u.column,
    }


def build_usage_payload(table: FunctionTable) -> dict[str, list[dict]]:
    return {func.name: [_usage_to_json_item(u) for u in usages] for func, usages in table.entries()}


def render_json_report(table: FunctionTable, indent: str | None = "\t") -> str:
    return json.dumps(build_usage_payload(table), indent=indent) + "\n"


def write_json_report(path: Path, table: FunctionTable, indent: str | None = "\t") -> None:
    payload = render_json_report(table, indent=indent)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise OutputUnwritable(f"Failed to write output '{path}': {e}") from e
