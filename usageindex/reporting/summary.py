from __future__ import annotations

from usageindex.indexing.function_table import FunctionTable
from usageindex.indexing.usage_collector import CollectStats


def build_summary(table: FunctionTable, stats: CollectStats) -> dict:
    unused = table.unused()
    return {
        "functions": len(table),
        "used_functions": len(table) - len(unused),
        "unused_functions": len(unused),
        "total_usages": table.total_usages(),
        "files_scanned": stats.files_scanned,
        "files_failed": stats.files_failed,
    }
