from __future__ import annotations

import sys


def maybe_progress(enabled: bool, current: int, total: int, label: str) -> None:
    if not enabled:
        return
    width = len(str(total))
    print(f"[{current:>{width}}/{total}] {label}", file=sys.stderr, flush=True)
