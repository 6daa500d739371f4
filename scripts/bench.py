from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# Allow running as `python scripts/bench.py` without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from usageindex.config import ScanConfig
from usageindex.indexing.usage_collector import read_source
from usageindex.lexer.tokenizer import TokenKind, tokenize
from usageindex.scanner.file_scanner import discover_example_files


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Benchmark usageindex tokenizer throughput")
    p.add_argument("path", nargs="?", default=".")
    p.add_argument("--ext", default=".c")
    return p


def main() -> None:
    args = build_parser().parse_args()
    root = Path(args.path)

    scan_cfg = ScanConfig(extensions=[x.strip() for x in args.ext.split(",") if x.strip()])

    t0 = time.perf_counter()
    files = discover_example_files(root, scan_cfg)

    token_count = 0
    identifier_count = 0
    for f in files:
        for tok in tokenize(read_source(f)):
            token_count += 1
            if tok.kind is TokenKind.IDENTIFIER:
                identifier_count += 1
    elapsed = max(1e-9, time.perf_counter() - t0)

    print(f"files: {len(files)}")
    print(f"tokens: {token_count}")
    print(f"identifiers: {identifier_count}")
    print(f"files/sec: {len(files)/elapsed:.2f}")
    print(f"tokens/sec: {token_count/elapsed:.2f}")


if __name__ == "__main__":
    main()
