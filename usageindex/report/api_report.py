from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path

from usageindex.errors import InputNotFound, MalformedReport
from usageindex.indexing.function_table import FunctionDescriptor, FunctionTable

log = logging.getLogger(__name__)

DEFAULT_MARKER = "Functions found:"

# "Function 001: InitWindow() (3 input parameters)" or "1: Foo(a,b) (2 args)"
HEADER_RE = re.compile(
    r"^(?P<ordinal>[^:]*): (?P<name>[^(]*)\((?P<params>.*)\)\s*\((?P<count>\d+)(?:\s[^)]*)?\)\s*$"
)

# Only newlines delimit report lines; form feeds and other separators stay in the text.
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

# Name, return type and description lines precede the parameter lines.
FIXED_DETAIL_LINES = 3


class ParseState(Enum):
    AWAITING_MARKER = "awaiting_marker"
    SKIPPING_MARKER_GAP = "skipping_marker_gap"
    READING_RECORD_HEADER = "reading_record_header"
    SKIPPING_DETAIL_LINES = "skipping_detail_lines"


def detail_line_count(param_count: int) -> int:
    """Lines following a record header; zero-parameter records still carry one parameter line."""
    return FIXED_DETAIL_LINES + max(param_count, 1)


def parse_header_line(line: str, line_number: int | None = None) -> FunctionDescriptor:
    m = HEADER_RE.match(line.rstrip("\r\n"))
    if not m:
        raise MalformedReport(f"unparsable function record: {line.strip()!r}", line_number)
    name = m.group("name").strip()
    if not name:
        raise MalformedReport(f"empty function name: {line.strip()!r}", line_number)
    return FunctionDescriptor(name=name, param_count=int(m.group("count")))


def split_report_lines(text: str) -> list[str]:
    lines = LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_report(text: str, marker: str = DEFAULT_MARKER) -> FunctionTable:
    table = FunctionTable()
    state = ParseState.AWAITING_MARKER
    remaining = 0

    for line_number, line in enumerate(split_report_lines(text), start=1):
        if state is ParseState.AWAITING_MARKER:
            if line.startswith(marker):
                log.debug("Function block marker at line %s", line_number)
                state = ParseState.SKIPPING_MARKER_GAP
            continue

        if state is ParseState.SKIPPING_MARKER_GAP:
            state = ParseState.READING_RECORD_HEADER
            continue

        if state is ParseState.SKIPPING_DETAIL_LINES:
            remaining -= 1
            if remaining <= 0:
                state = ParseState.READING_RECORD_HEADER
            continue

        if not line.strip():
            continue
        func = parse_header_line(line, line_number)
        table.add_function(func, line_number)
        remaining = detail_line_count(func.param_count)
        state = ParseState.SKIPPING_DETAIL_LINES

    if state is ParseState.AWAITING_MARKER:
        raise MalformedReport(f"function block marker not found: {marker!r}")
    if state is ParseState.SKIPPING_MARKER_GAP:
        raise MalformedReport(f"function block ends at marker line: {marker!r}")
    return table


def load_report(path: Path, marker: str = DEFAULT_MARKER, encoding: str = "utf-8") -> FunctionTable:
    try:
        text = path.read_text(encoding=encoding, errors="replace")
    except OSError as e:
        raise InputNotFound(f"Failed to read report '{path}': {e}") from e
    table = parse_report(text, marker)
    log.info("Parsed %s functions from %s", len(table), path)
    return table
