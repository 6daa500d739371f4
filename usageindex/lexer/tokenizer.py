from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

# Non-ASCII characters are identifier characters, so "FooÄ" is one identifier.
_IDENT_RE = re.compile(r"[A-Za-z_\u0080-\U0010ffff][A-Za-z0-9_\u0080-\U0010ffff]*")
# C preprocessing number: loose enough for hex, floats, suffixes and exponents.
_NUMBER_RE = re.compile(r"\.?[0-9](?:[eEpP][+-]|[A-Za-z0-9_.])*")

_DIGITS = "0123456789"
_WHITESPACE = " \t\f\v\r\n"
_NEWLINES = "\r\n"
_STRING_PREFIXES = {"L", "u", "U", "u8"}

_PUNCTUATORS = sorted(
    [
        "<<=", ">>=", "...",
        "->", "++", "--", "<<", ">>", "<=", ">=", "==", "!=", "&&", "||",
        "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "##",
    ],
    key=len,
    reverse=True,
)


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    STRING = "string"
    CHAR = "char"
    NUMBER = "number"
    COMMENT = "comment"
    PUNCT = "punct"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int
    line: int
    column: int


class _LineCounter:
    """Tracks line numbers for monotonically increasing offsets.

    ``\\n``, ``\\r\\n`` and a lone ``\\r`` each count as one line break.
    Columns count decoded characters, not encoded bytes.
    """

    def __init__(self, text: str):
        self.text = text
        self.line = 1
        self.line_start = 0
        self._pos = 0

    def location(self, offset: int) -> tuple[int, int]:
        text = self.text
        start = self._pos
        if offset > start:
            breaks = (
                text.count("\n", start, offset)
                + text.count("\r", start, offset)
                - text.count("\r\n", start, offset)
            )
            if breaks:
                self.line += breaks
                self.line_start = max(text.rfind("\n", start, offset), text.rfind("\r", start, offset)) + 1
            self._pos = offset
        return self.line, offset - self.line_start


def _skip_escaped_newline(text: str, i: int) -> int:
    # i points at a backslash that precedes a line break
    return i + 3 if text.startswith("\r\n", i + 1) else i + 2


def _scan_quoted(text: str, i: int, quote: str) -> int:
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            if i + 1 < n and text[i + 1] in _NEWLINES:
                i = _skip_escaped_newline(text, i)
            else:
                i += 2
            continue
        if ch == quote:
            return i + 1
        if ch in _NEWLINES:
            # Unterminated literal; the line break is left for the caller.
            return i
        i += 1
    return n


def _scan_line_comment(text: str, i: int) -> int:
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n and text[i + 1] in _NEWLINES:
            i = _skip_escaped_newline(text, i)
            continue
        if ch in _NEWLINES:
            return i
        i += 1
    return n


def _scan_block_comment(text: str, i: int) -> int:
    end = text.find("*/", i)
    return len(text) if end == -1 else end + 2


def _scan_punct(text: str, i: int) -> int:
    for p in _PUNCTUATORS:
        if text.startswith(p, i):
            return i + len(p)
    return i + 1


def tokenize(text: str) -> Iterator[Token]:
    """Yield the C-family tokens of ``text`` lazily, skipping whitespace.

    Comments and literals are emitted as single tokens, so identifiers
    inside them are never reported. Malformed input (unterminated literals
    or comments) never raises; the scanner consumes what it can and moves on.
    """
    counter = _LineCounter(text)
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        if ch in _WHITESPACE:
            i += 1
            continue

        start = i
        nxt = text[i + 1] if i + 1 < n else ""
        if ch == "/" and nxt == "/":
            kind = TokenKind.COMMENT
            end = _scan_line_comment(text, i + 2)
        elif ch == "/" and nxt == "*":
            kind = TokenKind.COMMENT
            end = _scan_block_comment(text, i + 2)
        elif ch == '"' or ch == "'":
            kind = TokenKind.STRING if ch == '"' else TokenKind.CHAR
            end = _scan_quoted(text, i + 1, ch)
        elif ch in _DIGITS or (ch == "." and nxt != "" and nxt in _DIGITS):
            kind = TokenKind.NUMBER
            m = _NUMBER_RE.match(text, i)
            end = m.end() if m else i + 1
        else:
            m = _IDENT_RE.match(text, i)
            if m:
                end = m.end()
                quote = text[end] if end < n else ""
                if quote in {'"', "'"} and m.group() in _STRING_PREFIXES:
                    kind = TokenKind.STRING if quote == '"' else TokenKind.CHAR
                    end = _scan_quoted(text, end + 1, quote)
                else:
                    kind = TokenKind.IDENTIFIER
            else:
                kind = TokenKind.PUNCT
                end = _scan_punct(text, i)

        line, column = counter.location(start)
        yield Token(kind=kind, text=text[start:end], offset=start, line=line, column=column)
        i = end


def identifiers(text: str) -> Iterator[Token]:
    return (tok for tok in tokenize(text) if tok.kind is TokenKind.IDENTIFIER)
