"""Locate directive regions in raw document text.

The scanner is comment-syntax agnostic: it only looks for the ``autoc:``
and ``autoc#`` tokens and ignores whatever surrounds them on the line.
Offsets are character offsets into the document string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from autoc import CLOSE_TOKEN, DIRECTIVE_KINDS, OPEN_TOKEN, OUTPUT_KINDS
from autoc.directives.header import parse_header
from autoc.errors import ScanError

_OPEN_RE = re.compile(re.escape(OPEN_TOKEN) + r"([A-Za-z][\w-]*)")
_INDENT_RE = re.compile(r"[ \t]*")

# Block-comment closers that may trail a header on the open marker line
_COMMENT_CLOSERS = ("*/", "-->", "*)")

Span = tuple[int, int]


@dataclass(frozen=True)
class Directive:
    """One marker-delimited region."""

    kind: str
    args: tuple
    header: str
    line: int
    close_line: int
    open_span: Span
    close_span: Span
    body_span: Span
    body_text: str
    indent: str = ""
    comment_prefix: str = ""
    newline: str = "\n"

    @property
    def name(self) -> str | None:
        return None if self.kind == "message" else self.args[0]

    @property
    def produces_output(self) -> bool:
        return self.kind in OUTPUT_KINDS

    @property
    def output_span(self) -> Span | None:
        """Region rewritten by the expander, or None for definition-only kinds."""
        return self.body_span if self.produces_output else None

    @property
    def body_line(self) -> int:
        return self.line + 1


def _strip_closer(header: str) -> str:
    for closer in _COMMENT_CLOSERS:
        if header.endswith(closer):
            return header[:-len(closer)].rstrip()
    return header


def scan_directives(text: str, filename: str | None = None) -> list[Directive]:
    """Find all directives in a document, in source order.

    Args:
        text: Full document text, line endings preserved.
        filename: Used for error locations only.

    Returns:
        List of Directive objects.

    Raises:
        ScanError: Unknown kind, malformed header, nested open marker,
            unmatched close marker, or unterminated directive.
    """
    directives: list[Directive] = []
    pending: dict | None = None
    pos = 0

    for lineno, raw in enumerate(text.splitlines(keepends=True), start=1):
        start, end = pos, pos + len(raw)
        pos = end
        content = raw.rstrip("\r\n")

        m = _OPEN_RE.search(content)
        if m:
            if pending is not None:
                raise ScanError(
                    f"directive opened before the one on line {pending['line']} was closed "
                    "(directives do not nest)",
                    lineno, filename,
                )
            kind = m.group(1)
            if kind not in DIRECTIVE_KINDS:
                raise ScanError(f"unknown directive kind '{kind}'", lineno, filename)
            header = _strip_closer(content[m.end():].strip())
            pending = {
                "kind": kind,
                "args": parse_header(kind, header, lineno, filename),
                "header": header,
                "line": lineno,
                "open_span": (start, end),
                "indent": _INDENT_RE.match(content).group(0),
                "comment_prefix": content[:m.start()].strip(),
                "newline": raw[len(content):] or "\n",
            }
        elif CLOSE_TOKEN in content:
            if pending is None:
                raise ScanError("close marker without a matching open marker", lineno, filename)
            body_span = (pending["open_span"][1], start)
            directives.append(Directive(
                close_line=lineno,
                close_span=(start, end),
                body_span=body_span,
                body_text=text[body_span[0]:body_span[1]],
                **pending,
            ))
            pending = None

    if pending is not None:
        raise ScanError(
            f"'{pending['kind']}' directive is never closed with {CLOSE_TOKEN}",
            pending["line"], filename,
        )
    return directives
