"""Read the parenthesized prefix notation used in directive headers and bodies.

Three stages:
1. ``tokenize`` splits text into parens, strings, integers and symbols
2. ``read_data`` builds nested lists of atoms
3. ``parse_body`` compiles top-level lists into AST forms

Syntax problems are reported as ScanError with the line they occur on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from autoc.errors import ScanError
from autoc.lang.nodes import (
    Dotimes,
    Expr,
    Form,
    Funcall,
    Insert,
    Literal,
    NewlineAndIndent,
    VarRef,
)

_INT_RE = re.compile(r"-?\d+\Z")
_SYMBOL_RE = re.compile(r"[^\s()\";]+")

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


class Symbol(str):
    """A bare identifier, as opposed to a quoted string."""


@dataclass(frozen=True)
class Token:
    kind: str  # "(", ")", "string", "int", "symbol"
    value: str | int | None
    line: int


@dataclass(frozen=True)
class Atom:
    value: int | str
    line: int


@dataclass
class SList:
    items: list = field(default_factory=list)
    line: int = 0


def tokenize(text: str, line: int = 1, filename: str | None = None) -> list[Token]:
    """Split source text into tokens.

    Args:
        text: Header or body text.
        line: Line number of the first character of ``text``.
        filename: Used for error locations only.

    Returns:
        List of tokens in source order.
    """
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\n":
            line += 1
            i += 1
        elif ch.isspace():
            i += 1
        elif ch == ";":
            # Comment to end of line
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif ch in "()":
            tokens.append(Token(ch, None, line))
            i += 1
        elif ch == '"':
            start_line = line
            i += 1
            chars: list[str] = []
            while True:
                if i >= n:
                    raise ScanError("unterminated string literal", start_line, filename)
                ch = text[i]
                if ch == '"':
                    i += 1
                    break
                if ch == "\\" and i + 1 < n:
                    nxt = text[i + 1]
                    chars.append(_ESCAPES.get(nxt, "\\" + nxt))
                    if nxt == "\n":
                        line += 1
                    i += 2
                    continue
                if ch == "\n":
                    line += 1
                chars.append(ch)
                i += 1
            tokens.append(Token("string", "".join(chars), start_line))
        else:
            m = _SYMBOL_RE.match(text, i)
            word = m.group(0)
            i = m.end()
            if _INT_RE.match(word):
                tokens.append(Token("int", int(word), line))
            else:
                tokens.append(Token("symbol", word, line))
    return tokens


def read_data(text: str, line: int = 1, filename: str | None = None) -> list[Atom | SList]:
    """Read text into a list of top-level data (atoms and nested lists)."""
    stack: list[SList] = [SList(line=line)]
    for tok in tokenize(text, line, filename):
        if tok.kind == "(":
            stack.append(SList(line=tok.line))
        elif tok.kind == ")":
            if len(stack) == 1:
                raise ScanError("unexpected ')'", tok.line, filename)
            done = stack.pop()
            stack[-1].items.append(done)
        elif tok.kind == "symbol":
            stack[-1].items.append(Atom(Symbol(tok.value), tok.line))
        else:
            stack[-1].items.append(Atom(tok.value, tok.line))
    if len(stack) > 1:
        raise ScanError("unbalanced '(': missing ')'", stack[-1].line, filename)
    return stack[0].items


def is_symbol(datum: Atom | SList) -> bool:
    return isinstance(datum, Atom) and isinstance(datum.value, Symbol)


# ── Form compilation ──────────────────────────────────────────────


def _compile_expr(datum: Atom | SList, filename: str | None) -> Expr:
    if isinstance(datum, SList):
        raise ScanError(
            "arguments must be literals or variable names, not forms",
            datum.line, filename,
        )
    if isinstance(datum.value, Symbol):
        return VarRef(str(datum.value), datum.line)
    return Literal(datum.value, datum.line)


def compile_form(datum: Atom | SList, filename: str | None = None) -> Form:
    """Compile one datum into an AST form."""
    if not isinstance(datum, SList):
        raise ScanError(f"expected a form, found {datum.value!r}", datum.line, filename)
    if not datum.items:
        raise ScanError("empty form '()'", datum.line, filename)

    head, *rest = datum.items
    if not is_symbol(head):
        raise ScanError("form must start with a name", datum.line, filename)
    name = str(head.value)

    if name == "insert":
        if not rest:
            raise ScanError("insert expects at least one argument", datum.line, filename)
        return Insert(tuple(_compile_expr(d, filename) for d in rest), datum.line)

    if name == "newline-and-indent":
        if rest:
            raise ScanError("newline-and-indent takes no arguments", datum.line, filename)
        return NewlineAndIndent(datum.line)

    if name == "dotimes":
        if not rest or not isinstance(rest[0], SList) or len(rest[0].items) != 2:
            raise ScanError("dotimes expects (dotimes (VAR COUNT) BODY...)", datum.line, filename)
        var, count = rest[0].items
        if not is_symbol(var):
            raise ScanError("dotimes variable must be a name", datum.line, filename)
        body = tuple(compile_form(d, filename) for d in rest[1:])
        return Dotimes(str(var.value), _compile_expr(count, filename), body, datum.line)

    if name == "funcall":
        if not rest or not is_symbol(rest[0]):
            raise ScanError("funcall expects a function name", datum.line, filename)
        args = tuple(_compile_expr(d, filename) for d in rest[1:])
        return Funcall(str(rest[0].value), args, datum.line)

    raise ScanError(f"unknown form '{name}'", datum.line, filename)


def parse_body(text: str, line: int = 1, filename: str | None = None) -> tuple[Form, ...]:
    """Parse a defun body into a tuple of forms, in source order."""
    return tuple(compile_form(d, filename) for d in read_data(text, line, filename))
