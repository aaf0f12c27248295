"""AST for the directive expression language.

One node class per form. Argument positions only hold atoms (literals and
variable references), so there is no general expression node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Literal:
    value: int | str
    line: int | None = None


@dataclass(frozen=True)
class VarRef:
    name: str
    line: int | None = None


Expr = Union[Literal, VarRef]


@dataclass(frozen=True)
class Insert:
    """``(insert ARG...)`` — append each value to the output."""

    args: tuple[Expr, ...]
    line: int | None = None


@dataclass(frozen=True)
class NewlineAndIndent:
    """``(newline-and-indent)`` — line break plus call-site indentation."""

    line: int | None = None


@dataclass(frozen=True)
class Dotimes:
    """``(dotimes (VAR COUNT) BODY...)``"""

    var: str
    count: Expr
    body: tuple[Form, ...]
    line: int | None = None


@dataclass(frozen=True)
class Funcall:
    """``(funcall NAME ARG...)``"""

    name: str
    args: tuple[Expr, ...]
    line: int | None = None


Form = Union[Insert, NewlineAndIndent, Dotimes, Funcall]
