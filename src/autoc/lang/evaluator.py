"""Evaluate directive forms into generated text.

The evaluator walks the AST built by ``autoc.lang.reader`` and appends to an
OutputBuffer. Function lookups go through the per-document Registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from autoc.errors import (
    ArityMismatch,
    ResourceLimitExceeded,
    TypeMismatch,
    UndefinedFunction,
    UndefinedName,
)
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
from autoc.registry.definitions import NamedLines, Registry


class Environment:
    """Parameter bindings for one function call or loop iteration."""

    def __init__(self, enclosing: Environment | None = None):
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        self.values[name] = value

    def get(self, name: str, line: int | None = None) -> Any:
        if name in self.values:
            return self.values[name]
        if self.enclosing is not None:
            return self.enclosing.get(name, line)
        raise UndefinedName(f"undefined variable '{name}'", line)

    def child(self) -> Environment:
        return Environment(self)


class OutputBuffer:
    """Generated text for one output region.

    Starts with the call-site indentation, so the first line lines up with
    every line produced by ``newline-and-indent``. Indentation that no
    insert ever followed is left out of ``getvalue``.
    """

    def __init__(self, indent: str = "", newline: str = "\n"):
        self.indent = indent
        self.newline = newline
        self._parts: list[str] = [indent]
        self._pending_indent = True

    def insert(self, text: str) -> None:
        self._parts.append(text)
        self._pending_indent = False

    def newline_and_indent(self) -> None:
        self._parts.append(self.newline + self.indent)
        self._pending_indent = True

    def getvalue(self) -> str:
        text = "".join(self._parts)
        if self._pending_indent and self.indent:
            text = text[:-len(self.indent)]
        return text


@dataclass(frozen=True)
class EvalLimits:
    max_iterations: int = 100_000
    max_call_depth: int = 64


class Evaluator:
    """Runs function bodies against a Registry."""

    def __init__(self, registry: Registry, limits: EvalLimits | None = None):
        self.registry = registry
        self.limits = limits or EvalLimits()
        self._depth = 0
        self._iterations = 0

    def call(
        self,
        name: str,
        args: list[Any] | tuple[Any, ...],
        buffer: OutputBuffer,
        line: int | None = None,
    ) -> None:
        """Call a registered function, writing its output into ``buffer``.

        Args:
            name: Function name to look up.
            args: Positional argument values (str or int).
            buffer: Destination for generated text.
            line: Call-site line, used for error locations.

        Raises:
            UndefinedFunction: No function registered under ``name``.
            ArityMismatch: Wrong number of arguments.
            ResourceLimitExceeded: Call depth or iteration budget exhausted.
        """
        definition = self.registry.lookup_function(name)
        if definition is None:
            raise UndefinedFunction(f"undefined function '{name}'", line)
        if len(args) != definition.arity:
            raise ArityMismatch(
                f"function '{name}' expects {definition.arity} argument(s) "
                f"but got {len(args)}",
                line,
            )
        if self._depth == 0:
            self._iterations = 0
        if self._depth >= self.limits.max_call_depth:
            raise ResourceLimitExceeded(
                f"call depth exceeded {self.limits.max_call_depth} in '{name}'", line,
            )

        env = Environment()
        for param, value in zip(definition.parameters, args):
            env.define(param, value)

        outermost = self._depth == 0
        self._depth += 1
        try:
            self.run(definition.body, env, buffer)
        except RecursionError:
            # Stack ran out before max_call_depth; report once, from the top call
            if not outermost:
                raise
            raise ResourceLimitExceeded(
                f"call depth in '{name}' exceeded the interpreter stack "
                f"(max_call_depth is {self.limits.max_call_depth})",
                line,
            ) from None
        finally:
            self._depth -= 1

    def run(self, forms: tuple[Form, ...], env: Environment, buffer: OutputBuffer) -> None:
        """Evaluate forms strictly in order."""
        for form in forms:
            self._eval_form(form, env, buffer)

    def _eval_form(self, form: Form, env: Environment, buffer: OutputBuffer) -> None:
        if isinstance(form, Insert):
            for arg in form.args:
                value = self._eval_expr(arg, env)
                buffer.insert(value if isinstance(value, str) else str(value))
        elif isinstance(form, NewlineAndIndent):
            buffer.newline_and_indent()
        elif isinstance(form, Dotimes):
            count = self._eval_expr(form.count, env)
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise TypeMismatch(
                    f"dotimes count must be a non-negative integer, got {count!r}",
                    form.line,
                )
            for i in range(count):
                self._iterations += 1
                if self._iterations > self.limits.max_iterations:
                    raise ResourceLimitExceeded(
                        f"more than {self.limits.max_iterations} loop iterations",
                        form.line,
                    )
                frame = env.child()
                frame.define(form.var, i)
                self.run(form.body, frame, buffer)
        elif isinstance(form, Funcall):
            args = [self._eval_expr(a, env) for a in form.args]
            self.call(form.name, args, buffer, form.line)
        else:
            raise TypeError(f"unknown form node {form!r}")

    def _eval_expr(self, expr: Expr, env: Environment) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, VarRef):
            return env.get(expr.name, expr.line)
        raise TypeError(f"unknown expression node {expr!r}")


def format_lines(entry: NamedLines, template: str, indent: str = "", newline: str = "\n") -> str:
    """Substitute each stored line into ``template`` at ``%s``.

    Lines are joined with ``newline``; there is no trailing line break.
    """
    return newline.join(indent + template.replace("%s", line, 1) for line in entry.lines)
