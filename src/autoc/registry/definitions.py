"""Per-document table of named definitions.

Functions and line collections live in separate namespaces, so a
``defun foo`` and a ``lines foo`` never collide.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from autoc.lang.nodes import Form


@dataclass(frozen=True)
class FunctionDefinition:
    name: str
    parameters: tuple[str, ...]
    body: tuple[Form, ...]
    line: int | None = None

    @property
    def arity(self) -> int:
        return len(self.parameters)


@dataclass(frozen=True)
class NamedLines:
    """A ``lines`` or ``block`` collection.

    A block is stored as a single virtual line holding its whole body.
    """

    name: str
    lines: tuple[str, ...]
    line: int | None = None


@dataclass
class Registry:
    functions: dict[str, FunctionDefinition] = field(default_factory=dict)
    named_lines: dict[str, NamedLines] = field(default_factory=dict)

    def register_function(self, definition: FunctionDefinition) -> FunctionDefinition | None:
        """Insert or overwrite a function. Returns the entry it replaced, if any."""
        previous = self.functions.get(definition.name)
        self.functions[definition.name] = definition
        return previous

    def register_lines(self, entry: NamedLines) -> NamedLines | None:
        """Insert or overwrite a line collection. Returns the entry it replaced, if any."""
        previous = self.named_lines.get(entry.name)
        self.named_lines[entry.name] = entry
        return previous

    def lookup_function(self, name: str) -> FunctionDefinition | None:
        return self.functions.get(name)

    def lookup_lines(self, name: str) -> NamedLines | None:
        return self.named_lines.get(name)
