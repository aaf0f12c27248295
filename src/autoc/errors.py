"""Error types and diagnostics for directive expansion.

Every error carries an optional line and filename so the driver can report
exactly where a document failed. The core only raises; printing is left to
the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass


class AutocError(Exception):
    """Base class for all expansion errors."""

    def __init__(self, message: str, line: int | None = None, filename: str | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.filename = filename

    def locate(self, line: int | None = None, filename: str | None = None) -> AutocError:
        """Fill in location fields that are still unknown. Returns self."""
        if self.line is None:
            self.line = line
        if self.filename is None:
            self.filename = filename
        return self

    def __str__(self) -> str:
        location = ""
        if self.filename:
            location = self.filename
        if self.line is not None:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
        if location:
            return f"{location}: {self.__class__.__name__}: {self.message}"
        return f"{self.__class__.__name__}: {self.message}"


class ScanError(AutocError):
    """Malformed, nested, or unterminated directive."""


class EvalError(AutocError):
    """Failure while evaluating a directive."""


class UndefinedFunction(EvalError):
    pass


class ArityMismatch(EvalError):
    pass


class TypeMismatch(EvalError):
    pass


class UndefinedName(EvalError):
    pass


class ResourceLimitExceeded(EvalError):
    pass


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal record produced while expanding a document."""

    message: str
    line: int | None = None
    filename: str | None = None
    severity: str = "message"

    def __str__(self) -> str:
        where = self.filename or "<text>"
        if self.line is not None:
            where = f"{where}:{self.line}"
        return f"{where}: {self.severity}: {self.message}"
