"""Parse the header arguments that follow ``autoc:<kind>`` on an open marker.

Header grammar per kind:
- defun NAME (PARAM*)
- funcall NAME ARG*
- block NAME
- lines NAME
- format-lines NAME "TEMPLATE"
- message "TEXT"
"""

from __future__ import annotations

from autoc.errors import ScanError
from autoc.lang.reader import Atom, SList, Symbol, is_symbol, read_data


def _is_string(datum: Atom | SList) -> bool:
    return (
        isinstance(datum, Atom)
        and isinstance(datum.value, str)
        and not isinstance(datum.value, Symbol)
    )


def _call_arg(datum: Atom | SList, line: int, filename: str | None) -> int | str:
    if isinstance(datum, SList):
        raise ScanError("malformed 'funcall' header: arguments must be literals", line, filename)
    # Bare identifiers stand for their own name
    return str(datum.value) if isinstance(datum.value, Symbol) else datum.value


def parse_header(
    kind: str,
    text: str,
    line: int,
    filename: str | None = None,
) -> tuple:
    """Parse and validate a directive header.

    Args:
        kind: Directive kind (already validated).
        text: Header text after the kind.
        line: Line number of the open marker.
        filename: Used for error locations only.

    Returns:
        Kind-specific argument tuple:
        defun -> (name, params), funcall -> (name, args),
        block/lines -> (name,), format-lines -> (name, template),
        message -> (text,).

    Raises:
        ScanError: Missing, extra, or mistyped arguments.
    """
    data = read_data(text, line, filename)

    def fail(reason: str) -> ScanError:
        return ScanError(f"malformed '{kind}' header: {reason}", line, filename)

    if kind == "defun":
        if len(data) != 2 or not is_symbol(data[0]) or not isinstance(data[1], SList):
            raise fail("expected NAME (PARAM*)")
        params = data[1].items
        if not all(is_symbol(p) for p in params):
            raise fail("parameters must be names")
        names = tuple(str(p.value) for p in params)
        if len(set(names)) != len(names):
            raise fail("duplicate parameter name")
        return (str(data[0].value), names)

    if kind == "funcall":
        if not data or not is_symbol(data[0]):
            raise fail("expected NAME ARG*")
        return (str(data[0].value), tuple(_call_arg(d, line, filename) for d in data[1:]))

    if kind in ("block", "lines"):
        if len(data) != 1 or not is_symbol(data[0]):
            raise fail("expected NAME")
        return (str(data[0].value),)

    if kind == "format-lines":
        if len(data) != 2 or not is_symbol(data[0]) or not _is_string(data[1]):
            raise fail('expected NAME "TEMPLATE"')
        template = data[1].value
        if template.count("%s") != 1:
            raise fail("template must contain exactly one %s")
        return (str(data[0].value), template)

    if kind == "message":
        if len(data) != 1 or not _is_string(data[0]):
            raise fail('expected "TEXT"')
        return (data[0].value,)

    raise ScanError(f"unknown directive kind '{kind}'", line, filename)
