"""Two-pass expansion of a single document.

Pass 1 registers every ``defun``, ``block`` and ``lines`` directive, so a
``funcall`` may appear before the function it calls. Pass 2 evaluates the
output directives in source order and splices the results in.

Any error aborts the whole document: the caller gets an exception and no
partially rewritten text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from autoc import CLOSE_TOKEN, OPEN_TOKEN
from autoc.config import AutocConfig
from autoc.directives.scanner import Directive, Span, scan_directives
from autoc.errors import AutocError, Diagnostic, EvalError, UndefinedName
from autoc.lang.evaluator import Evaluator, OutputBuffer, format_lines
from autoc.lang.reader import parse_body
from autoc.registry.definitions import FunctionDefinition, NamedLines, Registry
from autoc.rewrite.splice import render_region, splice_regions


@dataclass
class ExpansionResult:
    text: str
    original: str
    directives: list[Directive] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.text != self.original


def _body_lines(directive: Directive) -> list[str]:
    """Physical body lines with the marker's indentation removed."""
    lines = []
    for line in directive.body_text.splitlines():
        if directive.indent and line.startswith(directive.indent):
            line = line[len(directive.indent):]
        lines.append(line)
    return lines


def _defun_source(directive: Directive) -> str:
    """Body text with the marker's comment leader removed from each line.

    Line count is preserved so form line numbers still match the file.
    """
    prefix = directive.comment_prefix
    if not prefix:
        return directive.body_text
    lines = []
    for line in directive.body_text.splitlines():
        stripped = line.lstrip()
        if stripped.startswith(prefix):
            line = stripped[len(prefix):]
        lines.append(line)
    return "\n".join(lines)


def _register(
    directive: Directive,
    registry: Registry,
    diagnostics: list[Diagnostic],
    filename: str | None,
) -> None:
    if directive.kind == "defun":
        name, params = directive.args
        body = parse_body(_defun_source(directive), directive.body_line, filename)
        previous = registry.register_function(
            FunctionDefinition(name, params, body, directive.line)
        )
        what = "function"
    else:
        name = directive.args[0]
        lines = _body_lines(directive)
        if directive.kind == "block":
            lines = [directive.newline.join(lines)]
        previous = registry.register_lines(NamedLines(name, tuple(lines), directive.line))
        what = "line collection"

    if previous is not None:
        diagnostics.append(Diagnostic(
            f"{what} '{name}' redefined; replaces the definition on line {previous.line}",
            directive.line, filename, "warning",
        ))


def _render(
    directive: Directive,
    registry: Registry,
    evaluator: Evaluator,
    diagnostics: list[Diagnostic],
    filename: str | None,
) -> str:
    """Return the full replacement text for one output region."""
    if directive.kind == "funcall":
        name, args = directive.args
        buffer = OutputBuffer(directive.indent, directive.newline)
        evaluator.call(name, args, buffer, directive.line)
        return render_region(buffer.getvalue(), directive.newline)

    if directive.kind == "format-lines":
        name, template = directive.args
        entry = registry.lookup_lines(name)
        if entry is None:
            raise UndefinedName(f"undefined line collection '{name}'", directive.line)
        if not entry.lines:
            return ""
        # Every line is terminated, including a trailing empty one
        return format_lines(entry, template, directive.indent, directive.newline) + directive.newline

    # message: reported, never written into the document
    diagnostics.append(Diagnostic(directive.args[0], directive.line, filename, "message"))
    return ""


def expand_text(
    text: str,
    filename: str | None = None,
    config: AutocConfig | None = None,
) -> ExpansionResult:
    """Expand every directive in a document.

    Args:
        text: Full document text, line endings preserved.
        filename: Used for error and diagnostic locations.
        config: Supplies evaluation limits. Defaults to AutocConfig().

    Returns:
        ExpansionResult holding the rewritten text and diagnostics.

    Raises:
        ScanError: Malformed directive or body.
        EvalError: Evaluation failure in any output directive.
    """
    config = config or AutocConfig()
    directives = scan_directives(text, filename)
    registry = Registry()
    diagnostics: list[Diagnostic] = []

    for directive in directives:
        if directive.produces_output:
            continue
        try:
            _register(directive, registry, diagnostics, filename)
        except AutocError as err:
            raise err.locate(directive.line, filename)

    evaluator = Evaluator(registry, config.limits())
    replacements: list[tuple[Span, str]] = []
    for directive in directives:
        if not directive.produces_output:
            continue
        try:
            region = _render(directive, registry, evaluator, diagnostics, filename)
            if OPEN_TOKEN in region or CLOSE_TOKEN in region:
                raise EvalError(
                    f"generated text contains a directive marker "
                    f"('{OPEN_TOKEN}' or '{CLOSE_TOKEN}')",
                    directive.line,
                )
        except AutocError as err:
            raise err.locate(directive.line, filename)
        replacements.append((directive.output_span, region))

    return ExpansionResult(
        text=splice_regions(text, replacements),
        original=text,
        directives=directives,
        diagnostics=diagnostics,
    )
