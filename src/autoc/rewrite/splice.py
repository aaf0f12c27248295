"""Splice regenerated text into a document.

Only the output regions are replaced; every character outside them is
copied through unchanged, line endings and trailing whitespace included.
"""

from __future__ import annotations

from autoc.directives.scanner import Span


def render_region(generated: str, newline: str = "\n") -> str:
    """Ensure the close marker keeps its own line.

    Empty output stays empty; anything else ends with a line break.
    """
    if not generated:
        return ""
    if not generated.endswith("\n"):
        generated += newline
    return generated


def splice_regions(text: str, replacements: list[tuple[Span, str]]) -> str:
    """Replace each span with its text in one left-to-right pass.

    Args:
        text: Original document text.
        replacements: (span, new_text) pairs, source-ordered and non-overlapping.

    Returns:
        The rewritten document.

    Raises:
        ValueError: Spans overlap, are out of order, or fall outside the text.
    """
    parts: list[str] = []
    cursor = 0
    for (start, end), new_text in replacements:
        if start < cursor or end < start or end > len(text):
            raise ValueError(f"invalid or overlapping region span ({start}, {end})")
        parts.append(text[cursor:start])
        parts.append(new_text)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)
