"""Directives module — find and parse ``autoc:`` regions in source text."""

from autoc.directives.header import parse_header
from autoc.directives.scanner import Directive, scan_directives

__all__ = [
    "Directive",
    "parse_header",
    "scan_directives",
]
