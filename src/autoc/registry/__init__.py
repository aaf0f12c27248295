"""Registry module — named functions and line collections for one document."""

from autoc.registry.definitions import FunctionDefinition, NamedLines, Registry

__all__ = [
    "FunctionDefinition",
    "NamedLines",
    "Registry",
]
