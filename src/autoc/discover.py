"""Discover source files to expand."""

from __future__ import annotations

from pathlib import Path

from autoc.config import AutocConfig


def discover_files(
    paths: list[Path | str],
    config: AutocConfig | None = None,
) -> list[Path]:
    """Expand a list of files and directories into source files.

    Files given explicitly are always kept. Directories are walked
    recursively; subdirectories named in ``config.exclude`` are skipped
    and only files whose suffix is in ``config.extensions`` are kept.

    Args:
        paths: Files and/or directories.
        config: Supplies extensions and exclusions. Defaults to AutocConfig().

    Returns:
        De-duplicated list of file paths: explicit files first in the
        order given, then each directory's files in sorted order.

    Raises:
        FileNotFoundError: A path does not exist.
    """
    config = config or AutocConfig()
    extensions = {e.lower() for e in config.extensions}
    exclude = set(config.exclude)

    found: list[Path] = []
    seen: set[Path] = set()

    def add(p: Path) -> None:
        key = p.resolve()
        if key not in seen:
            seen.add(key)
            found.append(p)

    for raw in paths:
        root = Path(raw)
        if root.is_file():
            add(root)
            continue
        if not root.is_dir():
            raise FileNotFoundError(f"No such file or directory: {root}")
        for candidate in sorted(root.rglob("*")):
            rel_parts = candidate.relative_to(root).parts
            if any(part in exclude for part in rel_parts[:-1]):
                continue
            if candidate.is_file() and candidate.suffix.lower() in extensions:
                add(candidate)

    return found
