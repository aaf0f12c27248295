"""File sync — expand directives in files on disk.

The sync process:
1. Discover files under the given paths
2. Read each file with its line endings intact
3. Expand the document in memory
4. Write it back only if the text changed

A file that fails to scan or evaluate is never written; the error is
recorded and the remaining files are still processed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from autoc.config import AutocConfig
from autoc.errors import AutocError
from autoc.rewrite.driver import expand_text


def expand_file(
    file_path: Path | str,
    config: AutocConfig | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Expand a single file in place.

    Returns:
        Dict with ``path``, ``action`` (updated, unchanged or skipped),
        ``diagnostics`` and ``dry_run``.

    Raises:
        ScanError, EvalError: The file could not be expanded. Nothing is written.
    """
    config = config or AutocConfig()
    path = Path(file_path)
    with open(path, encoding=config.encoding, newline="") as f:
        content = f.read()

    result = expand_text(content, str(path), config)

    if not result.directives:
        action = "skipped"
    elif result.changed:
        if not dry_run:
            with open(path, "w", encoding=config.encoding, newline="") as f:
                f.write(result.text)
        action = "updated"
    else:
        action = "unchanged"

    return {
        "path": str(path),
        "action": action,
        "diagnostics": result.diagnostics,
        "dry_run": dry_run,
    }


def expand_paths(
    paths: list[Path | str],
    config: AutocConfig | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Expand directives across files and directories."""
    from autoc.discover import discover_files

    config = config or AutocConfig()

    updated = []
    unchanged = []
    skipped = []
    diagnostics = []
    errors = []

    for path in discover_files(paths, config):
        try:
            res = expand_file(path, config, dry_run)
        except AutocError as e:
            errors.append({"path": str(path), "line": e.line, "error": e.message, "kind": type(e).__name__})
            continue
        except (OSError, UnicodeDecodeError) as e:
            errors.append({"path": str(path), "line": None, "error": str(e), "kind": type(e).__name__})
            continue

        diagnostics.extend(res["diagnostics"])
        if res["action"] == "updated": updated.append(res["path"])
        elif res["action"] == "unchanged": unchanged.append(res["path"])
        else: skipped.append(res["path"])

    return {
        "updated": updated,
        "unchanged": unchanged,
        "skipped": skipped,
        "diagnostics": diagnostics,
        "errors": errors,
        "dry_run": dry_run,
    }
