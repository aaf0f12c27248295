"""Expand and check CLI commands."""

import argparse
import sys


def _print_errors(errors: list[dict]) -> None:
    for e in errors:
        where = f"{e['path']}:{e['line']}" if e["line"] is not None else e["path"]
        print(f"    - {where}: {e['kind']}: {e['error']}")


def cmd_expand(args: argparse.Namespace) -> int:
    from autoc.rewrite.sync import expand_paths

    result = expand_paths(args.paths, config=args.config_obj, dry_run=args.dry_run)

    for d in result["diagnostics"]:
        print(str(d), file=sys.stderr)

    print("Expansion Results")
    print("─" * 40)
    print(f"  Updated:   {len(result['updated'])}")
    print(f"  Unchanged: {len(result['unchanged'])}")
    print(f"  Skipped:   {len(result['skipped'])}")
    if result["errors"]:
        print(f"  Errors:    {len(result['errors'])}")
        _print_errors(result["errors"])

    if result.get("dry_run"):
        print("\n[DRY RUN] No files were modified.")

    return 1 if result["errors"] else 0


def cmd_check(args: argparse.Namespace) -> int:
    from autoc.rewrite.sync import expand_paths

    result = expand_paths(args.paths, config=args.config_obj, dry_run=True)

    for path in result["updated"]:
        print(f"  would update: {path}")
    if result["errors"]:
        print(f"  {len(result['errors'])} file(s) failed:")
        _print_errors(result["errors"])

    stale = len(result["updated"])
    if stale or result["errors"]:
        print(f"\n{stale} file(s) out of date.")
        return 1
    print("All generated regions are up to date.")
    return 0
