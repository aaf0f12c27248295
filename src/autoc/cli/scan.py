"""Scan CLI command — list directives without rewriting anything."""

import argparse


def cmd_scan(args: argparse.Namespace) -> int:
    from autoc.directives.scanner import scan_directives
    from autoc.discover import discover_files
    from autoc.errors import ScanError

    config = args.config_obj
    rc = 0
    total = 0
    for path in discover_files(args.paths, config):
        try:
            with open(path, encoding=config.encoding, newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"  ✗ {path}: {e}")
            rc = 1
            continue
        try:
            directives = scan_directives(text, str(path))
        except ScanError as e:
            print(f"  ✗ {e}")
            rc = 1
            continue
        for d in directives:
            print(f"  {path}:{d.line:<5} {d.kind:<13} {d.header}")
        total += len(directives)

    print(f"\n  {total} directive(s) found")
    return rc
