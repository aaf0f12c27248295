"""Command-line interface for autoc.

Usage:
    autoc expand <path>... [--dry-run]
    autoc check <path>...
    autoc scan <path>...
    autoc --config autoc.yaml expand src/
"""

import argparse
import sys

from autoc import __version__
from autoc.cli.expand import cmd_check, cmd_expand
from autoc.cli.scan import cmd_scan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoc",
        description="Regenerate code from autoc directives embedded in comments",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to autoc.yaml (default: $AUTOC_CONFIG or ./autoc.yaml)",
    )
    parser.add_argument(
        "--version", action="version", version=f"autoc {__version__}",
    )
    sub = parser.add_subparsers(dest="command")

    exp = sub.add_parser("expand", help="Rewrite output regions in place")
    exp.add_argument("paths", nargs="+", help="Files or directories")
    exp.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    chk = sub.add_parser(
        "check", help="Exit non-zero if any output region is out of date",
    )
    chk.add_argument("paths", nargs="+", help="Files or directories")

    scn = sub.add_parser("scan", help="List directives found in files")
    scn.add_argument("paths", nargs="+", help="Files or directories")

    return parser


def main() -> int:
    import yaml

    from autoc.config import load_config

    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    try:
        args.config_obj = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 2

    dispatch = {
        "expand": cmd_expand,
        "check": cmd_check,
        "scan": cmd_scan,
    }

    try:
        return dispatch[args.command](args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
