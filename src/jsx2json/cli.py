"""
Command line interface: convert markup from a file or stdin.

    jsx2json page.jsx
    echo '<p class="x">Hi</p>' | jsx2json --format yaml
"""

import argparse
import sys
from typing import List, Optional

from jsx2json.converter import JSXSyntaxError, convert
from jsx2json.diagnostics import ignore, warn
from jsx2json.serialization import tree_to_json, tree_to_yaml


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsx2json",
        description="Convert JSX markup into a JSON-serializable tree",
    )
    parser.add_argument("source", nargs="?", help="File to convert (default: stdin)")
    parser.add_argument("--format", choices=["json", "yaml"], default="json", help="Output format")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact)")
    parser.add_argument("--quiet", action="store_true", help="Do not report unsupported constructs")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.source:
        with open(args.source, "r", encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    try:
        tree = convert(text, on_diagnostic=ignore if args.quiet else warn)
    except JSXSyntaxError as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.format == "yaml":
        sys.stdout.write(tree_to_yaml(tree))
    else:
        sys.stdout.write(tree_to_json(tree, indent=args.indent or None) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
