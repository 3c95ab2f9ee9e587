#!/usr/bin/env python3
"""Command-line interface for cuss."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, NoReturn

from .errors import CssSyntaxError
from .matcher import Matcher
from .node import ElementNode
from .parser import ParserOpts, parse_selector_list, parse_stylesheet
from .rules import SelectorTable
from .serialize import selector_to_css
from .symbol import SymbolPool


def _get_version() -> str:
    try:
        return version("cuss")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cuss",
        description="Report which stylesheet selectors match each element of a tree.",
        epilog=(
            "Trees are JSON objects of the form\n"
            '  {"tag": "div", "attrs": {"id": "a", "class": "x y"}, "children": [...]}\n'
            "\n"
            "Examples:\n"
            "  cuss site.css page.json\n"
            "  cat page.json | cuss site.css -\n"
            "  cuss site.css page.json --selector 'main p' --format json\n"
            "  cuss site.css --dump\n"
            "\n"
            "If you don't have the 'cuss' command available, use:\n"
            "  python -m cuss ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("stylesheet", help="CSS file to match with")
    parser.add_argument(
        "tree",
        nargs="?",
        help="JSON tree file to match against, or '-' to read from stdin",
    )
    parser.add_argument(
        "--selector",
        help="Only report elements that also match this selector",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the compiled selector table and exit",
    )
    parser.add_argument(
        "--case-sensitive-tags",
        action="store_false",
        dest="lowercase_tags",
        help="Do not lowercase tag names in selectors and trees",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cuss {_get_version()}",
    )

    args = parser.parse_args(argv)

    if not args.dump and not args.tree:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _read_tree(path: str) -> ElementNode:
    text = sys.stdin.read() if path == "-" else Path(path).read_text()
    return ElementNode.from_dict(json.loads(text))


def _node_label(node: ElementNode) -> str:
    parts = [node.tag]
    if node.id:
        parts.extend(["#", node.id])
    for class_ in node.classes:
        parts.extend([".", class_])
    return "".join(parts)


def _node_path(node: ElementNode) -> str:
    labels: list[str] = []
    current: ElementNode | None = node
    while current is not None:
        labels.append(_node_label(current))
        current = current.parent
    return " > ".join(reversed(labels))


def _dump(table: SelectorTable) -> None:
    for rule_ix, selector in enumerate(table):
        sys.stdout.write(f"{rule_ix}\t{table.owners[rule_ix]}\t{selector_to_css(selector)}\n")


def main() -> NoReturn | None:
    args = _parse_args(sys.argv[1:])
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    opts = ParserOpts(lowercase_tags=args.lowercase_tags)
    try:
        stylesheet = parse_stylesheet(Path(args.stylesheet).read_text(), opts=opts)
    except CssSyntaxError as e:
        print(f"{args.stylesheet}: {e}", file=sys.stderr)
        raise SystemExit(2) from e

    table = stylesheet.selector_table()
    if args.dump:
        _dump(table)
        return None

    filter_matcher = None
    if args.selector:
        filter_pool = SymbolPool()
        try:
            filter_selectors = parse_selector_list(args.selector, filter_pool, opts=opts)
        except CssSyntaxError as e:
            print(str(e), file=sys.stderr)
            raise SystemExit(2) from e
        filter_matcher = Matcher(filter_selectors, filter_pool, lowercase_tags=args.lowercase_tags)

    try:
        root = _read_tree(args.tree)
    except ValueError as e:
        print(f"{args.tree}: {e}", file=sys.stderr)
        raise SystemExit(2) from e

    matcher = Matcher(table.selectors, stylesheet.pool, lowercase_tags=args.lowercase_tags)
    results = [(node, rules) for node, rules in matcher.match_tree(root) if rules]

    if filter_matcher is not None:
        selected = {id(node) for node, rules in filter_matcher.match_tree(root) if rules}
        results = [(node, rules) for node, rules in results if id(node) in selected]

    if not results:
        raise SystemExit(1)

    if args.format == "json":
        payload: list[dict[str, Any]] = [
            {
                "path": _node_path(node),
                "rules": rules,
                "selectors": [selector_to_css(table[ix]) for ix in rules],
            }
            for node, rules in results
        ]
        sys.stdout.write(json.dumps(payload, indent=2))
        sys.stdout.write("\n")
        return None

    for node, rules in results:
        matched = ", ".join(f"[{ix}] {selector_to_css(table[ix])}" for ix in rules)
        sys.stdout.write(f"{_node_path(node)}\t{matched}\n")
    return None


if __name__ == "__main__":
    main()
