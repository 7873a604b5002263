#!/usr/bin/env python3
"""
Diagram Generator - Main Program
Parses SQL CREATE TABLE statements or Java classes and prints the diagram model
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from .config import get_config
from .core import JavaParser, SQLParser


def summarize_er(diagram) -> None:
    """Print the tables and relationships of an ER diagram"""
    print(f"✅ Found {len(diagram.entities)} table(s):")
    for entity in diagram.entities:
        print(f"   - {entity.name}")
        for attr in entity.attributes:
            print(f"       {attr}")

    print(f"\n🔗 {len(diagram.relationships)} relationship(s):")
    for rel in diagram.relationships:
        print(f"   - {rel}")


def summarize_uml(diagram) -> None:
    """Print the classes and relationships of a UML diagram"""
    print(f"✅ Found {len(diagram.classes)} class(es):")
    for umlclass in diagram.classes:
        stub = " (stub)" if umlclass.is_stub else ""
        print(f"   - {umlclass.kind.value} {umlclass.name}{stub}")
        for attr in umlclass.attributes:
            print(f"       {attr}")
        for method in umlclass.methods:
            print(f"       {method}")

    print(f"\n🔗 {len(diagram.relationships)} relationship(s):")
    for rel in diagram.relationships:
        print(f"   - {rel}")


def generate(kind: str, source: str, as_json: bool = False, config=None):
    """
    Parse source and print the resulting diagram

    Args:
        kind: 'sql' or 'java'
        source: Input text
        as_json: Print a JSON dump instead of the summary
        config: Configuration class, defaults to get_config()

    Returns:
        The parsed diagram, or None when nothing was recognized
    """
    if kind == 'sql':
        diagram = SQLParser(config).parse_sql(source)
        empty = not diagram.entities
    else:
        diagram = JavaParser(config).parse_java_code(source)
        empty = not diagram.classes

    if empty:
        what = "CREATE TABLE statements" if kind == 'sql' else "class declarations"
        print(f"❌ No {what} found in the input")
        return None

    if as_json:
        print(json.dumps(diagram.to_dict(), indent=2, ensure_ascii=False))
    elif kind == 'sql':
        summarize_er(diagram)
    else:
        summarize_uml(diagram)
    return diagram


def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Convert SQL DDL to ER diagrams or Java classes to UML class diagrams"
    )
    parser.add_argument(
        "kind",
        choices=["sql", "java"],
        help="Input language"
    )
    parser.add_argument(
        "input",
        help="Source file path or '-' for stdin"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the diagram model as JSON"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)
    config = get_config()

    level = logging.DEBUG if args.verbose else config.LOG_LEVEL
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # Read source content
    if args.input == "-":
        source = sys.stdin.read()
    else:
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"❌ Error: File not found: {args.input}")
            sys.exit(1)
        source = input_path.read_text(encoding="utf-8")

    if generate(args.kind, source, args.json, config) is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
