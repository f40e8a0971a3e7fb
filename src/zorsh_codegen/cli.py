"""Command-line entry point for generating zorsh schemas."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from zorsh_codegen.config import GeneratorConfig
from zorsh_codegen.emitter import DIALECTS
from zorsh_codegen.exceptions import CodegenError
from zorsh_codegen.generator import ZorshGenerator, write_output
from zorsh_codegen.loader import load_schema_graph
from zorsh_codegen.logging_utils import setup_logging


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Generate zorsh schema source from a Borsh schema container"
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Path to the schema container (.bin) or JSON schema description (.json)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write generated code to this file (default: stdout)",
    )
    parser.add_argument(
        "-d", "--dialect",
        choices=sorted(DIALECTS),
        default=None,
        help="Output dialect (default: $ZORSH_CODEGEN_DIALECT or 'plain')",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: $ZORSH_CODEGEN_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Shorthand for --log-level INFO",
    )

    args = parser.parse_args(argv)

    log_level = args.log_level or ("INFO" if args.verbose else None)
    try:
        config = GeneratorConfig.from_env(dialect=args.dialect, log_level=log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    setup_logging(config.log_level)

    try:
        graph = load_schema_graph(args.input)
        code = ZorshGenerator(config).generate(graph)
    except (FileNotFoundError, CodegenError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output is None:
        sys.stdout.write(code)
    else:
        try:
            write_output(args.output, code)
        except OSError as e:
            print(f"Error: Cannot write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"Wrote {args.output}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
