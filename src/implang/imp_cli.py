"""
IMP CLI Entrypoint.

Parses IMP source from a `.imp` file or an inline string and prints the
result as JSON: the syntax tree, the symbol table, and any tokens the parser
did not consume.

Example usage:
    implang program.imp
    implang -s "x:=1+2*3"
    implang -s "WHILE x<=10 DO x:=x+1 END" --strict -o out.json
    implang program.imp --fuel 200 --verbose

Functions:
    run_imp(source: str, is_string: bool = False, fuel: Optional[int] = None,
            strict: bool = False, out: Optional[str] = None) -> int:
        Runs the pipeline (tokenize → symbol table → parse → JSON) and returns
        the process exit status.

    main() -> None:
        Parses CLI arguments and invokes `run_imp`.
"""

import argparse
import json
import logging
import sys
from typing import Any

from implang.imp_combinators import ParseFailure
from implang.imp_lexer import tokenize
from implang.imp_parser import (
    DEFAULT_FUEL,
    FUEL_PER_TOKEN,
    parse_tokens,
    recursion_headroom,
)
from implang.imp_symbols import build_symtable

logger = logging.getLogger(__name__)


def run_imp(
    source: str,
    is_string: bool = False,
    fuel: int | None = None,
    strict: bool = False,
    out: str | None = None,
) -> int:
    """
    Run the IMP toolchain on a file or string and report the result.

    Args:
        source (str): IMP source code or path to a `.imp` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        fuel (int | None): Recursion budget handed to the parser. If None, it
            scales with the number of tokens.
        strict (bool): If True, leftover tokens after the program are an error.
        out (str | None): Optional path to write the JSON output. If None, prints to stdout.

    Returns:
        int: 0 on success, 1 on a parse failure.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.imp'.
    """
    if not is_string and not source.endswith(".imp"):
        raise ValueError("Only .imp files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    tokens = tokenize(source)
    symtable = build_symtable(tokens, 0)
    result = parse_tokens(tokens, symtable, fuel)

    if isinstance(result, ParseFailure):
        print(f"error: {result.message}", file=sys.stderr)
        return 1
    if strict and not result.rest.at_end():
        print(
            f"error: Trailing tokens remaining: {result.remaining[0]}",
            file=sys.stderr,
        )
        return 1

    # Long sequences nest one level per command, and serializing recurses.
    with recursion_headroom(len(tokens)):
        report: dict[str, Any] = {
            "ast": result.value.to_dict(),
            "symbols": dict(symtable.items()),
            "remaining": result.remaining,
        }
        text = json.dumps(report, indent=2)

    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Wrote parse result to %s", out)
    else:
        print(text)
    return 0


def main() -> None:
    """
    Entry point for the IMP CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--fuel`: Recursion budget for the parser (default scales with input).
        - `--strict`: Fail if tokens remain after the program.
        - `-o`, `--out`: Write the JSON result to a file.
        - `--verbose`: Log tokenizer and parser details.
    """
    parser = argparse.ArgumentParser(prog="implang")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--fuel",
        type=int,
        default=None,
        help=(
            "Recursion budget (default: the larger of "
            f"{DEFAULT_FUEL} and {FUEL_PER_TOKEN} per token)"
        ),
    )
    parser.add_argument(
        "--strict", action="store_true", help="Treat trailing tokens as an error"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    sys.exit(
        run_imp(
            source=args.source,
            is_string=args.string,
            fuel=args.fuel,
            strict=args.strict,
            out=args.out,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
