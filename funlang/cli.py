"""
Command line front-end: parse an expression (or a type) and print its tree.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .lexer import LexerError, tokenize_string
from .parser import Parser, ParseError, DEFAULT_MAX_DEPTH, format_ast, ast_to_dict

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="funlang-parse",
        description="Parse a funlang expression and print its syntax tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    funlang-parse '1 + 2 * 3'                       # (+ 1 (* 2 3))
    funlang-parse --type 'int -> int -> bool'       # int -> int -> bool
    funlang-parse --json -f program.fun             # JSON tree of a file
    echo 'f x + 1' | funlang-parse                  # read from stdin
        """
    )

    parser.add_argument('expression', nargs='?',
                        help='Source text to parse (default: read stdin)')
    parser.add_argument('-f', '--file',
                        help='Read source text from FILE')
    parser.add_argument('--type', action='store_true',
                        help='Parse the input as a type annotation')
    parser.add_argument('--tokens', action='store_true',
                        help='Print the token stream instead of the tree')
    parser.add_argument('--json', action='store_true',
                        help='Print the tree as JSON')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        help=f'Maximum nesting depth (default: {DEFAULT_MAX_DEPTH})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def _read_source(args: argparse.Namespace, arg_parser: argparse.ArgumentParser):
    """Return (source, filename) from the positional argument, --file, or stdin."""
    if args.expression is not None and args.file:
        arg_parser.error("give either an expression or --file, not both")
    if args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            return f.read(), args.file
    if args.expression is not None:
        return args.expression, "<argument>"
    return sys.stdin.read(), "<stdin>"


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for funlang-parse."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.max_depth < 1:
        arg_parser.error("--max-depth must be at least 1")

    try:
        source, filename = _read_source(args, arg_parser)
    except OSError as e:
        print(f"error: cannot read {args.file}: {e.strerror}", file=sys.stderr)
        return 1

    try:
        tokens = tokenize_string(source, filename)
        if args.tokens:
            for token in tokens:
                print(f"{token.location}\t{token}")
            return 0

        parser = Parser(tokens, max_depth=args.max_depth)
        tree = parser.parse_type() if args.type else parser.parse()
    except (LexerError, ParseError) as e:
        logger.debug("Rejected %s", filename)
        print(str(e), file=sys.stderr, end="")
        return 1

    if args.json:
        try:
            output = json.dumps(ast_to_dict(tree), indent=2, ensure_ascii=False)
        except RecursionError:
            # The json encoder recurses once per nesting level of the dict
            print(f"error: syntax tree of {filename} is too deep to encode as JSON",
                  file=sys.stderr)
            return 1
    else:
        output = format_ast(tree)
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
