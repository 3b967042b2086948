#!/usr/bin/env python3
"""Command-line interface for Surimi."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

from .at_rule import stringify_at_rule, tokenize_at_rule
from .compiler import CompileOptions, CompilerError, compile_file, watch
from .selector import SelectorError, stringify_selector, tokenize_selector
from .stylesheet import StyleError

if TYPE_CHECKING:
    from .compiler import CompileResult
    from .tokens import Token

logger = logging.getLogger("surimi")


def _get_version() -> str:
    try:
        return version("surimi")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="surimi",
        description="Tokenize CSS selectors and at-rule preludes, or compile Python style modules to CSS.",
        epilog=(
            "Examples:\n"
            "  surimi tokenize selector 'ul.items > li:first-child'\n"
            "  surimi tokenize at-rule '@media (min-width: 768px)' --json\n"
            "  surimi normalize selector 'a>b  ,c'\n"
            "  surimi compile styles.py -o dist/styles.css\n"
            "  surimi watch styles.py -o dist/styles.css\n"
            "\n"
            "If you don't have the 'surimi' command available, use:\n"
            "  python -m surimi ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"surimi {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command")

    tokenize = commands.add_parser("tokenize", help="Print the tokens of a selector or at-rule prelude")
    tokenize.add_argument("grammar", choices=["selector", "at-rule"])
    tokenize.add_argument("text")
    tokenize.add_argument(
        "--json",
        action="store_true",
        help="Output tokens as a JSON array",
    )

    normalize = commands.add_parser("normalize", help="Tokenize then stringify a selector or at-rule prelude")
    normalize.add_argument("grammar", choices=["selector", "at-rule"])
    normalize.add_argument("text")

    compile_ = commands.add_parser("compile", help="Compile a style module to CSS")
    compile_.add_argument("path", help="Python style module")
    compile_.add_argument("-o", "--output", help="Write CSS to this file instead of stdout")
    compile_.add_argument(
        "--include",
        action="append",
        default=[],
        help="Only report dependencies matching this glob (repeatable)",
    )
    compile_.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Ignore dependencies matching this glob (repeatable)",
    )

    watch_ = commands.add_parser("watch", help="Recompile a style module whenever it changes")
    watch_.add_argument("path", help="Python style module")
    watch_.add_argument("-o", "--output", help="Write CSS to this file instead of stdout")
    watch_.add_argument(
        "--interval",
        type=float,
        default=0.5,
        help="Seconds between polls (default: 0.5)",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _tokenize(grammar: str, text: str) -> list[Token]:
    if grammar == "selector":
        return tokenize_selector(text)
    return tokenize_at_rule(text)


def _write_css(css: str, output: str | None) -> None:
    if output is None:
        sys.stdout.write(css)
        sys.stdout.write("\n")
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(css + "\n")


def _compile_options(args: argparse.Namespace) -> CompileOptions:
    options = CompileOptions(args.path)
    if getattr(args, "include", None):
        options.include = tuple(args.include)
    if getattr(args, "exclude", None):
        options.exclude = options.exclude + tuple(args.exclude)
    return options


def main(argv: list[str] | None = None) -> NoReturn | None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command in ("tokenize", "normalize"):
        try:
            tokens = _tokenize(args.grammar, args.text)
        except SelectorError as e:
            print(str(e), file=sys.stderr)
            raise SystemExit(2) from e

        if args.command == "normalize":
            stringify = stringify_selector if args.grammar == "selector" else stringify_at_rule
            sys.stdout.write(stringify(tokens))
            sys.stdout.write("\n")
            return None

        if args.json:
            sys.stdout.write(json.dumps([token.to_dict() for token in tokens], indent=2))
            sys.stdout.write("\n")
            return None

        for token in tokens:
            sys.stdout.write(f"{token.kind:<15} {token.content!r}\n")
        return None

    options = _compile_options(args)

    if args.command == "compile":
        try:
            result = compile_file(options)
        except CompilerError as e:
            print(str(e), file=sys.stderr)
            # Invalid selectors or declarations inside the module keep their own code
            code = 2 if isinstance(e.__cause__, (SelectorError, StyleError)) else 3
            raise SystemExit(code) from e
        _write_css(result.css, args.output)
        logger.info("Built %s in %.3fs", args.path, result.duration)
        return None

    def on_change(result: CompileResult) -> None:
        _write_css(result.css, args.output)
        logger.info("Rebuilt %s in %.3fs", args.path, result.duration)

    def on_error(error: CompilerError) -> None:
        print(str(error), file=sys.stderr)

    try:
        watch(options, on_change, on_error, interval=args.interval)
    except KeyboardInterrupt:
        return None
    return None


if __name__ == "__main__":
    main()
