"""Command-line interface for loxexpr."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn, TextIO

from loxexpr.errors import Diagnostics

# Exit codes (BSD sysexits)
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66

OUTPUT_FORMATS = ("prefix", "postfix", "both")
CONFIG_NAME = "loxexpr.toml"


class UsageError(Exception):
    """Invalid command-line invocation or configuration."""


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    script: Path | None
    output_format: str
    show_tokens: bool
    debug: bool


class _ArgumentParser(argparse.ArgumentParser):
    # Report usage errors to main() instead of exiting with status 2
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = _ArgumentParser(
        prog="loxexpr",
        description="Scan and parse Lox expressions, printing the syntax tree",
    )
    p.add_argument("script", nargs="?", help="Source file (default: interactive prompt)")
    p.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Tree output format (default: prefix)",
    )
    p.add_argument(
        "--tokens",
        action="store_true",
        default=None,
        help="Print scanned tokens before the tree",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise UsageError(f"invalid config file {path}: {exc}") from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    script = Path(args.script) if args.script else None
    search_dir = script.parent if script is not None else Path(".")
    if not search_dir.parts:
        search_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)

    output_format = "prefix"
    show_tokens = False
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in OUTPUT_FORMATS:
                raise UsageError(
                    f"invalid output format in config: {cfg_format!r} "
                    f"(expected one of {', '.join(OUTPUT_FORMATS)})"
                )
            output_format = cfg_format
        cfg_tokens = cfg_output.get("tokens")
        if isinstance(cfg_tokens, bool):
            show_tokens = cfg_tokens

    if args.format is not None:
        output_format = args.format
    if args.tokens is not None:
        show_tokens = args.tokens

    return CliOptions(
        script=script,
        output_format=output_format,
        show_tokens=show_tokens,
        debug=args.debug,
    )


def run(source: str, options: CliOptions, filename: str = "<stdin>") -> Diagnostics:
    """Scan, parse, and print one source text. Returns the collected diagnostics."""
    from loxexpr.debug import dump_ast
    from loxexpr.parser import parse_tokens
    from loxexpr.printer import print_postfix, print_prefix
    from loxexpr.scanner import scan

    diagnostics = Diagnostics()
    tokens = scan(source, diagnostics)

    if options.show_tokens:
        for token in tokens:
            print(token)

    result = parse_tokens(tokens, diagnostics)

    for diagnostic in diagnostics:
        if options.script is not None:
            print(diagnostic.format(source, filename), file=sys.stderr)
        else:
            print(diagnostic, file=sys.stderr)

    expr = result.expression
    if expr is None:
        return diagnostics

    if options.debug:
        dump_ast(expr, file=sys.stderr)

    if options.output_format in ("prefix", "both"):
        print(print_prefix(expr))
    if options.output_format in ("postfix", "both"):
        print(print_postfix(expr))

    return diagnostics


def run_file(options: CliOptions) -> int:
    """Run a whole script file. Returns 65 if any error was reported."""
    assert options.script is not None
    try:
        source = options.script.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.script}: {exc}", file=sys.stderr)
        return EX_NOINPUT

    diagnostics = run(source, options, str(options.script))
    return EX_DATAERR if diagnostics.had_error else EX_OK


def run_prompt(options: CliOptions, stdin: TextIO | None = None) -> int:
    """Read-parse-print loop; errors never end the session."""
    if stdin is None:
        stdin = sys.stdin
    while True:
        sys.stdout.write("> ")
        sys.stdout.flush()
        line = stdin.readline()
        if not line:
            break
        if line.strip():
            run(line, options)
    sys.stdout.write("\n")
    return EX_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/64/65/66). Does not call sys.exit()."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        options = resolve_options(args)
    except UsageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        print(parser.format_usage().rstrip(), file=sys.stderr)
        return EX_USAGE

    if options.script is None:
        return run_prompt(options)
    return run_file(options)


def main_entry() -> None:
    sys.exit(main())
