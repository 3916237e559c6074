"""CLI entry point for the Val interpreter.

Usage:
    python -m val [-v...] [-p DIGITS] [-r MODE] [-d DIGITS] <program_file>
    python -m val [-v...] --emit-ast <program_file>
    python -m val [options]

Options:
  -v                  Increase debug verbosity (can be repeated)
  -p, --precision     Significant decimal digits kept by arithmetic
  -r, --rounding-mode none, up, down, to-zero, from-zero, to-even, to-odd
  -d, --digits        Fixed number of fractional digits when printing numbers
  --emit-ast          Print the program's syntax tree as JSON instead of running it

With a program file the program is parsed, analyzed and evaluated, and its
final value is printed unless it is null. Every syntax or analysis error is
reported before anything runs; any error exits with status 1.

Without a program file an interactive prompt evaluates one line at a time,
each in a fresh environment, until end of input.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import sys
from pathlib import Path
from typing import Any

from .ast_json import dumps
from .config import Config
from .debug import DebugLog
from .diagnostics import render, render_all
from .errors import AnalysisErrors, EvaluationError, ParseErrors
from .evaluator import run_program
from .numeric import RoundingMode, format_number
from .parser import parse
from .values import NULL, to_string


def _rounding_mode(text: str) -> RoundingMode:
    try:
        return RoundingMode.from_str(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='val', description="Val language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('-p', '--precision', type=_positive_int, default=Config.precision,
                        help='significant decimal digits kept by arithmetic')
    parser.add_argument('-r', '--rounding-mode', type=_rounding_mode, default=Config.rounding_mode,
                        help='rounding mode used by arithmetic')
    parser.add_argument('-d', '--digits', type=_non_negative_int, default=None,
                        help='fractional digits shown when printing numbers')
    parser.add_argument('--emit-ast', action='store_true', help='print the syntax tree as JSON and exit')
    parser.add_argument('program', nargs='?', help='Val program file to execute')
    return parser


def display(value: Any, config: Config) -> str:
    return to_string(value, lambda number: format_number(number, config.digits, config.rounding_mode))


def execute(source_id: str, source: str, config: Config, debug: DebugLog) -> bool:
    """Run one source text, printing its value or its diagnostics."""
    try:
        result = run_program(source, config, debug)
    except (ParseErrors, AnalysisErrors) as e:
        print(render_all(source_id, source, e.errors), file=sys.stderr)
        return False
    except EvaluationError as e:
        print(render(source_id, source, e), file=sys.stderr)
        return False
    if result is not NULL:
        print(display(result, config))
    return True


def repl(config: Config, debug: DebugLog):
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            return
        if not line.strip():
            continue
        execute('<stdin>', line, config, debug)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = Config(precision=args.precision, rounding_mode=args.rounding_mode, digits=args.digits)

    if args.emit_ast and not args.program:
        parser.error('--emit-ast needs a program file')

    debug = DebugLog(args.v)
    try:
        if not args.program:
            repl(config, debug)
            return

        program_file = Path(args.program)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()

        if args.emit_ast:
            try:
                print(dumps(parse(source)))
            except ParseErrors as e:
                print(render_all(str(program_file), source, e.errors), file=sys.stderr)
                sys.exit(1)
            return

        if not execute(str(program_file), source, config, debug):
            sys.exit(1)
    finally:
        debug.close()


if __name__ == '__main__':
    main()
