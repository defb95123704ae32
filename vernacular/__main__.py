"""CLI entry point for the Vernacular runtime.

Usage:
    python -m vernacular [-v|-vv] [--no-trace] [program_file]

Options:
  -v            Increase debug verbosity (can be repeated)
  --no-trace    Do not print tokens, AST and bytecode before running

With a program file the whole file runs as one fragment. Without one an
interactive session starts: end a line with a backslash to continue it on
the next line, `.load` runs a file and `.exit` quits. Debug information is
written to `debug.txt` in the current directory when verbosity is greater
than zero.
"""

import argparse
import sys

import colorama
from colorama import Fore as fg

from .errors import VernacularError
from .session import Session


PROMPT = fg.LIGHTWHITE_EX + '> ' + fg.RESET
PROMPT_CONTINUED = fg.LIGHTWHITE_EX + '... ' + fg.RESET


def report(error: VernacularError) -> None:
    print(f"{fg.RED}{error.kind}:{fg.RESET} {error.err.message}", file=sys.stderr)


def repl(session: Session) -> None:
    print(f"{fg.LIGHTWHITE_EX}Vernacular Runtime{fg.RESET} v0.1.0")
    print(f"'{fg.YELLOW}.exit{fg.RESET}' is quit, '{fg.YELLOW}.load{fg.RESET}' is load, or enter code directly.")
    lines = []
    while True:
        try:
            line = input(PROMPT_CONTINUED if lines else PROMPT).rstrip()
        except EOFError:
            break
        if not lines and line == '.exit':
            break
        if not lines and line == '.load':
            file_path = input('Enter file path: ').strip()
            try:
                session.run_file(file_path)
            except VernacularError as e:
                report(e)
            continue
        lines.append(line)
        if line.endswith('\\'):
            continue
        text = '\n'.join(lines)
        lines = []
        if not text.strip():
            continue
        try:
            session.run_fragment(text)
        except VernacularError as e:
            report(e)
    print('Goodbye!')


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Vernacular language runtime")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--no-trace', action='store_true', help='do not print tokens, AST and bytecode')
    parser.add_argument('program', nargs='?', help='Vernacular program file (.vrn) to execute')
    args = parser.parse_args(argv)

    colorama.just_fix_windows_console()
    session = Session(trace=not args.no_trace, debug_level=args.v)
    try:
        if args.program:
            try:
                session.run_file(args.program)
            except VernacularError as e:
                report(e)
                sys.exit(1)
        else:
            repl(session)
    finally:
        session.close()


if __name__ == '__main__':
    main()
