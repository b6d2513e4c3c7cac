"""Monkey CLI: run .mk files or start an interactive session."""

from __future__ import annotations

import logging
import sys
from types import ModuleType
from typing import Optional

from .objects import VError
from .parse import parse
from .session import Session
from .tokens import tokenize

readline: Optional[ModuleType]
try:
    # Line editing for the REPL where the platform has it.
    import readline
except ImportError:
    readline = None

logger = logging.getLogger(__name__)

BANNER = "Monkey REPL! Type `exit` to exit."
PROMPT = ">> "
EXIT_KEYWORD = "exit"

MODE_EVAL = "eval"
MODE_PARSE = "parse"
MODE_TOKENS = "tokens"

USAGE: str = """\
monkey [OPTIONS] [FILE]

Run a Monkey program, or start the REPL when FILE is omitted.

Options:
  --parse      Print the parsed program instead of evaluating it
  --tokens     Print the token stream instead of evaluating it
  --verbose    Log debug output to stderr
  --help       Show this help message
"""


def _dump_tokens(source: str) -> None:
    for tok in tokenize(source):
        print(tok.type + " " + repr(tok.literal))


def _run_line(session: Session, line: str, mode: str) -> None:
    """Handle one REPL input line."""
    if mode == MODE_TOKENS:
        _dump_tokens(line)
        return
    if mode == MODE_PARSE:
        program, errors = parse(line)
        if errors:
            print("Error(s) in program!")
            for e in errors:
                print(e)
        else:
            print(str(program))
        return
    try:
        result = session.run(line)
    except RecursionError:
        print("ERROR: maximum recursion depth exceeded")
        return
    if result.errors:
        print("Error(s) in program!")
        for e in result.errors:
            print(e)
        return
    assert result.value is not None
    print(result.value.to_string())


def repl(session: Session, mode: str = MODE_EVAL) -> int:
    """Read lines until a blank line, `exit`, or end of input."""
    print(BANNER)
    logger.debug("repl started (mode=%s)", mode)
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            break
        if line.strip() == "" or line.strip() == EXIT_KEYWORD:
            break
        _run_line(session, line, mode)
    logger.debug("repl finished")
    return 0


def run_file(filepath: str, mode: str = MODE_EVAL) -> int:
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("monkey: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("monkey: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("monkey: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    if mode == MODE_TOKENS:
        _dump_tokens(source)
        return 0

    if mode == MODE_PARSE:
        program, errors = parse(source)
        if errors:
            _print_parse_errors(errors)
            return 1
        print(str(program))
        return 0

    try:
        result = Session().run(source)
    except RecursionError:
        print(
            "monkey: runtime error: maximum recursion depth exceeded", file=sys.stderr
        )
        return 1
    if result.errors:
        _print_parse_errors(result.errors)
        return 1
    if not result.ok:
        err = result.value
        assert isinstance(err, VError)
        print("monkey: runtime error: " + err.kind + ": " + err.message, file=sys.stderr)
        return 1
    return 0


def _print_parse_errors(errors: list[str]) -> None:
    for e in errors:
        print("monkey: parse error: " + e, file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    mode = MODE_EVAL
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--parse":
            mode = MODE_PARSE
            i += 1
        elif arg == "--tokens":
            mode = MODE_TOKENS
            i += 1
        elif arg == "--verbose":
            verbose = True
            i += 1
        elif arg.startswith("-"):
            print("monkey: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("monkey: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(levelname)s: %(message)s"
        )

    if filepath == "":
        return repl(Session(), mode)
    return run_file(filepath, mode)


if __name__ == "__main__":
    sys.exit(main())
