"""Command-line entry point: run a script file or an interactive session."""

from __future__ import annotations

import signal
import sys
from typing import Iterable, Iterator, List, Optional

from parenshell import grammar
from parenshell.interpreter import Env, print_error
from parenshell.syntax import command_from_grammar, parse_file
from parenshell.values import EvalError, Value


def run_file(text: str) -> Optional[Value]:
    """Run a script in a fresh environment; return the last value, or None on failure."""
    env = Env()
    try:
        commands = parse_file(text)
    except grammar.ParseError:
        print("syntax error")
        return None
    result: Optional[Value] = None
    for cmd in commands:
        try:
            result = env.eval_cmd(cmd)
        except EvalError as err:
            print_error(err.messages)
            return None
    return result


def _strip_line_end(line: str) -> str:
    return line.removesuffix("\n").removesuffix("\r")


def _chars(lines: Iterator[str]) -> Iterator[str]:
    for line in lines:
        yield from _strip_line_end(line)
        yield "\n"


def repl(lines: Iterable[str]) -> None:
    """Read, evaluate and print commands from the given lines until they run out."""
    source = iter(lines)
    stream = grammar.CharStream(_chars(source))
    env = Env()
    while True:
        print("$ ", end="", flush=True)
        if stream.at_end():
            return
        try:
            parsed = grammar.shell(stream)
        except grammar.ParseError:
            print("error: syntax error")
            stream = grammar.CharStream(_chars(source))
            continue
        try:
            value = env.eval_cmd(command_from_grammar(parsed))
        except EvalError as err:
            print_error(err.messages)
        else:
            env.print_value(value)


def main(argv: Optional[List[str]] = None) -> None:
    """Run the script named by the first argument, or an interactive session."""
    args = sys.argv[1:] if argv is None else list(argv)
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)
    if args:
        try:
            with open(args[0], encoding="utf-8") as handle:
                text = handle.read()
        except (OSError, UnicodeDecodeError):
            print("Failed to read path")
            return
        run_file(text)
    else:
        repl(sys.stdin)


if __name__ == "__main__":
    main()