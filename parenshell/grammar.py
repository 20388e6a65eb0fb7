"""Recursive-descent parser producing the raw parse tree of the shell language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Union


class ParseError(ValueError):
    """Raised when the input is not valid syntax."""


class CharStream:
    """A character iterator with one character of lookahead."""

    def __init__(self, source: Iterable[str]) -> None:
        self._chars: Iterator[str] = iter(source)
        self._ahead: Optional[str] = None
        self._filled = False

    def peek(self) -> Optional[str]:
        """Return the next character without consuming it, or None at the end."""
        if not self._filled:
            self._ahead = next(self._chars, None)
            self._filled = True
        return self._ahead

    def next(self) -> Optional[str]:
        """Consume and return the next character, or None at the end."""
        char = self.peek()
        self._filled = False
        self._ahead = None
        return char

    def at_end(self) -> bool:
        """Whether the input is exhausted."""
        return self.peek() is None


@dataclass
class StringExpr:
    """A word; with dollar set it names a variable to read."""

    dollar: bool
    value: str


@dataclass
class CommandsExpr:
    """A parenthesised list of commands; with dollar set it is evaluated in place."""

    dollar: bool
    value: List[List[Union[StringExpr, "CommandsExpr"]]] = field(default_factory=list)


Expr = Union[StringExpr, CommandsExpr]
Command = List[Expr]
Commands = List[Command]

_BLANKS = " \t"
_WORD_ENDS = " \n)\t"


def _accept(stream: CharStream, char: str) -> bool:
    if stream.peek() == char:
        stream.next()
        return True
    return False


def _expect(stream: CharStream, char: str) -> None:
    if not _accept(stream, char):
        found = stream.peek()
        raise ParseError(f"expected {char!r}, found {'end of input' if found is None else repr(found)}")


def _skip_blanks(stream: CharStream) -> None:
    while (char := stream.peek()) is not None and char in _BLANKS:
        stream.next()


def _comment(stream: CharStream) -> None:
    while (char := stream.peek()) is not None and char != "\n":
        stream.next()
    _expect(stream, "\n")


def _quoted_string(stream: CharStream) -> str:
    chars = []
    while True:
        if _accept(stream, "'"):
            if _accept(stream, "'"):
                chars.append("'")
            else:
                return "".join(chars)
        else:
            char = stream.next()
            if char is None:
                raise ParseError("unclosed quoted string")
            chars.append(char)


def _string(stream: CharStream) -> str:
    if _accept(stream, "'"):
        return _quoted_string(stream)
    chars = []
    while (char := stream.peek()) is not None and char not in _WORD_ENDS:
        chars.append(char)
        stream.next()
    if not chars:
        raise ParseError("bad start of string")
    return "".join(chars)


def _expr(stream: CharStream) -> Expr:
    dollar = _accept(stream, "$")
    if _accept(stream, "("):
        return CommandsExpr(dollar, _commands(stream))
    return StringExpr(dollar, _string(stream))


def _commands(stream: CharStream) -> Commands:
    if _accept(stream, "\n"):
        return multiline_commands(stream)
    return _inline_command(stream)


def _inline_command(stream: CharStream) -> Commands:
    if _accept(stream, ")"):
        return []
    commands = [command(stream)]
    _expect(stream, ")")
    return commands


def file(stream: CharStream) -> Commands:
    """Parse a whole file: newline-terminated commands, blank lines and comments."""
    commands: Commands = []
    while True:
        _skip_blanks(stream)
        if stream.at_end():
            return commands
        if _accept(stream, "#"):
            _comment(stream)
        elif _accept(stream, "\n"):
            continue
        else:
            commands.append(command(stream))
            _expect(stream, "\n")


def multiline_commands(stream: CharStream) -> Commands:
    """Parse newline-terminated commands up to and including a closing parenthesis."""
    commands: Commands = []
    while True:
        _skip_blanks(stream)
        if _accept(stream, ")"):
            return commands
        if _accept(stream, "#"):
            _comment(stream)
        elif _accept(stream, "\n"):
            continue
        else:
            commands.append(command(stream))
            _expect(stream, "\n")


def shell(stream: CharStream) -> Command:
    """Parse the next command of an interactive session, skipping comments and blank lines."""
    while True:
        _skip_blanks(stream)
        if _accept(stream, "#"):
            _comment(stream)
        elif _accept(stream, "\n"):
            continue
        else:
            result = command(stream)
            _expect(stream, "\n")
            return result


def _multiline_command_part(stream: CharStream) -> Command:
    exprs: Command = []
    while True:
        _skip_blanks(stream)
        if _accept(stream, ";"):
            return exprs
        if _accept(stream, "#"):
            try:
                _comment(stream)
            except ParseError:
                pass
        elif _accept(stream, "\n"):
            continue
        else:
            exprs.append(_expr(stream))
            while _accept(stream, " "):
                exprs.append(_expr(stream))


def command(stream: CharStream) -> Command:
    """Parse space-separated expressions; ' \\' continues the command up to ';'."""
    result: Command = [_expr(stream)]
    while _accept(stream, " "):
        if _accept(stream, "\\"):
            result.extend(_multiline_command_part(stream))
        else:
            result.append(_expr(stream))
    return result