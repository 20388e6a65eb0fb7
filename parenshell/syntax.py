"""The syntax tree the interpreter evaluates, built from the parse tree, and its printer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple, Union

from parenshell import grammar

_INDENT = "    "


@dataclass(frozen=True)
class Str:
    """A literal string."""

    value: str

    def pretty(self, depth: int = 0) -> str:
        """Render as a quoted string that parses back to the same value."""
        return "'" + self.value.replace("'", "''") + "'"


def _pretty_commands(prefix: str, commands: "Commands", depth: int) -> str:
    depth += 1
    body = commands.commands
    if not body:
        inner = ""
    elif len(body) == 1:
        inner = body[0].pretty(depth)
    else:
        lines = "".join("\n" + _INDENT * depth + c.pretty(depth) for c in body)
        inner = lines + "\n" + _INDENT * (depth - 1)
    return f"{prefix}({inner})"


@dataclass(frozen=True)
class Closure:
    """Commands captured with their scope: written (...)."""

    commands: Commands

    def pretty(self, depth: int = 0) -> str:
        """Render as source text."""
        return _pretty_commands("", self.commands, depth)


@dataclass(frozen=True)
class Block:
    """Commands evaluated in place in a new scope: written $(...)."""

    commands: Commands

    def pretty(self, depth: int = 0) -> str:
        """Render as source text."""
        return _pretty_commands("$", self.commands, depth)


Expr = Union[Str, Closure, Block]


@dataclass(frozen=True)
class Command:
    """A head expression followed by its arguments."""

    exprs: Tuple[Expr, ...]

    def __iter__(self) -> Iterator[Expr]:
        return iter(self.exprs)

    def __len__(self) -> int:
        return len(self.exprs)

    def pretty(self, depth: int = 0) -> str:
        """Render as source text."""
        return " ".join(e.pretty(depth) for e in self.exprs)

    def __str__(self) -> str:
        return self.pretty(0)


@dataclass(frozen=True)
class Commands:
    """A sequence of commands."""

    commands: Tuple[Command, ...]

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)


def expr_from_grammar(g: grammar.Expr) -> Expr:
    """Convert a parse-tree expression; $name becomes $(get name)."""
    if isinstance(g, grammar.CommandsExpr):
        commands = commands_from_grammar(g.value)
        return Block(commands) if g.dollar else Closure(commands)
    if g.dollar:
        return Block(Commands((Command((Str("get"), Str(g.value))),)))
    return Str(g.value)


def command_from_grammar(g: grammar.Command) -> Command:
    """Convert a parse-tree command."""
    return Command(tuple(expr_from_grammar(e) for e in g))


def commands_from_grammar(g: grammar.Commands) -> Commands:
    """Convert a parse-tree command list."""
    return Commands(tuple(command_from_grammar(c) for c in g))


def parse_command(text: str) -> Command:
    """Parse a single command from text."""
    return command_from_grammar(grammar.command(grammar.CharStream(text)))


def parse_file(text: str) -> Commands:
    """Parse a whole file from text."""
    return commands_from_grammar(grammar.file(grammar.CharStream(text)))