"""Evaluation of commands, blocks and closures against a chain of scopes."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Sequence

from parenshell.builtins import eager_builtins, lazy_builtins
from parenshell.syntax import Block, Closure, Command, Commands, Expr, Str
from parenshell.values import (
    Builtin,
    EvalError,
    Frame,
    Function,
    LazyBuiltin,
    Thrown,
    Value,
    format_value,
)


def print_error(messages: Iterable[str]) -> None:
    """Print an error report: 'error: ' followed by one message per line."""
    print("error: ", end="")
    for message in messages:
        print(message)


class Env:
    """The interpreter state: the scope currently in effect."""

    def __init__(self) -> None:
        variables: Dict[str, Value] = {}
        variables.update(eager_builtins())
        variables.update(lazy_builtins())
        self.globals = Frame(variables)
        self.frame = self.globals

    def lookup(self, name: str) -> Value:
        """Return the value of the nearest variable called name."""
        return self.frame.lookup(name)

    def update(self, name: str, value: Value) -> None:
        """Assign to the nearest existing variable called name."""
        self.frame.update(name, value)

    def forget(self, name: str) -> None:
        """Remove the nearest variable called name."""
        self.frame.forget(name)

    def declare(self, name: str, value: Value) -> None:
        """Create or overwrite a variable in the current scope."""
        self.frame.variables[name] = value

    @contextmanager
    def _scope(self, frame: Frame) -> Iterator[Frame]:
        saved = self.frame
        self.frame = frame
        try:
            yield frame
        finally:
            self.frame = saved

    def apply(self, head: Value, args: Sequence[Value]) -> Value:
        """Call a value with already evaluated arguments."""
        args = list(args)
        if isinstance(head, dict):
            return self._apply_map(head, args)
        if isinstance(head, str):
            raise EvalError("cmd's fn must not be a string")
        if isinstance(head, Builtin):
            return head(self, args)
        if isinstance(head, Function):
            return self._call(head, args)
        if isinstance(head, Thrown):
            return head
        if isinstance(head, LazyBuiltin):
            raise EvalError("lazy built-ins cannot be applied to values")
        raise TypeError(f"not a shell value: {head!r}")

    @staticmethod
    def _key(rest: List[Value], usage: str) -> str:
        if len(rest) != 1:
            raise EvalError(usage)
        key = rest[0]
        if not isinstance(key, str):
            raise EvalError("map del <key: string>")
        return key

    def _apply_map(self, mapping: Dict[str, Value], args: List[Value]) -> Value:
        if not args:
            raise EvalError("map: <command> ...")
        command, *rest = args
        if not isinstance(command, str):
            raise EvalError("map: <command: string> ...")
        if command == "keys":
            return {str(i): key for i, key in enumerate(sorted(mapping))}
        if command == "values":
            return {str(i): mapping[key] for i, key in enumerate(sorted(mapping))}
        if command == "get":
            key = self._key(rest, "map get <key>")
            if key not in mapping:
                raise EvalError("map get: key not found")
            return mapping[key]
        if command == "del":
            key = self._key(rest, "map del <key>")
            mapping.pop(key, None)
            return "ok"
        if command == "has":
            key = self._key(rest, "map has <key>")
            return "true" if key in mapping else "false"
        if command == "set":
            if len(rest) != 2:
                raise EvalError("map set <key> <value>")
            key, value = rest
            if not isinstance(key, str):
                raise EvalError("map del <key: string>")
            mapping[key] = value
            return "ok"
        raise EvalError("map: unknown command")

    def _call(self, function: Function, args: List[Value]) -> Value:
        variables: Dict[str, Value] = {"#": str(len(args))}
        variables.update((str(i), arg) for i, arg in enumerate(args, 1))
        with self._scope(Frame(variables, function.frame)):
            return self._run_block(function.code)

    def _run_block(self, commands: Commands) -> Value:
        result: Value = "ok"
        with self._scope(Frame(parent=self.frame)):
            for cmd in commands:
                result = self.eval_cmd(cmd)
                if isinstance(result, Thrown):
                    return result
        return result

    def eval_cmd(self, cmd: Command) -> Value:
        """Evaluate one command: look up or evaluate its head, then call it."""
        exprs = tuple(cmd)
        if not exprs:
            raise ValueError("empty command")
        head_expr, *tail = exprs
        if isinstance(head_expr, Str):
            try:
                head = self.lookup(head_expr.value)
            except KeyError:
                raise EvalError("lookup failed") from None
        else:
            head = self.eval_expr(head_expr)
        if isinstance(head, LazyBuiltin):
            return head(self, tail)
        values: List[Value] = []
        for expr in tail:
            value = self.eval_expr(expr)
            if isinstance(value, Thrown):
                return value
            values.append(value)
        return self.apply(head, values)

    def eval_expr(self, expr: Expr) -> Value:
        """Evaluate an expression to a value."""
        if isinstance(expr, Str):
            return expr.value
        if isinstance(expr, Closure):
            return Function(expr.commands, self.frame)
        if isinstance(expr, Block):
            return self._run_block(expr.commands)
        raise TypeError(f"not an expression: {expr!r}")

    def print_value(self, value: Value) -> None:
        """Print a value the way the shell displays it, followed by a newline."""
        print(format_value(value))