"""Runtime values of the shell language, variable scopes and value formatting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Union

from parenshell.syntax import Closure, Commands, Expr, Str

_INDENT = "    "


class EvalError(Exception):
    """Raised when evaluation fails; carries one or more message lines."""

    def __init__(self, *messages: str) -> None:
        super().__init__(*messages)
        self.messages = list(messages)

    def __str__(self) -> str:
        return "\n".join(self.messages)


@dataclass(frozen=True, eq=False)
class Builtin:
    """A native function that receives its arguments already evaluated."""

    name: str
    fn: Callable[[Any, Sequence["Value"]], "Value"]

    def __call__(self, env: Any, args: Sequence["Value"]) -> "Value":
        return self.fn(env, args)


@dataclass(frozen=True, eq=False)
class LazyBuiltin:
    """A native function that receives its arguments unevaluated."""

    name: str
    fn: Callable[[Any, Sequence[Expr]], "Value"]

    def __call__(self, env: Any, exprs: Sequence[Expr]) -> "Value":
        return self.fn(env, exprs)


@dataclass(eq=False)
class Function:
    """A closure: commands together with the scope they were written in."""

    code: Commands
    frame: "Frame"


@dataclass(frozen=True)
class Thrown:
    """A thrown value travelling up until something catches it."""

    value: "Value"


Value = Union[str, Dict[str, Any], Builtin, LazyBuiltin, Function, Thrown]


@dataclass(eq=False)
class Frame:
    """One scope of variables, linked to the scope that encloses it."""

    variables: Dict[str, Value] = field(default_factory=dict)
    parent: Optional["Frame"] = None

    def _chain(self) -> Iterator["Frame"]:
        frame: Optional[Frame] = self
        while frame is not None:
            yield frame
            frame = frame.parent

    def lookup(self, name: str) -> Value:
        """Return the value of the nearest variable called name."""
        for frame in self._chain():
            if name in frame.variables:
                return frame.variables[name]
        raise KeyError(name)

    def update(self, name: str, value: Value) -> None:
        """Assign to the nearest existing variable called name."""
        for frame in self._chain():
            if name in frame.variables:
                frame.variables[name] = value
                return
        raise KeyError(name)

    def forget(self, name: str) -> None:
        """Remove the nearest variable called name."""
        for frame in self._chain():
            if name in frame.variables:
                del frame.variables[name]
                return
        raise KeyError(name)

    def visible(self) -> Dict[str, Value]:
        """Every variable in reach, inner scopes hiding outer ones."""
        result: Dict[str, Value] = {}
        for frame in self._chain():
            for name, value in frame.variables.items():
                result.setdefault(name, value)
        return result


def _format(value: Value, depth: int, in_map: bool) -> str:
    if isinstance(value, str):
        return Str(value).pretty(depth)
    if isinstance(value, Builtin):
        return "<built-in fn>"
    if isinstance(value, LazyBuiltin):
        return "<lazy fn>"
    if isinstance(value, Function):
        return f"<closure: {Closure(value.code).pretty(depth)}>"
    if isinstance(value, Thrown):
        return f"<exception: {_format(value.value, depth, in_map)}>"
    if isinstance(value, dict):
        parts = [] if in_map else [_INDENT * depth]
        parts.append("{\n")
        for key in sorted(value):
            item = _format(value[key], depth + 1, True)
            parts.append(f"{_INDENT * (depth + 1)}{key}: {item},\n")
        parts.append(_INDENT * depth + "}")
        return "".join(parts)
    raise TypeError(f"not a shell value: {value!r}")


def format_value(value: Value) -> str:
    """Render a value the way the shell displays it, without a trailing newline."""
    return _format(value, 0, False)