"""The built-in functions of the shell language."""

from __future__ import annotations

import re
import subprocess
from typing import Any, Dict, Sequence

from parenshell.syntax import Expr
from parenshell.values import Builtin, EvalError, LazyBuiltin, Thrown, Value

_INT = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_MISSING = object()
_FAILURE = ("fail",)


def _parse_int(text: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(text)
    number = int(text)
    if not _INT_MIN <= number <= _INT_MAX:
        raise ValueError(text)
    return number


def _one(args: Sequence[Any], usage: str) -> Any:
    if len(args) != 1:
        raise EvalError(usage)
    return args[0]


def _two(args: Sequence[Any], usage: str) -> tuple:
    if len(args) != 2:
        raise EvalError(usage)
    return args[0], args[1]


def _text(value: Value, usage: str) -> str:
    if not isinstance(value, str):
        raise EvalError(usage)
    return value


def _or(env: Any, args: Sequence[Value]) -> Value:
    for arg in args:
        flag = _text(arg, "or <string>...")
        if flag == "true":
            return "true"
        if flag != "false":
            raise EvalError("or <value: true | false>...")
    return "false"


def _and(env: Any, args: Sequence[Value]) -> Value:
    for arg in args:
        flag = _text(arg, "and <string>...")
        if flag == "false":
            return "false"
        if flag != "true":
            raise EvalError("and <value: true | false>...")
    return "true"


def _compare(op: str, args: Sequence[Value]) -> tuple:
    a, b = _two(args, f"{op} <a> <b>")
    if not (isinstance(a, str) and isinstance(b, str)):
        raise EvalError(f"{op} <a: string> <b: string>")
    try:
        return _parse_int(a), _parse_int(b)
    except ValueError:
        raise EvalError(f"{op} <a: number> <b: number>") from None


def _more(env: Any, args: Sequence[Value]) -> Value:
    a, b = _compare(">", args)
    return "true" if a > b else "false"


def _less(env: Any, args: Sequence[Value]) -> Value:
    a, b = _compare("<", args)
    return "true" if a < b else "false"


def _vars(env: Any, args: Sequence[Value]) -> Value:
    return env.frame.visible()


def _fail(env: Any, args: Sequence[Value]) -> Value:
    """Always reports failure; the arguments are ignored."""
    messages = list(_FAILURE)
    raise EvalError(*messages)


def _assert(env: Any, exprs: Sequence[Expr]) -> Value:
    expr = _one(exprs, "assert <boolean: expr>")
    if env.eval_expr(expr) != "true":
        raise EvalError(f"assertion failed {expr.pretty(0)}")
    return "ok"


def _apply(env: Any, args: Sequence[Value]) -> Value:
    if not args:
        raise EvalError("apply <fn> <args>...")
    return env.apply(args[0], list(args[1:]))


def _unix(env: Any, args: Sequence[Value]) -> Value:
    argv = [_text(arg, "unix <string>...") for arg in args]
    if not argv:
        raise EvalError("unix cmd <string>...")
    try:
        process = subprocess.run(argv, stdout=subprocess.PIPE, check=False)
    except OSError as err:
        raise EvalError("unix: spawn:", str(err)) from err
    try:
        return process.stdout.decode("utf-8")
    except UnicodeDecodeError:
        raise EvalError("unix: output is not UTF-8") from None


def _lines(env: Any, args: Sequence[Value]) -> Value:
    text = _text(_one(args, "lines <string>"), "lines <string>")
    segments = text.split("\n")
    if segments[-1] == "":
        segments.pop()
    return {str(index): segment for index, segment in enumerate(segments)}


def _catch(env: Any, exprs: Sequence[Expr]) -> Value:
    body = _one(exprs, "catch <body>")
    value = env.eval_expr(body)
    return value.value if isinstance(value, Thrown) else value


def _throw(env: Any, args: Sequence[Value]) -> Value:
    return Thrown(_one(args, "throw <value>"))


def _concat(env: Any, args: Sequence[Value]) -> Value:
    return "".join(_text(arg, "..: <value: string>...") for arg in args)


def _if(env: Any, exprs: Sequence[Expr]) -> Value:
    if len(exprs) != 3:
        raise EvalError("if <cond> <then> <else>")
    cond, then, otherwise = exprs
    flag = _text(env.eval_expr(cond), "if: <cond: string>")
    return env.eval_expr(then if flag == "true" else otherwise)


def _equal(env: Any, args: Sequence[Value]) -> Value:
    left, right = _two(args, "= <a> <b>")
    if not (isinstance(left, str) and isinstance(right, str)):
        return "false"
    return "true" if left == right else "false"


def _not_equal(env: Any, args: Sequence[Value]) -> Value:
    left, right = _two(args, "= <a> <b>")
    if not (isinstance(left, str) and isinstance(right, str)):
        return "true"
    return "true" if left != right else "false"


def _set(env: Any, args: Sequence[Value]) -> Value:
    name, value = _two(args, "set <name> <value>")
    name = _text(name, "set <name: string> <value>")
    try:
        env.frame.update(name, value)
    except KeyError:
        raise EvalError("set: var not found") from None
    return "ok"


def _val(env: Any, args: Sequence[Value]) -> Value:
    return _one(args, "val <value>")


def _println(env: Any, args: Sequence[Value]) -> Value:
    for value in args:
        env.print_value(value)
        print()
    return "ok"


def _print(env: Any, args: Sequence[Value]) -> Value:
    for value in args:
        env.print_value(value)
    return "ok"


def _var(env: Any, args: Sequence[Value]) -> Value:
    items = iter(args)
    for name in items:
        value = next(items, _MISSING)
        if value is _MISSING:
            raise EvalError("var { <name> <value> }")
        env.frame.variables[_text(name, "set <name: string> <value>")] = value
    return "ok"


def _get(env: Any, args: Sequence[Value]) -> Value:
    name = _text(_one(args, "get <name>"), "get <name: string>")
    try:
        return env.frame.lookup(name)
    except KeyError:
        raise EvalError("get: var not found") from None


def _del(env: Any, args: Sequence[Value]) -> Value:
    name = _text(_one(args, "del <name>"), "del <name: string>")
    try:
        env.frame.forget(name)
    except KeyError:
        raise EvalError("del: var not found") from None
    return "ok"


def _inc(env: Any, args: Sequence[Value]) -> Value:
    text = _text(_one(args, "inc <number>"), "inc <number: string>")
    try:
        return str(_parse_int(text) + 1)
    except ValueError:
        raise EvalError("inc: parse failed") from None


def _numbers(op: str, args: Sequence[Value]) -> list:
    numbers = []
    for arg in args:
        text = _text(arg, f"{op} <number: string>...")
        try:
            numbers.append(_parse_int(text))
        except ValueError:
            raise EvalError(f"{op}: parse failed") from None
    return numbers


def _add(env: Any, args: Sequence[Value]) -> Value:
    return str(sum(_numbers("+", args)))


def _mul(env: Any, args: Sequence[Value]) -> Value:
    product = 1
    for number in _numbers("*", args):
        product *= number
    return str(product)


def _map(env: Any, args: Sequence[Value]) -> Value:
    items = iter(args)
    result: Dict[str, Value] = {}
    for key, value in zip(items, items):
        result[_text(key, "map: (<k: string> <value>)...")] = value
    return result


def _repeat(env: Any, exprs: Sequence[Expr]) -> Value:
    body = _one(exprs, "repeat <body>")
    while True:
        value = env.eval_expr(body)
        if isinstance(value, Thrown):
            return value


_EAGER = {
    "set": _set,
    "get": _get,
    "val": _val,
    "var": _var,
    "del": _del,
    "inc": _inc,
    "+": _add,
    "*": _mul,
    "=": _equal,
    "<": _less,
    ">": _more,
    "..": _concat,
    "!=": _not_equal,
    "throw": _throw,
    "println": _println,
    "print": _print,
    "map": _map,
    "fail": _fail,
    "apply": _apply,
    "unix": _unix,
    "lines": _lines,
    "vars": _vars,
    "or": _or,
    "and": _and,
}

_LAZY = {
    "repeat": _repeat,
    "catch": _catch,
    "if": _if,
    "assert": _assert,
}


def eager_builtins() -> Dict[str, Builtin]:
    """Built-ins whose arguments are evaluated before the call, by name."""
    return {name: Builtin(name, fn) for name, fn in _EAGER.items()}


def lazy_builtins() -> Dict[str, LazyBuiltin]:
    """Built-ins that receive their arguments unevaluated, by name."""
    return {name: LazyBuiltin(name, fn) for name, fn in _LAZY.items()}