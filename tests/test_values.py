import pytest

from parenshell.syntax import Str, parse_command, parse_file
from parenshell.values import (
    Builtin,
    EvalError,
    Frame,
    Function,
    LazyBuiltin,
    Thrown,
    format_value,
)


def test_lookup_walks_to_parent():
    outer = Frame({"x": "1"})
    inner = Frame({"y": "2"}, outer)
    assert inner.lookup("x") == "1"
    assert inner.lookup("y") == "2"


def test_lookup_prefers_inner():
    outer = Frame({"x": "outer"})
    inner = Frame({"x": "inner"}, outer)
    assert inner.lookup("x") == "inner"
    assert outer.lookup("x") == "outer"


def test_lookup_missing_raises():
    with pytest.raises(KeyError):
        Frame({}, Frame({})).lookup("nope")


def test_update_changes_nearest_only():
    outer = Frame({"x": "a"})
    inner = Frame({"x": "b"}, outer)
    inner.update("x", "c")
    assert inner.variables["x"] == "c"
    assert outer.variables["x"] == "a"


def test_update_reaches_parent():
    outer = Frame({"x": "a"})
    inner = Frame({}, outer)
    inner.update("x", "z")
    assert outer.variables["x"] == "z"
    assert "x" not in inner.variables


def test_update_missing_raises():
    with pytest.raises(KeyError):
        Frame().update("x", "1")


def test_forget_uncovers_outer():
    outer = Frame({"x": "outer"})
    inner = Frame({"x": "inner"}, outer)
    inner.forget("x")
    assert inner.lookup("x") == "outer"
    inner.forget("x")
    with pytest.raises(KeyError):
        inner.lookup("x")


def test_forget_missing_raises():
    with pytest.raises(KeyError):
        Frame().forget("x")


def test_visible_shadows():
    outer = Frame({"x": "outer", "y": "y"})
    inner = Frame({"x": "inner"}, outer)
    assert inner.visible() == {"x": "inner", "y": "y"}


def test_eval_error_messages():
    err = EvalError("unix: spawn:", "missing")
    assert err.messages == ["unix: spawn:", "missing"]
    assert str(err) == "unix: spawn:\nmissing"


def test_format_builtins():
    assert format_value(Builtin("x", lambda env, args: "ok")) == "<built-in fn>"
    assert format_value(LazyBuiltin("x", lambda env, exprs: "ok")) == "<lazy fn>"


@pytest.mark.parametrize("text", ["plain", "it's", "", "two words", "''"])
def test_format_string_parses_back(text):
    rendered = format_value(text)
    assert rendered.startswith("'") and rendered.endswith("'")
    assert parse_command(rendered).exprs == (Str(text),)


def test_format_thrown_wraps_inner():
    assert format_value(Thrown("x")) == "<exception: " + format_value("x") + ">"


def test_format_closure_wraps_code():
    code = parse_file("val 3\n")
    rendered = format_value(Function(code, Frame()))
    assert rendered.startswith("<closure: (")
    assert rendered.endswith(")>")
    assert "'val' '3'" in rendered


def test_format_map_sorted():
    rendered = format_value({"b": "2", "a": "1"})
    assert rendered == "{\n    a: '1',\n    b: '2',\n}"


def test_format_nested_map():
    rendered = format_value({"m": {"k": "v"}})
    assert rendered == "{\n    m: {\n        k: 'v',\n    },\n}"


def test_format_empty_map():
    assert format_value({}) == "{\n}"


def test_format_rejects_foreign_values():
    with pytest.raises(TypeError):
        format_value(42)