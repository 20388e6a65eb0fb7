# parenshell

A small shell language. Every value in it is a string, a map, a function or a
thrown exception. It has closures, blocks, lexically scoped variables, `catch`
and `throw`, and a `unix` builtin that runs an external program and returns
what it writes to standard output.

## Installing

```
pip install .
```

## Running

Start an interactive prompt:

```
parenshell
```

Each command typed at the `$ ` prompt is evaluated and its result printed.
Errors are reported as `error: ...` and the session goes on. End the session
by closing standard input.

Run a script:

```
parenshell script.lang
```

When a script is run, nothing is printed except what the script prints
itself. A syntax error anywhere in the file prints `syntax error` and nothing
is run; an error during evaluation is reported and stops the script. A file
that cannot be read prints `Failed to read path`.

## The language

One command goes on each line. A command is made of expressions separated by
single spaces; the first one names or produces the thing to call.

- `word` is a string. `'it''s quoted'` is a quoted string, in which `''`
  stands for a single quote.
- `$name` is the value of a variable (it means `$(get name)`).
- `( ... )` is a closure. When called, `$1`, `$2`, … are its arguments and
  `$#` is how many there are.
- `$( ... )` is a block, evaluated in place in a new scope. Its value is the
  value of its last command, or `ok` if it is empty.
- Parentheses hold either one command on the same line, or, if a newline
  follows the `(`, one command per line up to the `)`.
- A line starting with `#` is a comment.
- A command ending in ` \` continues over the following lines up to a `;`.

```
var factorial (
    var x $1
    if $(= $x 0) \
        $(val 1)
        $(* $x $(factorial $(+ $x -1)))
    ;
)
println $(factorial 5)
```

### Builtins

| Name | What it does |
| --- | --- |
| `var n v ...` | declare variables in the current scope |
| `set n v` | assign to the nearest existing variable |
| `get n`, `del n` | read or remove the nearest variable |
| `val v` | return its argument |
| `vars` | a map of every variable in reach |
| `inc`, `+`, `*` | integer arithmetic on 64-bit values |
| `=`, `!=`, `<`, `>` | comparisons, returning `true` or `false` |
| `and`, `or` | over `true` / `false` arguments |
| `..` | concatenate strings |
| `if c then else` | evaluates only the chosen branch |
| `repeat body` | evaluates its body until it throws |
| `throw v`, `catch body` | raise and intercept a thrown value |
| `assert expr` | fail unless `expr` is `true` |
| `fail` | always fails |
| `apply f args...` | call a function with arguments |
| `print`, `println` | print values |
| `map k v ...` | build a map |
| `lines s` | split a string into a map of lines keyed `0`, `1`, … |
| `unix cmd args...` | run a program and return its standard output |

A map used as a command answers to `keys`, `values`, `get k`, `set k v`,
`del k` and `has k`. Keys are kept in sorted order.

```
var m $(map name John age 40)
m set city Paris
println $(m get name)
```

## Using it from Python

```python
from parenshell.interpreter import Env
from parenshell.syntax import parse_command, parse_file

env = Env()
result = env.eval_cmd(parse_command("+ 1 2 3"))
env.print_value(result)   # prints '6'

for command in parse_file("var x 2\nprintln $(* $x 21)\n"):
    env.eval_cmd(command)
```

Strings come back as `str`, maps as `dict`, and a thrown value as
`parenshell.values.Thrown`. Failures raise `parenshell.values.EvalError`,
whose `messages` attribute holds the error lines; bad syntax raises
`parenshell.grammar.ParseError`.

`parenshell.cli.run_file(text)` runs a whole script and returns its last
value (or `None` after an error), and `parenshell.cli.repl(lines)` runs the
interactive loop over any iterable of lines.

`parenshell.syntax` also renders syntax back to source text with `pretty()`,
and `parenshell.values.format_value` renders a value the way the prompt shows
it.

## What it does not do

`parenshell.heap` holds a standalone tracing collector (`Heap`, with
`alloc`, `root`, `unroot` and `collect`, and the `Strategy` that decides when
it collects on its own). The interpreter does not use it: its values are
ordinary Python objects, so there is no collector strategy to choose when
running scripts.