# pyminishell

A small interactive shell in the spirit of a classic Unix shell. It reads a
line, checks its syntax, splits it into tokens, builds a syntax tree and runs
it. It supports:

- pipelines: `ls | grep py | wc -l`
- redirections: `<`, `>`, `>>` and here-documents with `<<`
- single and double quotes, with `$NAME` and `$?` expansion
- the builtins `echo` (with `-n`), `cd`, `pwd`, `export`, `unset`, `env`
  and `exit`

It has no dependencies beyond the Python standard library.

## Installing

```
pip install .
```

## Running

Start the shell from a terminal:

```
pyminishell
```

The prompt is `> `, and here-document lines are read at the prompt `>> `.
End the session with `exit` or Ctrl-D. Ctrl-C at the prompt starts a fresh
line and sets `$?` to 1. When the standard `readline` module is available,
line editing and history are enabled.

The shell only starts when both its input and its output are a terminal; if
either is not, or if it is given any arguments, it returns straight away with
status 0.

```
> export GREETING=hello
> echo "$GREETING, world" | tr a-z A-Z
HELLO, WORLD
> cat << END
>> first line
>> $GREETING
>> END
first line
hello
> exit
EXIT
```

A few details of behaviour:

- The syntax checker rejects unclosed quotes, redirections without a target,
  pipes at the start or end of a line or next to each other, and the
  unsupported operators `&&` and `||`. The message goes to standard error and
  `$?` becomes 258.
- `exit` with one numeric argument ends the shell with that number modulo 256;
  a non-numeric argument gives 255; more than one argument gives status 1 and
  the shell keeps running.
- Builtins inside a pipeline run on a copy of the variables, so `export`,
  `unset` and `cd`'s update of `PWD` there do not change the session.
- A here-document whose limiter contains quotes is not expanded.
- A program that cannot be started reports the error and gives status 127.

## Using it as a library

The stages of the shell are available on their own:

```python
from pyminishell.tokenizer import process_input
from pyminishell.syntax_tree import parse, to_dot

tokens = process_input("cat < in.txt | sort > out.txt")
tree = parse(tokens)
print(to_dot(tree))   # a Graphviz description of the syntax tree
```

- `pyminishell.syntax.check_syntax` raises `ShellSyntaxError` for a rejected
  line; `process_input` trims, checks and tokenizes in one step.
- `pyminishell.syntax_tree.write_dot(tree, path)` writes the Graphviz
  description to a file (`ast.dot` by default).
- `pyminishell.environment.Environment` is the variable table, and
  `initialize_environment` builds one from the process environment.
- `pyminishell.expansion.expand` expands `$NAME` references in a string.
- `pyminishell.executor.execute(tree, env)` runs a tree and returns its status.
- `pyminishell.shell.Shell` runs whole lines with `Shell.run_line`, which
  returns the status (or `None` for a blank line) and raises
  `pyminishell.executor.ShellExit` when the line ends the shell.
  `Shell.loop(reader)` runs a session, reading lines from any callable that
  takes a prompt and returns a line or `None` at end of input.

## What it does not do

This is a deliberately small shell. It has no `;`, `&&`, `||`, subshells,
background jobs or job control, no filename globbing, no aliases or shell
functions, and it cannot run script files: it only reads commands
interactively from a terminal.

## Running the tests

```
pip install .[test]
pytest
```