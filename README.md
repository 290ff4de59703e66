# minishell

A small interactive POSIX-style shell. It reads a line, splits it into
tokens, expands variables, quotes and wildcards, and runs the result.
The result runs either as a built-in command or as an external program
found on `PATH`.

## Features

- Pipelines: `ls -l | grep py | wc -l`. The status of a pipeline is the
  status of its last command.
- Redirections: `<`, `>`, `>>` and here-documents with `<<`. Variables
  in a here-document are expanded unless the delimiter contains a quote.
- Variable expansion: `$NAME`, and `$?` for the last exit status.
- Single and double quotes. `$` is expanded inside double quotes only.
- `*` wildcards matched against the entries of the current directory.
  Hidden entries match only patterns that start with a dot. A pattern
  that matches nothing is left as it is.
- Built-ins: `echo` (with `-n`), `cd`, `pwd`, `env`, `export`, `unset`
  and `exit`.
- A line that ends in an operator is reported as
  `minishell: syntax error near unexpected token ...`, with exit status 2.
- An unclosed quote is reported as
  `minishell: unexpected EOF while looking for matching ...`, with exit
  status 258.

## Installing

```
pip install .
```

## Running

Start the interactive prompt:

```
minishell
```

The prompt is `minishell$ `. Leave the session with `exit [status]`.
End of input (Ctrl-D) also leaves it: the shell prints `exit` and
finishes with the last command's exit status. Ctrl-\ is ignored while
the shell runs.

## Using it from Python

```python
from minishell.shell import Shell

shell = Shell()
status = shell.run_line("echo hello | tr a-z A-Z")
```

- `Shell(environ=None, *, read_line=None, out=None, err=None)` starts
  from `os.environ`, or from the mapping you pass in.
- `Shell.run_line(line)` runs one command line and returns its exit
  status. If the line calls `exit`, it raises
  `minishell.builtins.ShellExit`, whose `status` holds the requested
  status.
- `Shell.loop(read_line)` keeps running lines until input ends or `exit`
  is called, then returns the status. `read_line` is called with the
  prompt and returns the next line, or `None` at end of input.

The parts can also be used on their own:

- `minishell.tokens.tokenize` turns a line into a list of `Token`
  objects. `minishell.tokens.check_syntax` rejects a line that ends in
  an operator.
- `minishell.expander.expand` applies variable, quote and wildcard
  expansion to a single word.
- `minishell.environment.Environment` is the ordered variable table the
  shell works with.
- `minishell.executor.Executor` runs a token list against an
  `Environment`.
- `minishell.builtins.run_builtin` runs one built-in command.
- `minishell.pathsearch.resolve_command` finds the program for a command
  name.
- `minishell.shell.build_prompt` builds a `user@host:dir$ ` prompt
  string.

## Exit statuses

| Status | Meaning                                   |
|--------|-------------------------------------------|
| 0      | success                                   |
| 1      | general error                             |
| 2      | syntax error                              |
| 126    | found but not executable                  |
| 127    | command not found                         |
| 128+n  | terminated by signal n                    |
| 130    | here-document input interrupted           |
| 255    | `exit` given a non-numeric value          |
| 258    | unclosed quote                            |

## What it does not do

- `&&`, `||` and parentheses are recognised as tokens but not executed
  as command lists or subshells. A command stops at the first such
  token.
- A word that expands to several words, for example through `*`,
  contributes only its first word to a command's arguments. A
  redirection target that expands to several words is an
  `ambiguous redirect`.
- Wildcards work on the current directory only, not on paths with `/`.
- There is no job control, no scripting language (`if`, loops,
  functions) and no reading of commands from a script file.

## Running the tests

```
pip install ".[test]"
pytest
```