"""The shell's variable table."""

import os
import sys
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Optional

from .strutil import digits_to_int

SHELL_NAME = "minishell"
STATUS_NAME = "?"
_LOST = "  err: cd() / pwd(): getcwd(): you are lost"


@dataclass(frozen=True)
class _Variable:
    value: Optional[str]
    exported: bool


class Environment:
    """Ordered shell variables.

    A variable may have no value at all (``export NAME``), an empty value
    (``export NAME=``) or a value.  Only variables inherited from the
    starting environment or assigned a non-empty value are passed on to
    programs the shell starts.
    """

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        self._vars: dict[str, _Variable] = {}
        for name, value in (variables or {}).items():
            self._vars[name] = _Variable(value, True)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def find(self, name: str) -> int:
        """Return the position of ``name`` in the table, or -1."""
        for index, key in enumerate(self._vars):
            if key == name:
                return index
        return -1

    def get(self, name: str) -> Optional[str]:
        """Return the value of ``name``; None if unset or without a value."""
        var = self._vars.get(name)
        return None if var is None else var.value

    def assign(self, statement: str) -> None:
        """Apply ``NAME=VALUE``, ``NAME=`` or ``NAME``; the variable moves to the end."""
        name, sep, value = statement.partition("=")
        self._vars.pop(name, None)
        if name and value:
            self._vars[name] = _Variable(value, True)
        elif sep:
            self._vars[name] = _Variable("", False)
        else:
            self._vars[name] = _Variable(None, False)

    def append(self, statement: str) -> None:
        """Apply ``NAME+=VALUE``, adding to any current value."""
        name = statement.split("+", 1)[0]
        if name in self._vars:
            suffix = statement[len(name) + 2:]
            current = self._vars[name].value or ""
            self.assign(f"{name}={current}{suffix}")
        else:
            self.assign(statement.replace("+", ""))

    def unset(self, name: str) -> bool:
        """Remove ``name``; return whether it was present."""
        return self._vars.pop(name, None) is not None

    def set_number(self, name: str, value: int) -> None:
        """Assign a decimal number to ``name``."""
        self.assign(f"{name}={value}")

    def set_status(self, status: int) -> None:
        """Record the exit status of the last command as ``?``."""
        self.set_number(STATUS_NAME, status)

    def to_environ(self) -> dict[str, str]:
        """Return the variables handed to programs the shell starts."""
        return {
            name: var.value
            for name, var in self._vars.items()
            if var.exported and var.value is not None
        }

    def items(self) -> Iterator[tuple[str, Optional[str]]]:
        """Yield ``(name, value)`` for every variable, in table order."""
        for name, var in self._vars.items():
            yield name, var.value


def _current_directory() -> Optional[str]:
    try:
        return os.getcwd()
    except OSError:
        print(_LOST, file=sys.stderr)
        return None


def initialize_environment(
    environ: Optional[Mapping[str, str]] = None, cwd: Optional[str] = None
) -> Environment:
    """Build the starting table from ``environ`` (the process environment by default).

    SHLVL is raised by one, SHELL names this shell, ``?`` starts at 0 and
    PWD is set to ``cwd`` (the working directory by default).
    """
    env = Environment(os.environ if environ is None else environ)
    level = env.get("SHLVL")
    env.set_number("SHLVL", digits_to_int(level or "") + 1)
    env.unset("SHELL")
    env.assign(f"SHELL={SHELL_NAME}")
    env.assign(f"{STATUS_NAME}=0")
    directory = cwd if cwd is not None else _current_directory()
    if directory is not None:
        env.unset("PWD")
        env.assign(f"PWD={directory}")
    return env


def is_blank_line(line: str) -> bool:
    """Return True if ``line`` holds only spaces, tabs and newlines."""
    return line.strip(" \t\n") == ""