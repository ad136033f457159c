"""Locating the programs and files that commands name."""

import os
from collections.abc import Mapping, Sequence
from typing import Optional

from .builtins import is_builtin
from .strutil import prefix_until

_QUOTES = "'\""


def count_words(text: Optional[str], delimiter: str) -> int:
    """Count the runs of characters in ``text`` not made of ``delimiter``."""
    if not text:
        return 0
    return sum(1 for piece in text.split(delimiter) if piece)


def _accessible(path: str, mode: int) -> bool:
    return os.access(path, mode)


def _candidates(name: str, directories: str):
    yield name
    for directory in directories.split(":"):
        if directory.endswith("/"):
            yield directory + name
        else:
            yield directory + "/" + name


def find_in_path(
    file: str, environ: Mapping[str, str], variable: str = "PATH", mode: int = os.X_OK
) -> Optional[str]:
    """Find ``file`` as given or inside the directories listed in ``variable``.

    Only the part of ``file`` before the first space is looked up.  The
    file itself is tried first, then each ``:``-separated directory in
    turn.  A name starting with ``./``, or a missing variable, means only
    the file itself is checked.  Returns None when nothing is accessible
    with ``mode``.
    """
    name = prefix_until(file, " ")
    directories = environ.get(variable)
    if directories is None or file.startswith("./"):
        return name if _accessible(name, mode) else None
    if name != file and not _accessible(file, mode):
        return None
    for candidate in _candidates(name, directories):
        if _accessible(candidate, mode):
            return candidate
    return None


def resolve_command(args: Sequence[str], environ: Mapping[str, str]) -> list[str]:
    """Return ``args`` with the command replaced by the program to run.

    Quote characters are dropped from the command name.  Built-ins keep
    their name; other commands are searched in PATH and keep their name
    when not found.
    """
    if not args:
        return [""]
    command = args[0]
    if count_words(command, " ") == 0:
        program = ""
    else:
        program = "".join(char for char in command if char not in _QUOTES)
        if not is_builtin(program):
            program = find_in_path(program, environ, "PATH", os.X_OK) or program
    return [program, *args[1:]]