"""The commands the shell runs itself.

Every command takes its full argument list, command name first, and
returns its exit status.  Output and error messages go to ``out``.
"""

import os
import string
from itertools import dropwhile
from typing import Optional, TextIO

from .environment import STATUS_NAME, Environment
from .strutil import digits_to_int, is_numeric, prefix_until

BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})

_NAME_START = string.ascii_letters + "_"
_NAME_CHARS = _NAME_START + string.digits

_CD_TOO_MANY = "  err: cd(): Not a cd thing"
_CD_MISSING = "  err: cd(): Only EXISTING destinations"
_LOST = "  err: cd() / pwd(): getcwd(): you are lost"


def is_builtin(command: str) -> bool:
    """Return True if the first word of ``command`` names a built-in."""
    return prefix_until(command, " ") in BUILTINS


def is_valid_echo_flag(arg: str) -> bool:
    """Return True for ``-`` followed only by ``n`` characters."""
    return arg.startswith("-") and all(char == "n" for char in arg[1:])


def export_name_length(arg: str) -> int:
    """Return the length of the variable name in an export argument.

    A ``+`` just before ``=`` is not part of the name.  Returns 0 when the
    name is empty or not a valid identifier.
    """
    length = len(prefix_until(arg, "="))
    if length > 1 and arg[length - 1] == "+":
        length -= 1
    name = arg[:length]
    if not name or name[0] not in _NAME_START:
        return 0
    if any(char not in _NAME_CHARS for char in name[1:]):
        return 0
    return length


def echo(args: list[str], out: TextIO) -> int:
    """Print the arguments separated by spaces; ``-n`` flags drop the newline."""
    words = args[1:]
    newline = not (words and is_valid_echo_flag(words[0]))
    if not newline:
        words = list(dropwhile(is_valid_echo_flag, words))
    out.write(" ".join(words))
    if newline:
        out.write("\n")
    return 0


def env_command(env: Environment, out: TextIO) -> int:
    """Print every variable that has a value, as ``NAME=VALUE``."""
    for name, value in env.items():
        if name != STATUS_NAME and value is not None:
            out.write(f"{name}={value}\n")
    return 0


def _current_directory(out: TextIO) -> Optional[str]:
    try:
        return os.getcwd()
    except OSError:
        out.write(_LOST + "\n")
        return None


def pwd(out: TextIO) -> int:
    """Print the working directory."""
    directory = _current_directory(out)
    if directory is None:
        return 1
    out.write(directory + "\n")
    return 0


def print_declarations(env: Environment, out: TextIO) -> None:
    """Print every variable as ``declare -x`` lines, sorted by name."""
    for name, value in sorted(env.items(), key=lambda item: item[0]):
        if name == STATUS_NAME:
            continue
        suffix = "" if value is None else f'="{value}"'
        out.write(f"declare -x {name}{suffix}\n")


def export(args: list[str], env: Environment, out: TextIO) -> int:
    """Assign or append to variables; with no arguments list them all."""
    if len(args) < 2:
        print_declarations(env, out)
        return 0
    status = 0
    for arg in args[1:]:
        length = export_name_length(arg)
        if not length:
            out.write(f"   err: export('{arg}') : Not a valid thing\n")
            status = 1
        elif arg[length:length + 1] == "+":
            env.append(arg)
        else:
            env.assign(arg)
    return status


def unset(args: list[str], env: Environment) -> int:
    """Remove variables; the status is 1 if any of them did not exist."""
    status = 0
    if len(args) > 1 and len(env):
        for name in args[1:]:
            if not env.unset(name):
                status = 1
    return status


def _change_directory(path: Optional[str]) -> bool:
    if path is None:
        return False
    try:
        os.chdir(path)
    except OSError:
        return False
    return True


def cd(args: list[str], env: Environment, out: TextIO) -> int:
    """Change directory (HOME when no path is given) and update PWD."""
    if len(args) > 2:
        out.write(_CD_TOO_MANY + "\n")
        return 1
    target = args[1] if len(args) > 1 and args[1] else env.get("HOME")
    if not _change_directory(target):
        out.write(_CD_MISSING + "\n")
        return 1
    env.unset("PWD")
    directory = _current_directory(out)
    if directory is not None:
        env.assign(f"PWD={directory}")
    return 0


def exit_code(args: list[str]) -> int:
    """Return the status an ``exit`` command line asks for.

    More than one argument gives 1, a non-numeric argument 255, otherwise
    the number as the operating system would report it.
    """
    if len(args) > 2:
        return 1
    if len(args) < 2:
        return 0
    if not is_numeric(args[1]):
        return 255
    return digits_to_int(args[1]) % 256


def run_builtin(args: list[str], env: Environment, out: TextIO) -> int:
    """Run the built-in named by ``args[0]`` and return its status.

    ``exit`` only reports the status it asks for; ending the shell is up
    to the caller.
    """
    command = args[0] if args else ""
    if command == "echo":
        return echo(args, out)
    if command == "pwd":
        return pwd(out)
    if command == "env":
        return env_command(env, out)
    if command == "export":
        return export(args, env, out)
    if command == "unset":
        return unset(args, env)
    if command == "cd":
        return cd(args, env, out)
    if command == "exit":
        return exit_code(args)
    return 0