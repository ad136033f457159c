"""Expansion of ``$NAME`` references and word splitting of the results."""

from typing import Optional

from .environment import Environment
from .strutil import prefix_until, remove_quotes
from .syntax_tree import FileType, Node

_NAME_EXTRA = "_?"


def is_variable_char(char: str) -> bool:
    """Return True if ``char`` may appear in a variable name after ``$``."""
    return len(char) == 1 and (
        ("a" <= char <= "z")
        or ("A" <= char <= "Z")
        or ("0" <= char <= "9")
        or char in _NAME_EXTRA
    )


def _starts_variable(text: str, pos: int) -> bool:
    return (
        pos + 1 < len(text)
        and text[pos] == "$"
        and is_variable_char(text[pos + 1])
    )


def _substitute(text: str, pos: int, env: Environment) -> tuple[str, int]:
    """Replace the reference at ``pos``; return the new text and where to resume.

    After a known variable the scan resumes just past its value; after an
    unknown one it starts again from the beginning of the text.
    """
    end = pos + 1
    while end < len(text) and is_variable_char(text[end]):
        end += 1
    name = text[pos + 1:end]
    if name in env:
        value = env.get(name) or ""
        return text[:pos] + value + text[end:], pos + len(value)
    return text[:pos] + text[end:], 0


def expand(text: str, env: Environment, unquoted: bool = True) -> str:
    """Expand variable references in ``text``.

    With ``unquoted`` true only references outside double quotes are
    expanded, otherwise only those inside double quotes.  Text between
    single quotes that are not themselves inside double quotes is never
    expanded.  Quote characters are left in place.
    """
    pos = 0
    doubles = 0
    while pos < len(text):
        if text[pos] == "'":
            pos += 1
            if doubles % 2 == 0:
                while pos < len(text) and text[pos] != "'":
                    pos += 1
        if pos < len(text) and text[pos] == '"':
            doubles += 1
        if _starts_variable(text, pos) and (doubles % 2 == 0) == unquoted:
            text, pos = _substitute(text, pos, env)
            continue
        pos += 1
    return text


def _needs_splitting(text: str) -> bool:
    """Return True if an unquoted space follows a word in ``text``."""
    singles = doubles = 0
    in_word = False
    for char in text:
        if char == '"':
            doubles += 1
        elif char == "'":
            singles += 1
        elif singles % 2 == 0 and doubles % 2 == 0:
            if char == " ":
                if in_word:
                    return True
                in_word = False
            else:
                in_word = True
    return False


def _split(text: str) -> list[str]:
    pieces: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        while pos < length and text[pos] == " ":
            pos += 1
        rest = text[pos:]
        if rest[:1] in ('"', "'"):
            size = len(prefix_until(rest[1:], rest[0])) + 2
        else:
            size = min(len(prefix_until(rest, stop)) for stop in " \"'")
        if pos + size > length:
            break
        pieces.append(text[pos:pos + size])
        pos += size
    return pieces


def split_words(args: list[str]) -> list[str]:
    """Split arguments that hold unquoted spaces into separate arguments.

    A quoted section becomes an argument of its own, quotes included.
    """
    result: list[str] = []
    for arg in args:
        if _needs_splitting(arg):
            result.extend(_split(arg))
        else:
            result.append(arg)
    return result


def expand_node(node: Optional[Node], env: Environment) -> None:
    """Expand, split and unquote the arguments of every node in the tree.

    Nodes prepared as operators and here-document limiters are left alone.
    """
    if node is None:
        return
    if (
        node.args is not None
        and node.file_type not in (FileType.FILE_READY, FileType.READ_FROM_APPEND)
    ):
        words = split_words([expand(arg, env, True) for arg in node.args])
        node.args = [remove_quotes(expand(word, env, False)) for word in words]
    expand_node(node.left, env)
    expand_node(node.right, env)