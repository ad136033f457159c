"""Reading here-document bodies."""

from collections.abc import Callable
from typing import Optional

from .environment import Environment
from .expansion import expand
from .strutil import prefix_until, remove_quotes

PROMPT = ">> "

Reader = Callable[[str], Optional[str]]


def is_expandable(limiter: Optional[str]) -> bool:
    """Return True if the limiter has no quotes, so the body is expanded."""
    return not limiter or not any(char in "'\"" for char in limiter)


def _read_line(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def read_heredoc(
    limiter: str, env: Environment, reader: Optional[Reader] = None
) -> str:
    """Read lines until the limiter line or end of input; return the body.

    Quotes are removed from the limiter.  When the limiter was unquoted,
    variables in each line are expanded.  Each line of the body ends in
    a newline.
    """
    read = reader or _read_line
    expandable = is_expandable(limiter)
    end = remove_quotes(limiter)
    body = []
    while True:
        line = read(PROMPT)
        if line is None or prefix_until(line, "\n") == end:
            break
        if expandable:
            line = prefix_until(line, "\n")
            line = expand(line, env, False)
            line = expand(line, env, True)
        body.append(line + "\n")
    return "".join(body)