"""Syntax checks run on a command line before it is tokenized."""

from collections.abc import Iterator

WHITESPACE = " \t\n\v\f\r"

UNCLOSED_QUOTE = "Syntax error: unclosed quote"
INVALID_REDIRECTION = "Syntax error: invalid redirection"
MISPLACED_OPERATOR = "Syntax error: misplaced operator"
LOGICAL_OPERATORS = "Error: Logical operators '&&' and '||' are not supported."


class ShellSyntaxError(ValueError):
    """Raised when a command line is rejected before parsing."""


def _scan(text: str) -> Iterator[tuple[int, str, bool]]:
    """Yield each position, its character and whether it lies outside quotes.

    Single and double quotes are counted independently; a character is
    unquoted when both counts seen so far (including itself) are even.
    """
    singles = doubles = 0
    for index, char in enumerate(text):
        if char == '"':
            doubles += 1
        elif char == "'":
            singles += 1
        yield index, char, singles % 2 == 0 and doubles % 2 == 0


def has_unclosed_quotes(text: str) -> bool:
    """Return True if a quote opened in ``text`` is never closed."""
    open_quote = None
    for char in text:
        if char in "'\"":
            if open_quote == char:
                open_quote = None
            elif open_quote is None:
                open_quote = char
    return open_quote is not None


def has_invalid_redirections(text: str) -> bool:
    """Return True if a redirection operator lacks a target."""
    singles = doubles = 0
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == '"':
            doubles += 1
        elif char == "'":
            singles += 1
        if singles % 2 == 0 and doubles % 2 == 0 and char in "<>":
            pos += 1
            if pos < length and text[pos] == char:
                pos += 1
            while pos < length and text[pos] in " \t":
                pos += 1
            if pos >= length or text[pos] in "<>|":
                return True
        else:
            pos += 1
    return False


def has_misplaced_operators(text: str) -> bool:
    """Return True if a pipe starts, ends or repeats without a command."""
    if text[:1] in ("|", "&") and text:
        return True
    expect_command = False
    for _, char, unquoted in _scan(text):
        if char == "|" and unquoted:
            if expect_command:
                return True
            expect_command = True
        elif char not in WHITESPACE:
            expect_command = False
    return expect_command


def has_logical_operators(text: str) -> bool:
    """Return True if ``&&`` or ``||`` appears outside quotes."""
    for index, char, unquoted in _scan(text):
        if unquoted and char in "&|" and text[index + 1:index + 2] == char:
            return True
    return False


def check_syntax(text: str) -> None:
    """Raise ShellSyntaxError if ``text`` fails any of the syntax checks."""
    if has_unclosed_quotes(text):
        raise ShellSyntaxError(UNCLOSED_QUOTE)
    if has_invalid_redirections(text):
        raise ShellSyntaxError(INVALID_REDIRECTION)
    if has_misplaced_operators(text):
        raise ShellSyntaxError(MISPLACED_OPERATOR)
    if has_logical_operators(text):
        raise ShellSyntaxError(LOGICAL_OPERATORS)