"""Splitting a command line into words, pipes and redirections."""

from dataclasses import dataclass
from enum import IntEnum

from .syntax import WHITESPACE, check_syntax

_SEPARATORS = " \t\n"
_SPECIALS = "><|"
_WORD_BREAKS = _SEPARATORS + _SPECIALS


class TokenType(IntEnum):
    """Kinds of token produced by the tokenizer."""

    WORD = 0
    PIPE = 1
    REDIR_IN = 2
    REDIR_OUT = 3
    REDIR_APPEND = 4
    REDIR_HEREDOC = 5
    ENV_VAR = 6

    @property
    def is_redirection(self) -> bool:
        return TokenType.REDIR_IN <= self <= TokenType.REDIR_HEREDOC


@dataclass(frozen=True)
class Token:
    """One lexical unit of a command line."""

    type: TokenType
    value: str


_OPERATORS = {
    ">>": TokenType.REDIR_APPEND,
    "<<": TokenType.REDIR_HEREDOC,
    ">": TokenType.REDIR_OUT,
    "<": TokenType.REDIR_IN,
    "|": TokenType.PIPE,
}


def _word_end(text: str, pos: int) -> int:
    """Return the index just past the word that starts at ``pos``."""
    quote = None
    while pos < len(text):
        char = text[pos]
        if quote is None and char in "'\"":
            quote = char
        elif quote is not None and char == quote:
            quote = None
        if quote is None and char in _WORD_BREAKS:
            break
        pos += 1
    return pos


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into tokens; quotes are kept inside the words."""
    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        while pos < length and text[pos] in _SEPARATORS:
            pos += 1
        if pos >= length:
            break
        char = text[pos]
        if char in _SPECIALS:
            pair = text[pos:pos + 2]
            operator = pair if pair in (">>", "<<") else char
            tokens.append(Token(_OPERATORS[operator], operator))
            pos += len(operator)
        else:
            end = _word_end(text, pos)
            if end > pos:
                tokens.append(Token(TokenType.WORD, text[pos:end]))
            pos = end
    return tokens


def process_input(text: str) -> list[Token]:
    """Trim, syntax-check and tokenize a command line.

    Raises ShellSyntaxError when the line is rejected.
    """
    trimmed = text.strip(WHITESPACE)
    check_syntax(trimmed)
    return tokenize(trimmed)