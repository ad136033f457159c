"""Building the command tree from tokens and rendering it as Graphviz."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum
from itertools import takewhile
from pathlib import Path
from typing import Optional

from .syntax import INVALID_REDIRECTION, ShellSyntaxError
from .tokenizer import Token, TokenType


class FileType(IntEnum):
    """Role a node plays once the tree is prepared for execution."""

    NONE = 0
    READ_FILE = 10
    READ_FROM_APPEND = 15
    WRITE_FILE = 20
    WRITE_FILE_APPEND = 30
    EXECUTE_FILE = 40
    FILE_READY = 50


@dataclass
class Node:
    """A node of the command tree."""

    type: TokenType
    args: Optional[list[str]] = None
    left: Optional["Node"] = None
    right: Optional["Node"] = None
    file_type: FileType = FileType.NONE


def _file_node(token: Token) -> Node:
    return Node(token.type, args=[token.value])


def _parse_redirection(tokens: Sequence[Token]) -> Optional[Node]:
    if not tokens:
        return None
    first = tokens[0]
    if first.type.is_redirection:
        if len(tokens) < 2:
            raise ShellSyntaxError(INVALID_REDIRECTION)
        return Node(
            first.type,
            left=_parse_redirection(tokens[2:]),
            right=_file_node(tokens[1]),
        )
    for index in range(1, len(tokens)):
        token = tokens[index]
        if token.type.is_redirection:
            if index + 1 >= len(tokens):
                raise ShellSyntaxError(INVALID_REDIRECTION)
            rest = list(tokens[:index]) + list(tokens[index + 2:])
            return Node(
                token.type,
                left=_parse_redirection(rest),
                right=_file_node(tokens[index + 1]),
            )
    words = takewhile(lambda t: t.type is TokenType.WORD, tokens)
    return Node(TokenType.WORD, args=[t.value for t in words])


def _parse_pipeline(tokens: Sequence[Token]) -> Optional[Node]:
    for index in range(1, len(tokens)):
        if tokens[index].type is TokenType.PIPE:
            return Node(
                TokenType.PIPE,
                left=_parse_redirection(tokens[:index]),
                right=_parse_pipeline(tokens[index + 1:]),
            )
    return _parse_redirection(tokens)


def parse(tokens: Sequence[Token]) -> Optional[Node]:
    """Build the command tree; None when there are no tokens.

    Pipes split the line with the first pipe at the root; within each
    command the first redirection becomes the root, its target on the
    right and the remaining words and redirections on the left.
    """
    tokens = list(tokens)
    if not tokens:
        return None
    return _parse_pipeline(tokens)


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _label_prefix(node_type: TokenType) -> str:
    if node_type is TokenType.WORD:
        return "CMD: "
    if node_type.is_redirection:
        return "REDIR: "
    if node_type is TokenType.PIPE:
        return "|"
    return "UNKNOWN"


def _preorder(node: Node) -> Iterator[Node]:
    yield node
    if node.left is not None:
        yield from _preorder(node.left)
    if node.right is not None:
        yield from _preorder(node.right)


def _emit(node: Node, names: dict[int, str], lines: list[str]) -> None:
    name = names[id(node)]
    label = _label_prefix(node.type) + " ".join(_escape(a) for a in node.args or [])
    lines.append(f'"{name}" [label="{label}"];')
    for child, side in ((node.left, "L"), (node.right, "R")):
        if child is not None:
            lines.append(f'"{name}" -> "{names[id(child)]}" [label="{side}"];')
            _emit(child, names, lines)


def to_dot(node: Optional[Node]) -> str:
    """Render the tree as a Graphviz digraph."""
    lines = ["digraph AST {"]
    if node is not None:
        names = {id(n): f"node{i}" for i, n in enumerate(_preorder(node))}
        _emit(node, names, lines)
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(node: Optional[Node], path="ast.dot") -> None:
    """Write the Graphviz rendering of the tree to ``path``."""
    Path(path).write_text(to_dot(node), encoding="utf-8")