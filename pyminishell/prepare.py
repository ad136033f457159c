"""Preparing a parsed command tree for execution."""

import errno
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from .builtins import is_builtin
from .paths import find_in_path
from .strutil import exit_status_for_errno
from .syntax_tree import FileType, Node
from .tokenizer import TokenType

_TARGET_ROLES = {
    TokenType.REDIR_OUT: FileType.WRITE_FILE,
    TokenType.REDIR_APPEND: FileType.WRITE_FILE_APPEND,
    TokenType.REDIR_IN: FileType.READ_FILE,
    TokenType.REDIR_HEREDOC: FileType.READ_FROM_APPEND,
}


@dataclass
class NodeCounts:
    """How many input redirections, output redirections and pipes a tree holds."""

    inputs: int = 0
    outputs: int = 0
    pipes: int = 0


def count_nodes(node: Optional[Node]) -> NodeCounts:
    """Count redirections and pipes, clearing every node's role on the way."""
    counts = NodeCounts()
    stack = [node] if node is not None else []
    while stack:
        current = stack.pop()
        current.file_type = FileType.NONE
        if current.type in (TokenType.REDIR_OUT, TokenType.REDIR_APPEND):
            counts.outputs += 1
        elif current.type in (TokenType.REDIR_IN, TokenType.REDIR_HEREDOC):
            counts.inputs += 1
        elif current.type is TokenType.PIPE:
            counts.pipes += 1
        stack.extend(child for child in (current.right, current.left) if child)
    return counts


def annotate(node: Optional[Node]) -> None:
    """Give each node the role it plays when the tree is executed."""
    if node is None:
        return
    if node.type is not TokenType.WORD:
        node.file_type = FileType.FILE_READY
        role = _TARGET_ROLES.get(node.type)
        if role is not None and node.right is not None:
            node.right.file_type = role
        if node.type is TokenType.PIPE:
            for child in (node.right, node.left):
                if child is not None:
                    child.file_type = FileType.EXECUTE_FILE
    if node.file_type is FileType.NONE:
        node.file_type = FileType.EXECUTE_FILE
    annotate(node.left)
    annotate(node.right)


def _report(file: str, status: int, err: int) -> int:
    if status == 1:
        print(f"   err: '{file}' {os.strerror(err)}", file=sys.stderr)
        return exit_status_for_errno(err)
    if status:
        print(f"   minishell('{file}'): go play somewhere elsz", file=sys.stderr)
    return status


def _check_file(path: str, file: str) -> int:
    if file == ".":
        return 2
    if file in ("..", ",", ""):
        return _report(file, 1, errno.ENOENT)
    if os.path.isdir(path):
        print(f"   err: this '{path}' Is a directory", file=sys.stderr)
        return _report(file, 2, errno.EACCES)
    return 0


def check_input_files(node: Optional[Node], environ: Mapping[str, str]) -> int:
    """Check the files read by input redirections; return the first error status.

    Files are looked up as given and in the directory named by PWD.  A
    missing file is not an error here.  Messages go to standard error.
    """
    if node is None:
        return 0
    status = 0
    if (
        node.args
        and not is_builtin(node.args[0])
        and node.file_type is FileType.READ_FILE
    ):
        file = node.args[0]
        path = find_in_path(file, environ, "PWD", os.R_OK)
        if path is not None:
            status = _check_file(path, file)
    if not status:
        status = check_input_files(node.left, environ)
    if not status:
        status = check_input_files(node.right, environ)
    return status