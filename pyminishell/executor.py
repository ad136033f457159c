"""Running a command tree: pipelines, redirections, built-ins and programs."""

import copy
import errno
import io
import os
import signal
import subprocess
import sys
import tempfile
from collections.abc import Iterator
from contextlib import ExitStack
from dataclasses import dataclass
from typing import IO, Any, Optional, Union

from .builtins import exit_code, is_builtin, run_builtin
from .environment import Environment
from .expansion import expand_node
from .heredoc import Reader, read_heredoc
from .paths import resolve_command
from .prepare import annotate, check_input_files, count_nodes
from .syntax_tree import FileType, Node
from .tokenizer import TokenType

FILE_NOT_FOUND = "err: file not found"
NOT_FOUND_STATUS = 127
EXIT_MESSAGE = "EXIT"


class ShellExit(Exception):
    """Raised when the ``exit`` built-in ends the shell."""

    def __init__(self, status: int):
        super().__init__(status)
        self.status = status


class _HeredocInterrupted(Exception):
    """A here-document was cut short by an interrupt."""


@dataclass
class _Streams:
    stdin: Optional[IO[Any]] = None
    stdout: Optional[IO[Any]] = None


def _close(stream: Any) -> None:
    if hasattr(stream, "close"):
        stream.close()


def _pipeline(node: Node) -> Iterator[Node]:
    """Yield the commands of a pipeline from left to right."""
    if node.type is TokenType.PIPE:
        for child in (node.left, node.right):
            if child is not None:
                yield from _pipeline(child)
    else:
        yield node


def _split_stage(node: Node) -> tuple[Optional[list[str]], list[Node]]:
    """Return a command's words and its redirection targets, outermost first."""
    targets = []
    current: Optional[Node] = node
    while current is not None and current.type.is_redirection:
        if current.right is not None:
            targets.append(current.right)
        current = current.left
    return (current.args if current is not None else None), targets


def _status_of(result: Union[int, subprocess.Popen]) -> int:
    if isinstance(result, subprocess.Popen):
        code = result.returncode
        return 128 - code if code < 0 else code
    return result


class Executor:
    """Runs parsed command trees against one environment."""

    def __init__(self, env: Environment, reader: Optional[Reader] = None):
        self.env = env
        self.reader = reader

    def execute(self, node: Optional[Node]) -> int:
        """Prepare and run ``node``; return the exit status.

        A failed input-file check is reported but leaves the status at 0.
        Raises ShellExit when a lone ``exit`` command ends the shell.
        """
        if node is None:
            return 0
        count_nodes(node)
        annotate(node)
        expand_node(node, self.env)
        if check_input_files(node, self.env.to_environ()):
            return 0
        try:
            return self._run(node)
        except _HeredocInterrupted:
            return 1

    def _run(self, node: Node) -> int:
        stages = list(_pipeline(node))
        single = len(stages) == 1
        processes: list[subprocess.Popen] = []
        result: Union[int, subprocess.Popen] = 0
        incoming: Any = None
        try:
            for index, stage in enumerate(stages):
                last = index == len(stages) - 1
                args, targets = _split_stage(stage)
                with ExitStack() as stack:
                    streams = _Streams()
                    status = 0
                    for target in targets:
                        status = self._open(target, streams, stack)
                    if args is None or status:
                        _close(incoming)
                        incoming = None if last else subprocess.DEVNULL
                        result = status
                        continue
                    result, incoming = self._launch(
                        args, streams, incoming, last, single
                    )
                    if isinstance(result, subprocess.Popen):
                        processes.append(result)
        finally:
            _close(incoming)
            for process in processes:
                process.wait()
        interrupted = self._signal_status(processes)
        return interrupted if interrupted else _status_of(result)

    @staticmethod
    def _signal_status(processes: list[subprocess.Popen]) -> int:
        for process in processes:
            if process.returncode == -signal.SIGINT:
                print()
                return 128 + signal.SIGINT
            if process.returncode == -signal.SIGQUIT:
                print("Quit")
                return 128 + signal.SIGQUIT
        return 0

    def _open(self, target: Node, streams: _Streams, stack: ExitStack) -> int:
        path = target.args[0] if target.args else ""
        role = target.file_type
        if role is FileType.READ_FILE:
            streams.stdin = None
            try:
                streams.stdin = stack.enter_context(open(path, "rb"))
            except OSError:
                print(FILE_NOT_FOUND, file=sys.stderr)
                return 1
            return 0
        if role is FileType.READ_FROM_APPEND:
            try:
                body = read_heredoc(path, self.env, self.reader)
            except KeyboardInterrupt as exc:
                print()
                raise _HeredocInterrupted from exc
            buffer = stack.enter_context(tempfile.TemporaryFile())
            buffer.write(body.encode("utf-8"))
            buffer.seek(0)
            streams.stdin = buffer
            return 0
        mode = "a" if role is FileType.WRITE_FILE_APPEND else "w"
        try:
            streams.stdout = stack.enter_context(open(path, mode, encoding="utf-8"))
        except OSError as exc:
            print(f"   err: '{path}' {exc.strerror}", file=sys.stderr)
            return 1
        return 0

    def _launch(self, args, streams, incoming, last, single):
        argv = resolve_command(args, self.env.to_environ())
        if streams.stdin is not None:
            _close(incoming)
            incoming = streams.stdin
        if is_builtin(argv[0]):
            _close(incoming)
            return self._builtin(argv, streams.stdout, last, single)
        return self._external(argv, incoming, streams.stdout, last)

    def _builtin(self, argv, redirect, last, single):
        if single:
            if argv[0] == "exit":
                if len(argv) > 2:
                    return 1, None
                print(EXIT_MESSAGE)
                sys.stdout.flush()
                raise ShellExit(exit_code(argv))
            status = run_builtin(argv, self.env, redirect or sys.stdout)
            sys.stdout.flush()
            return status, None
        env = copy.deepcopy(self.env)
        buffer = None
        following: Any = None
        if redirect is not None:
            out = redirect
            following = None if last else subprocess.DEVNULL
        elif last:
            out = sys.stdout
        else:
            buffer = io.StringIO()
            out = buffer
        status = run_builtin(argv, env, out)
        sys.stdout.flush()
        if buffer is not None:
            following = tempfile.TemporaryFile()
            following.write(buffer.getvalue().encode("utf-8"))
            following.seek(0)
        return status, following

    def _external(self, argv, incoming, redirect, last):
        if redirect is not None:
            stdout: Any = redirect
        elif last:
            stdout = None
        else:
            stdout = subprocess.PIPE
        program = argv[0]
        sys.stdout.flush()
        try:
            if not program:
                raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT))
            executable = program if "/" in program else os.path.join(os.curdir, program)
            process = subprocess.Popen(
                argv,
                executable=executable,
                stdin=incoming,
                stdout=stdout,
                env=self.env.to_environ(),
            )
        except OSError as exc:
            print(exc.strerror or str(exc), file=sys.stderr)
            return NOT_FOUND_STATUS, (None if last else subprocess.DEVNULL)
        finally:
            _close(incoming)
        if stdout is subprocess.PIPE:
            return process, process.stdout
        return process, (None if last else subprocess.DEVNULL)


def execute(node: Optional[Node], env: Environment) -> int:
    """Prepare and run a command tree; return its exit status."""
    return Executor(env).execute(node)