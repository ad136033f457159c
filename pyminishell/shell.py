"""The interactive read-evaluate loop and the command entry point."""

import signal
import sys
from collections.abc import Sequence
from typing import Optional

from .environment import Environment, initialize_environment, is_blank_line
from .executor import Executor, ShellExit
from .heredoc import Reader
from .syntax import ShellSyntaxError
from .syntax_tree import parse
from .tokenizer import process_input

PROMPT = "> "
SYNTAX_ERROR_STATUS = 258
INTERRUPT_STATUS = 1


def _read_line(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """A shell session: one environment and the executor that runs commands in it."""

    def __init__(
        self, env: Optional[Environment] = None, reader: Optional[Reader] = None
    ):
        self.env = env if env is not None else initialize_environment()
        self.executor = Executor(self.env, reader)

    def run_line(self, line: str) -> Optional[int]:
        """Run one command line and record its status as ``?``.

        Blank lines are ignored and give None.  A line rejected by the
        syntax checks is reported on standard error with status 258.
        Raises ShellExit when the line ends the shell.
        """
        if is_blank_line(line):
            return None
        try:
            tree = parse(process_input(line))
        except ShellSyntaxError as exc:
            print(exc, file=sys.stderr)
            status = SYNTAX_ERROR_STATUS
        else:
            status = self.executor.execute(tree)
        self.env.set_status(status)
        return status

    def loop(self, reader: Optional[Reader] = None) -> int:
        """Read and run lines until end of input or ``exit``; return the exit status.

        An interrupt at the prompt starts a fresh line and sets ``?`` to 1.
        """
        read = reader or _read_line
        while True:
            try:
                line = read(PROMPT)
            except KeyboardInterrupt:
                print()
                self.env.set_status(INTERRUPT_STATUS)
                continue
            if line is None:
                return 0
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.status
            except KeyboardInterrupt:
                print()
                self.env.set_status(INTERRUPT_STATUS)


def _setup_signal_handlers() -> None:
    quit_signal = getattr(signal, "SIGQUIT", None)
    if quit_signal is not None:
        signal.signal(quit_signal, signal.SIG_IGN)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start an interactive shell; does nothing unless attached to a terminal."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        return 0
    if args:
        return 0
    try:
        import readline  # noqa: F401  (enables line editing and history for input())
    except ImportError:
        pass
    _setup_signal_handlers()
    return Shell().loop()


if __name__ == "__main__":
    raise SystemExit(main())