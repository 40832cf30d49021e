"""Operator interaction: the decisions a person makes during a cleaning run."""
from __future__ import annotations

import sys
from typing import List, Optional, Protocol, TextIO

from engine.errors import OperatorAbortedError


class Operator(Protocol):
    """Decisions the cleaner asks for while it rewrites history."""

    def notify(self, message: str) -> None:
        """Show an informational message."""
        ...

    def choose_branch(self, branches: List[str]) -> str:
        """Return a branch name, or an empty string for all listed branches."""
        ...

    def commit_message(self, branch: str) -> str:
        """Return the message for the squashed commit; may be empty."""
        ...

    def push_mode(self, branch: str) -> str:
        """Return the raw push strategy answer ('force' or 'lease')."""
        ...


class ConsoleOperator:
    """Operator reading answers from stdin and printing prompts to stdout."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def _ask(self, prompt: str) -> str:
        print(prompt, end="", file=self.stdout, flush=True)
        line = self.stdin.readline()
        if not line:
            raise OperatorAbortedError("Input closed while waiting for an answer")
        return line.rstrip("\r\n")

    def notify(self, message: str) -> None:
        print(message, file=self.stdout, flush=True)

    def choose_branch(self, branches: List[str]) -> str:
        self.notify(f"\nAvailable branches: {', '.join(branches)}")
        return self._ask("Enter the branch you wish to clean (leave empty for all branches): ")

    def commit_message(self, branch: str) -> str:
        return self._ask(
            f"\nEnter commit message for {branch} (leave empty to allow empty commit): "
        )

    def push_mode(self, branch: str) -> str:
        return self._ask(
            f"\nDo you want to force push or push with lease for {branch}? (force/lease): "
        )
