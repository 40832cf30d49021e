"""Exception hierarchy for the repository cleaner."""
from __future__ import annotations

from typing import Sequence


class GitCleanerError(Exception):
    """Base class for every error the cleaner reports to the operator."""

    pass


class ConfigurationError(GitCleanerError):
    """Raised when a required credential field cannot be resolved."""

    def __init__(self, field: str, message: str):
        """Initialize with the missing field and a readable message.

        Args:
            field: Name of the unresolved field (url, username or password)
            message: Message shown to the operator
        """
        self.field = field
        super().__init__(message)


class UnsupportedRepositoryError(GitCleanerError):
    """Raised when the repository host is neither GitHub nor Gist."""

    pass


class CloneFailedError(GitCleanerError):
    """Raised when git clone exits with a non-zero status."""

    def __init__(self, repo_url: str, error_msg: str):
        """Initialize with the (redacted) repo URL and the git error output.

        Args:
            repo_url: Repository URL without credentials
            error_msg: Last line of git's error output
        """
        self.repo_url = repo_url
        self.error_msg = error_msg
        message = "Failed to clone repository"
        if error_msg:
            message = f"{message}: {error_msg}"
        super().__init__(message)


class SubprocessFailure(GitCleanerError):
    """Raised when a git command exits non-zero at a step with no tolerance."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{' '.join(self.command)}' exited with status {returncode}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class InvalidChoiceError(GitCleanerError):
    """Raised when the operator answers a constrained prompt with an unknown token."""

    pass


class RepositoryStateError(GitCleanerError):
    """Raised when the working copy is not in a state the cleaner can use."""

    pass


class OperatorAbortedError(GitCleanerError):
    """Raised when the operator's input stream closes in the middle of a prompt."""

    pass
