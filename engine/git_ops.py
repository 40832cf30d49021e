"""Git command helpers used to rewrite branches in a working copy."""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pygit2

from engine.errors import RepositoryStateError, SubprocessFailure
from models.repository import PushMode

logger = logging.getLogger(__name__)

REDACTED = "***"


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of the given secrets in text."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def last_line(output: Optional[str]) -> str:
    """Return the last non-empty line of command output."""
    lines = [line.strip() for line in (output or "").splitlines() if line.strip()]
    return lines[-1] if lines else ""


def git_env() -> dict:
    """Environment for git subprocesses; never falls back to a terminal prompt."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_git(
    args: Sequence[str],
    cwd: Path,
    *,
    binary: str = "git",
    secrets: Sequence[str] = (),
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run a git command with an explicit argument list and wait for it.

    Args:
        args: Arguments after the git binary
        cwd: Directory to run the command in
        binary: Git executable
        secrets: Strings to redact from logs and error messages
        check: Raise SubprocessFailure on a non-zero exit status

    Returns:
        The completed process with text output

    Raises:
        SubprocessFailure: If check is set and git exits non-zero, or if the
            binary cannot be started
    """
    cmd = [binary, *args]
    shown = [redact(part, secrets) for part in cmd]
    logger.debug(f"Running {' '.join(shown)} in {cwd}")

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            env=git_env(),
        )
    except OSError as e:
        raise SubprocessFailure(shown, 127, redact(str(e), secrets)) from e

    if result.stdout:
        logger.debug(redact(result.stdout, secrets))
    if result.returncode != 0 and check:
        error_msg = redact(last_line(result.stderr), secrets)
        logger.error(
            "Git command failed",
            extra={"command": shown, "returncode": result.returncode, "error": error_msg},
        )
        raise SubprocessFailure(shown, result.returncode, error_msg)
    return result


class GitOps:
    """Operations on a cloned working copy.

    Mutating operations go through the git binary; ref lookups are read
    straight from the repository with pygit2.
    """

    def __init__(
        self,
        repo_path: str | Path,
        binary: str = "git",
        secrets: Sequence[str] = (),
        remote: str = "origin",
    ) -> None:
        """Initialize GitOps for a working copy.

        Args:
            repo_path: Path to the cloned repository
            binary: Git executable
            secrets: Strings to redact from logs and error messages
            remote: Name of the remote to read branches from and push to
        """
        self.repo_path = Path(repo_path)
        self.binary = binary
        self.secrets = tuple(secrets)
        self.remote = remote

    def run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        """Run a git command inside the working copy."""
        return run_git(
            args,
            self.repo_path,
            binary=self.binary,
            secrets=self.secrets,
            check=check,
        )

    def _open(self) -> pygit2.Repository:
        try:
            return pygit2.Repository(str(self.repo_path))
        except (KeyError, pygit2.GitError) as e:
            raise RepositoryStateError(
                f"Not a git repository: {self.repo_path}"
            ) from e

    def fetch_all(self) -> bool:
        """Fetch every remote. Failures are logged and tolerated.

        Returns:
            True if the fetch succeeded
        """
        result = self.run("fetch", "--all", check=False)
        if result.returncode != 0:
            logger.warning(
                "Fetch failed, continuing with the branches from the clone",
                extra={"error": redact(last_line(result.stderr), self.secrets)},
            )
            return False
        return True

    def remote_branches(self) -> List[str]:
        """List remote branches without the remote prefix, skipping HEAD."""
        repo = self._open()
        prefix = f"refs/remotes/{self.remote}/"
        branches = [
            name[len(prefix):]
            for name in repo.references
            if name.startswith(prefix)
        ]
        return sorted(branch for branch in branches if branch != "HEAD")

    def current_branch(self) -> str:
        """Name of the checked-out branch.

        Raises:
            RepositoryStateError: If HEAD is unborn or detached
        """
        repo = self._open()
        if repo.head_is_unborn:
            raise RepositoryStateError("Repository has no commits on its default branch")
        if repo.head_is_detached:
            raise RepositoryStateError("Repository HEAD is detached")
        return repo.head.shorthand

    def checkout(self, branch: str) -> None:
        self.run("checkout", branch, "--")
        logger.info(f"Checked out branch {branch}")

    def checkout_orphan(self, branch: str) -> None:
        self.run("checkout", "--orphan", branch)
        logger.info(f"Created orphan branch {branch}")

    def add_all(self) -> None:
        self.run("add", "-A")

    def commit(self, message: str) -> None:
        """Commit the staged tree. An empty message is allowed.

        Non-empty messages carry a Signed-off-by trailer.
        """
        if message:
            self.run("commit", "--allow-empty", "--signoff", "-m", message)
        else:
            self.run("commit", "--allow-empty", "--allow-empty-message", "-m", "")
        logger.info("Created commit", extra={"empty_message": not message})

    def delete_branch(self, branch: str) -> None:
        self.run("branch", "-D", branch)
        logger.info(f"Deleted branch {branch}")

    def rename_branch(self, old: str, new: str) -> None:
        self.run("branch", "-m", old, new)
        logger.info(f"Renamed branch {old} to {new}")

    def push(self, branch: str, mode: PushMode) -> None:
        """Overwrite the remote branch using the given push mode."""
        self.run("push", mode.flag, self.remote, branch)
        logger.info(f"Pushed {branch} to {self.remote}", extra={"mode": mode.value})

    def gc(self) -> None:
        """Aggressively collect garbage and prune all unreachable objects."""
        self.run("gc", "--aggressive", "--prune=all")
