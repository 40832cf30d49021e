"""Cloning the repository to clean into a scratch directory."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from engine.errors import CloneFailedError, SubprocessFailure
from engine.git_ops import run_git

logger = logging.getLogger(__name__)


def clone_repository(
    auth_url: str,
    dest_dir: Path,
    *,
    display_url: str,
    binary: str = "git",
    secrets: Sequence[str] = (),
) -> Path:
    """Clone a repository into ``dest_dir``.

    Args:
        auth_url: Clone URL, possibly carrying credentials
        dest_dir: Directory to create; its parent must exist
        display_url: URL without credentials, used in logs and errors
        binary: Git executable
        secrets: Strings to redact from logs and error messages

    Returns:
        Path to the cloned repository

    Raises:
        CloneFailedError: If git clone exits non-zero
    """
    logger.info(f"Cloning {display_url} to {dest_dir}")
    try:
        run_git(
            ["clone", auth_url, str(dest_dir)],
            dest_dir.parent,
            binary=binary,
            secrets=secrets,
        )
    except SubprocessFailure as e:
        raise CloneFailedError(display_url, e.stderr) from e

    logger.info(f"Cloned {display_url}")
    return dest_dir
