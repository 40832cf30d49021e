"""Shared fixtures: repositories built with pygit2 and an isolated git identity."""
from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pygit2
import pytest

SIGNATURE = pygit2.Signature("Test User", "test@example.com")
FILE_MODE = 0o100644

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git binary not available"
)


def _tree(repo: pygit2.Repository, files: Dict[str, bytes]) -> pygit2.Oid:
    builder = repo.TreeBuilder()
    for name, content in files.items():
        builder.insert(name, repo.create_blob(content), FILE_MODE)
    return builder.write()


def make_origin(
    path: Path,
    branches: Sequence[str] = ("main", "feature"),
    main_files: Optional[Dict[str, bytes]] = None,
) -> pygit2.Repository:
    """Create a bare repository with two commits on main and one more per extra branch.

    The first commit on main adds a secret that the second one removes.
    ``main_files`` are added to the tree of the second commit.
    """
    repo = pygit2.init_repository(str(path), bare=True, initial_head="main")

    first = repo.create_commit(
        "refs/heads/main",
        SIGNATURE,
        SIGNATURE,
        "Add config",
        _tree(repo, {"config.txt": b"token = hunter2\n"}),
        [],
    )
    second = repo.create_commit(
        "refs/heads/main",
        SIGNATURE,
        SIGNATURE,
        "Remove token",
        _tree(repo, {"config.txt": b"token = \n", **(main_files or {})}),
        [first],
    )
    for branch in branches:
        if branch == "main":
            continue
        repo.create_commit(
            f"refs/heads/{branch}",
            SIGNATURE,
            SIGNATURE,
            f"Work on {branch}",
            _tree(repo, {"config.txt": b"token = \n", f"{branch}.txt": b"wip\n"}),
            [second],
        )
    return repo


def make_clone(
    path: Path,
    remote_branches: Sequence[str] = ("main",),
    head: str = "main",
) -> pygit2.Repository:
    """Create a working copy that looks like a fresh clone of origin."""
    repo = pygit2.init_repository(str(path), initial_head=head)
    (path / "README.md").write_text("hello\n")
    index = repo.index
    index.add("README.md")
    index.write()
    tree = index.write_tree()
    commit = repo.create_commit("HEAD", SIGNATURE, SIGNATURE, "Initial commit", tree, [])

    for branch in remote_branches:
        repo.references.create(f"refs/remotes/origin/{branch}", commit)
    repo.references.create("refs/remotes/origin/HEAD", f"refs/remotes/origin/{head}")
    return repo


@pytest.fixture
def git_identity(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run git with a fixed identity and without the user's configuration."""
    config = tmp_path / "gitconfig"
    config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


class ScriptedOperator:
    """Operator answering prompts from prepared lists."""

    def __init__(
        self,
        branch: str = "",
        messages: Sequence[str] = ("",),
        push_modes: Sequence[str] = ("force",),
    ) -> None:
        self.branch = branch
        self.messages = list(messages)
        self.push_modes = list(push_modes)
        self.notifications: List[str] = []
        self.prompts: List[str] = []

    def notify(self, message: str) -> None:
        self.notifications.append(message)

    def choose_branch(self, branches: List[str]) -> str:
        self.prompts.append("branch")
        return self.branch

    def commit_message(self, branch: str) -> str:
        self.prompts.append(f"message:{branch}")
        return self.messages.pop(0) if len(self.messages) > 1 else self.messages[0]

    def push_mode(self, branch: str) -> str:
        self.prompts.append(f"push:{branch}")
        return self.push_modes.pop(0) if len(self.push_modes) > 1 else self.push_modes[0]
