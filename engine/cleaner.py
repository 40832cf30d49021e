"""Squash a hosted repository's branches into orphan commits and push them."""
from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import List
from urllib.parse import quote

from engine.clone import clone_repository
from engine.errors import GitCleanerError, InvalidChoiceError
from engine.git_ops import GitOps
from engine.operator import Operator
from models.credentials import Credentials
from models.repository import BranchState, PushMode, RepoKind, RepositoryHandle

logger = logging.getLogger(__name__)

ORPHAN_SUFFIX = "-orphan"


class RepositoryCleaner:
    """Rewrites the history of one remote repository.

    Every selected branch is replaced by a single parentless commit holding
    its current tree, then force-pushed. The work happens in a temporary
    clone that is removed when the run ends, however it ends.
    """

    def __init__(
        self,
        credentials: Credentials,
        operator: Operator,
        git_binary: str = "git",
    ) -> None:
        """Initialize the cleaner.

        Args:
            credentials: Resolved repository URL and login
            operator: Source of branch, commit message and push decisions
            git_binary: Git executable

        Raises:
            UnsupportedRepositoryError: If the URL host is not recognized
        """
        self.handle = RepositoryHandle.from_credentials(credentials)
        self.operator = operator
        self.git_binary = git_binary
        password = credentials.password.get_secret_value()
        self.secrets = (
            self.handle.authenticated_url.get_secret_value(),
            password,
            quote(password, safe=""),
        )
        self.state = BranchState.PENDING
        logger.info(f"Detected repository type: {self.handle.kind.value}")

    def clean(self) -> List[str]:
        """Clone, squash the selected branches and push them.

        Returns:
            Names of the branches rewritten, in processing order

        Raises:
            CloneFailedError: If the repository cannot be cloned
            SubprocessFailure: If any git step other than fetch fails
        """
        with tempfile.TemporaryDirectory(prefix="gitcleaner-") as temp_dir:
            repo_dir = clone_repository(
                self.handle.authenticated_url.get_secret_value(),
                Path(temp_dir) / self.handle.repo_dir_name,
                display_url=self.handle.display_url,
                binary=self.git_binary,
                secrets=self.secrets,
            )
            git = GitOps(repo_dir, binary=self.git_binary, secrets=self.secrets)
            git.fetch_all()

            branches = self.select_branches(git)
            if not branches:
                logger.info("No branches to clean")

            cleaned = []
            for branch in branches:
                try:
                    self.squash_branch(git, branch)
                except GitCleanerError as e:
                    logger.error(
                        f"Cleaning branch {branch} failed at state {self.state.value}; "
                        f"remaining branches skipped: {e}"
                    )
                    raise
                cleaned.append(branch)

            logger.info(f"Cleaned {len(cleaned)} branch(es)", extra={"branches": cleaned})
            return cleaned

    def select_branches(self, git: GitOps) -> List[str]:
        """Decide which branches to rewrite."""
        if self.handle.kind is RepoKind.GITHUB:
            branches = git.remote_branches()
            while True:
                answer = self.operator.choose_branch(branches).strip()
                if not answer:
                    return branches
                if answer.startswith("-"):
                    self.operator.notify(f"Invalid branch name: {answer}")
                    continue
                if answer not in branches:
                    logger.warning(f"Branch {answer} is not among the remote branches")
                return [answer]

        default_branch = git.current_branch()
        self.operator.notify(f"\nWorking on the default branch: {default_branch}")
        return [default_branch]

    def choose_push_mode(self, branch: str) -> PushMode:
        """Ask for a push mode until the operator gives a valid one."""
        while True:
            answer = self.operator.push_mode(branch)
            try:
                return PushMode.parse(answer)
            except InvalidChoiceError as e:
                self.operator.notify(str(e))

    def squash_branch(self, git: GitOps, branch: str) -> None:
        """Replace a branch with a single orphan commit and push it."""
        orphan = f"{branch}{ORPHAN_SUFFIX}"
        self.state = BranchState.PENDING
        logger.info(f"Cleaning branch {branch}")

        git.checkout(branch)
        self.state = BranchState.CHECKED_OUT

        git.checkout_orphan(orphan)
        self.state = BranchState.ORPHAN_CREATED

        git.add_all()
        self.state = BranchState.STAGED

        git.commit(self.operator.commit_message(branch))
        self.state = BranchState.COMMITTED

        git.delete_branch(branch)
        self.state = BranchState.OLD_BRANCH_DELETED

        git.rename_branch(orphan, branch)
        self.state = BranchState.RENAMED

        git.push(branch, self.choose_push_mode(branch))
        self.state = BranchState.PUSHED

        git.gc()
        self.state = BranchState.GARBAGE_COLLECTED
        logger.info(f"Branch {branch} cleaned")
