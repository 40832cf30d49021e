"""Repository handle, push modes and branch states used by the cleaner."""
from __future__ import annotations

import re
from enum import Enum
from urllib.parse import quote

from pydantic import SecretStr
from pydantic.dataclasses import dataclass

from engine.errors import InvalidChoiceError, UnsupportedRepositoryError
from models.credentials import Credentials

GIST_HOST = "gist.github.com"
GITHUB_HOST = "github.com"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_USERINFO_RE = re.compile(r"^[^/]*@")


class RepoKind(str, Enum):
    """Kind of hosted repository, decided from the URL host."""

    GITHUB = "github"
    GIST = "gist"


class PushMode(str, Enum):
    """How a rewritten branch replaces its remote counterpart."""

    FORCE = "force"
    LEASE = "lease"

    @property
    def flag(self) -> str:
        """The git push flag implementing this mode."""
        if self is PushMode.LEASE:
            return "--force-with-lease"
        return "--force"

    @classmethod
    def parse(cls, answer: str) -> PushMode:
        """Parse an operator answer into a push mode.

        Raises:
            InvalidChoiceError: If the answer is neither 'force' nor 'lease'
        """
        try:
            return cls(answer.strip().lower())
        except ValueError as e:
            raise InvalidChoiceError(
                "Invalid input. Please enter 'force' or 'lease'."
            ) from e


class BranchState(str, Enum):
    """Progress of a single branch through the squash procedure."""

    PENDING = "pending"
    CHECKED_OUT = "checked-out"
    ORPHAN_CREATED = "orphan-created"
    STAGED = "staged"
    COMMITTED = "committed"
    OLD_BRANCH_DELETED = "old-branch-deleted"
    RENAMED = "renamed"
    PUSHED = "pushed"
    GARBAGE_COLLECTED = "gc'd"


def normalize_url(url: str) -> str:
    """Strip scheme and userinfo from a repository URL.

    ``https://user@github.com/acme/widgets.git`` becomes
    ``github.com/acme/widgets.git``. An scp-style ``github.com:acme/widgets``
    is rewritten to ``github.com/acme/widgets``.
    """
    url = url.strip()
    scheme = _SCHEME_RE.match(url)
    rest = url[scheme.end():] if scheme else url
    rest = _USERINFO_RE.sub("", rest, count=1)

    if not scheme:
        first_segment = rest.split("/", 1)[0]
        if ":" in first_segment:
            host, _, path = rest.partition(":")
            rest = f"{host}/{path.lstrip('/')}"

    return rest


def detect_repo_kind(normalized_url: str) -> RepoKind:
    """Classify a normalized URL by its host.

    Raises:
        UnsupportedRepositoryError: If the host is neither Gist nor GitHub
    """
    host = normalized_url.split("/", 1)[0].lower()
    if GIST_HOST in host:
        return RepoKind.GIST
    if GITHUB_HOST in host:
        return RepoKind.GITHUB
    raise UnsupportedRepositoryError("Unsupported repository type")


def build_authenticated_url(normalized_url: str, username: str, password: str) -> str:
    """Embed percent-encoded credentials into an https URL."""
    user = quote(username, safe="")
    secret = quote(password, safe="")
    return f"https://{user}:{secret}@{normalized_url}"


@dataclass(frozen=True)
class RepositoryHandle:
    """Derived, immutable view of the repository to clean.

    Attributes:
        normalized_url: ``host/path[.git]`` without scheme or credentials
        authenticated_url: https URL carrying the supplied username and password
        kind: Hosted repository kind
    """

    normalized_url: str
    authenticated_url: SecretStr
    kind: RepoKind

    @classmethod
    def from_credentials(cls, credentials: Credentials) -> RepositoryHandle:
        """Derive the handle for a set of credentials.

        Raises:
            UnsupportedRepositoryError: If the URL host is not recognized
        """
        normalized = normalize_url(credentials.url)
        kind = detect_repo_kind(normalized)
        return cls(
            normalized_url=normalized,
            authenticated_url=SecretStr(
                build_authenticated_url(
                    normalized,
                    credentials.username,
                    credentials.password.get_secret_value(),
                )
            ),
            kind=kind,
        )

    @property
    def display_url(self) -> str:
        """URL safe to print or log."""
        return f"https://{self.normalized_url}"

    @property
    def repo_dir_name(self) -> str:
        """Directory git clone creates for this repository."""
        name = self.normalized_url.rstrip("/").rsplit("/", 1)[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        return name or "repository"
