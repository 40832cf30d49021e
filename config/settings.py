"""Credential resolution from command-line flags, environment and .env file."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from pydantic_settings import BaseSettings

from engine.errors import ConfigurationError
from models.credentials import Credentials

logger = logging.getLogger(__name__)


class CleanerSettings(BaseSettings):
    """Environment fallback for the credential flags.

    Values come from ``GITURL``, ``USERNAME`` and ``PASSWORD`` in the process
    environment or, failing that, the env file.
    """

    giturl: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    class Config:
        """Pydantic config."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


def _pick(flag_value: Optional[str], env_value: Optional[str]) -> Tuple[Optional[str], str]:
    """Return the chosen value and where it came from."""
    if flag_value and flag_value.strip():
        return flag_value, "flag"
    if env_value and env_value.strip():
        return env_value, "environment"
    return None, "missing"


def resolve_credentials(
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    settings: Optional[CleanerSettings] = None,
) -> Credentials:
    """Resolve credentials, preferring explicit flags over the environment.

    Args:
        url: Value of ``--url``, if given
        username: Value of ``--username``, if given
        password: Value of ``--password``, if given
        settings: Environment fallback; loaded from the default env file if None

    Returns:
        Credentials with every field populated

    Raises:
        ConfigurationError: Naming the first field left unresolved
    """
    if settings is None:
        settings = CleanerSettings()

    resolved_url, url_source = _pick(url, settings.giturl)
    resolved_username, username_source = _pick(username, settings.username)
    resolved_password, password_source = _pick(password, settings.password)

    if not resolved_url:
        raise ConfigurationError("url", "Git URL is required")
    if not resolved_username:
        raise ConfigurationError("username", "Username is required")
    if not resolved_password:
        raise ConfigurationError("password", "Password is required")

    logger.debug(
        "Resolved credentials",
        extra={
            "url_source": url_source,
            "username_source": username_source,
            "password_source": password_source,
        },
    )
    return Credentials(
        url=resolved_url,
        username=resolved_username,
        password=resolved_password,
    )
