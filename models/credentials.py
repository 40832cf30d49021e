"""Credentials model for the repository being cleaned."""
from __future__ import annotations

from pydantic import SecretStr, field_validator
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    """Resolved repository location and login.

    Attributes:
        url: Repository URL as supplied by the operator
        username: Account used to push the rewritten branches
        password: Password or personal access token for that account
    """

    url: str
    username: str
    password: SecretStr

    @field_validator("url", "username")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("password")
    @classmethod
    def _password_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("must not be empty")
        return value
