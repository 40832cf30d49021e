"""Tests for the Credentials model."""
from __future__ import annotations

import dataclasses

import pytest
from pydantic import SecretStr, ValidationError

from models.credentials import Credentials


def test_credentials_valid_creation() -> None:
    creds = Credentials(url="https://github.com/acme/widgets", username="bot", password="secret")
    assert creds.url == "https://github.com/acme/widgets"
    assert creds.username == "bot"
    assert isinstance(creds.password, SecretStr)
    assert creds.password.get_secret_value() == "secret"
    assert "secret" not in repr(creds)


def test_credentials_are_immutable() -> None:
    creds = Credentials(url="https://github.com/acme/widgets", username="bot", password="secret")
    with pytest.raises(dataclasses.FrozenInstanceError):
        creds.username = "other"  # type: ignore


@pytest.mark.parametrize(
    "fields",
    [
        {"url": "", "username": "bot", "password": "secret"},
        {"url": "https://github.com/acme/widgets", "username": "  ", "password": "secret"},
        {"url": "https://github.com/acme/widgets", "username": "bot", "password": ""},
    ],
)
def test_credentials_reject_empty_fields(fields: dict) -> None:
    with pytest.raises(ValidationError):
        Credentials(**fields)
