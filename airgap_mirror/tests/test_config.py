"""
Tests for configuration loading and validation.
"""

import pytest
from pydantic import SecretStr, ValidationError

from airgap_mirror.core.config import (
    DEFAULT_ORG,
    DEFAULT_PUSH_USER,
    GitServerConfig,
    get_env_variable,
    load_config_from_env,
)
from airgap_mirror.core.exceptions import ConfigError

ENV_VARS = [
    "GIT_SERVER_ADDRESS",
    "GIT_SERVER_PORT",
    "GIT_PUSH_USERNAME",
    "GIT_PUSH_PASSWORD",
    "GIT_READ_USERNAME",
    "GIT_READ_PASSWORD",
    "GIT_MIRROR_ORG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_get_env_variable_required(monkeypatch):
    with pytest.raises(ConfigError):
        get_env_variable("GIT_PUSH_PASSWORD", required=True)

    monkeypatch.setenv("GIT_PUSH_PASSWORD", "secret")
    assert get_env_variable("GIT_PUSH_PASSWORD", required=True) == "secret"


def test_load_defaults(monkeypatch):
    monkeypatch.setenv("GIT_PUSH_PASSWORD", "push")
    monkeypatch.setenv("GIT_READ_PASSWORD", "read")

    config = load_config_from_env()

    assert config.push_username == DEFAULT_PUSH_USER
    assert config.org == DEFAULT_ORG
    assert config.push_password.get_secret_value() == "push"
    assert config.base_url == "http://127.0.0.1:3000/api/v1"


def test_load_overrides(monkeypatch):
    monkeypatch.setenv("GIT_PUSH_PASSWORD", "push")
    monkeypatch.setenv("GIT_READ_PASSWORD", "read")
    monkeypatch.setenv("GIT_SERVER_ADDRESS", "git.internal")
    monkeypatch.setenv("GIT_SERVER_PORT", "45003")
    monkeypatch.setenv("GIT_MIRROR_ORG", "upstream")

    config = load_config_from_env()

    assert config.base_url == "http://git.internal:45003/api/v1"
    assert config.org == "upstream"


def test_load_missing_password():
    with pytest.raises(ConfigError, match="GIT_PUSH_PASSWORD"):
        load_config_from_env()


def test_load_invalid_port(monkeypatch):
    monkeypatch.setenv("GIT_PUSH_PASSWORD", "push")
    monkeypatch.setenv("GIT_READ_PASSWORD", "read")
    monkeypatch.setenv("GIT_SERVER_PORT", "not-a-port")

    with pytest.raises(ConfigError):
        load_config_from_env()


@pytest.mark.parametrize("address", ["http://git.internal", "git.internal/api", ""])
def test_address_must_be_bare_host(address):
    with pytest.raises(ValidationError):
        GitServerConfig(
            address=address, push_password=SecretStr("p"), read_password=SecretStr("r")
        )


def test_port_range():
    with pytest.raises(ValidationError):
        GitServerConfig(port=0, push_password=SecretStr("p"), read_password=SecretStr("r"))



def test_load_without_read_password(monkeypatch):
    monkeypatch.setenv("GIT_PUSH_PASSWORD", "push")

    config = load_config_from_env()

    assert config.read_password.get_secret_value() == ""
