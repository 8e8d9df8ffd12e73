"""
Configuration module for the air-gapped mirroring project.

This module provides configuration classes and validation for the project.
It uses Pydantic for configuration validation and dotenv for loading
environment variables.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, SecretStr, field_validator

from airgap_mirror.core.exceptions import ConfigError

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DEFAULT_PUSH_USER = "mirror-git-user"
DEFAULT_READ_USER = "mirror-git-read-user"
DEFAULT_ORG = "mirror"
DEFAULT_READER_EMAIL = "mirror-reader@localhost.local"
DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 3000


class GitServerConfig(BaseModel):
    """Connection and identity settings for the internal mirror git host."""

    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    push_username: str = DEFAULT_PUSH_USER
    push_password: SecretStr
    read_username: str = DEFAULT_READ_USER
    read_password: SecretStr
    org: str = DEFAULT_ORG
    reader_email: str = DEFAULT_READER_EMAIL

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validates port range."""
        if not 0 < v < 65536:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        """Validates address is a bare host."""
        if not v or "://" in v or "/" in v:
            raise ValueError("Address must be a bare host name or IP, without scheme or path")
        return v

    @property
    def base_url(self) -> str:
        """Root URL of the mirror host API."""
        return f"http://{self.address}:{self.port}/api/v1"


def get_env_variable(name: str, required: bool = False) -> Optional[str]:
    """
    Retrieve environment variable. Exit if required and missing.

    Args:
        name: Name of the environment variable
        required: Whether the variable is required

    Returns:
        Value of the environment variable or None if not required and not found

    Raises:
        ConfigError: If the variable is required but not found
    """
    value = os.getenv(name)

    if required and not value:
        logger.error("Missing required environment variable: %s", name)
        raise ConfigError(f"Missing required environment variable: {name}")

    return value


def load_config_from_env() -> GitServerConfig:
    """
    Load mirror host configuration from environment variables.

    Returns:
        GitServerConfig object with validated configuration

    Raises:
        ConfigError: If any required configuration is missing or invalid
    """
    try:
        push_password = get_env_variable("GIT_PUSH_PASSWORD", required=True)
        # Only needed to create the read-only user
        read_password = get_env_variable("GIT_READ_PASSWORD") or ""
        port_str = get_env_variable("GIT_SERVER_PORT", required=False)

        port = DEFAULT_PORT
        if port_str:
            port = int(port_str)

        config = GitServerConfig(
            address=get_env_variable("GIT_SERVER_ADDRESS") or DEFAULT_ADDRESS,
            port=port,
            push_username=get_env_variable("GIT_PUSH_USERNAME") or DEFAULT_PUSH_USER,
            push_password=SecretStr(push_password),
            read_username=get_env_variable("GIT_READ_USERNAME") or DEFAULT_READ_USER,
            read_password=SecretStr(read_password),
            org=get_env_variable("GIT_MIRROR_ORG") or DEFAULT_ORG,
        )

        return config
    except ConfigError:
        raise
    except ValueError as e:
        logger.error("Configuration validation error: %s", e)
        raise ConfigError(f"Configuration validation error: {e}") from e
