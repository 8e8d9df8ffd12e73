"""Utility modules for the air-gapped mirroring tool."""

from airgap_mirror.utils.credentials import Credential, find_auth_for_host, parse_credentials

__all__ = [
    "Credential",
    "find_auth_for_host",
    "parse_credentials",
]
