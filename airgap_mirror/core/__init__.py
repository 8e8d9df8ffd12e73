"""Core functionality for the air-gapped mirroring tool."""

from airgap_mirror.core.config import (
    GitServerConfig,
    get_env_variable,
    load_config_from_env,
)
from airgap_mirror.core.exceptions import (
    ConfigError,
    HeadResolutionError,
    MirrorError,
    OpenError,
    ProvisioningError,
    RemovalError,
    RestoreError,
)
from airgap_mirror.core.provision import GitServerClient
from airgap_mirror.core.refs import (
    Reference,
    add_refs,
    delete_branch_if_exists,
    remove_head_copies,
    remove_local_branch_refs,
    remove_online_remote_refs,
    remove_references,
)
from airgap_mirror.core.tunnel import DirectTunnel, Tunnel
from airgap_mirror.core.urls import mutate_git_urls_in_text, transform_url_to_repo_name

__all__ = [
    "MirrorError",
    "ConfigError",
    "OpenError",
    "HeadResolutionError",
    "RemovalError",
    "RestoreError",
    "ProvisioningError",
    "GitServerConfig",
    "get_env_variable",
    "load_config_from_env",
    "GitServerClient",
    "Tunnel",
    "DirectTunnel",
    "Reference",
    "remove_references",
    "remove_local_branch_refs",
    "remove_online_remote_refs",
    "remove_head_copies",
    "add_refs",
    "delete_branch_if_exists",
    "mutate_git_urls_in_text",
    "transform_url_to_repo_name",
]
