"""
Provisioning of the mirror organization and read-only user on the git host.
Provides a thin client for the Gitea-compatible REST API of the mirror host.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

import requests

from airgap_mirror.core.config import GitServerConfig
from airgap_mirror.core.exceptions import ProvisioningError
from airgap_mirror.core.tunnel import DirectTunnel, Tunnel

# Configure logging
logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class GitServerClient:
    """Handles organization and user provisioning on the mirror git host."""

    def __init__(
        self,
        config: GitServerConfig,
        tunnel_factory: Callable[[], Tunnel] = DirectTunnel,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize with git server configuration.

        Args:
            config: Mirror host address and credentials
            tunnel_factory: Creates the tunnel opened around each call
            session: HTTP session to use (default: a new requests.Session)
        """
        self.config = config
        self.tunnel_factory = tunnel_factory
        self.session = session or requests.Session()

    @contextmanager
    def tunnel(self) -> Iterator[Tunnel]:
        """Open a tunnel to the git server for the duration of one call."""
        tunnel = self.tunnel_factory()
        tunnel.connect()
        try:
            yield tunnel
        finally:
            tunnel.close()

    def _request(
        self, method: str, path: str, body: Dict[str, Any], action: str
    ) -> requests.Response:
        """Send one authenticated JSON request, raising on any non-2xx answer."""
        url = f"{self.config.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                json=body,
                auth=(self.config.push_username, self.config.push_password.get_secret_value()),
                headers={"accept": "application/json", "Content-Type": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.debug("Request to %s %s failed: %s", method, url, e)
            raise ProvisioningError(f"Unable to {action}: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.debug(
                "Request to %s %s failed with a status-code of %s and a response body of: %s",
                method,
                url,
                response.status_code,
                response.text,
            )
            raise ProvisioningError(f"Unable to {action}")

        return response

    def create_org(self) -> None:
        """Create the organization that holds the mirrors."""
        with self.tunnel():
            self._request(
                "POST",
                "/orgs",
                {"username": self.config.org, "visibility": "limited"},
                "create mirror org",
            )
        logger.info("Created organization %s", self.config.org)

    def create_read_only_user(self) -> None:
        """Create the read-only user and strip its repo and org creation rights."""
        with self.tunnel():
            self._request(
                "POST",
                "/admin/users",
                {
                    "username": self.config.read_username,
                    "password": self.config.read_password.get_secret_value(),
                    "email": self.config.reader_email,
                    "must_change_password": False,
                },
                "create read-only user",
            )

            # Make sure the user can't create their own repos or orgs
            self._request(
                "PATCH",
                f"/admin/users/{self.config.read_username}",
                {
                    "email": self.config.reader_email,
                    "max_repo_creation": 0,
                    "allow_create_organization": False,
                },
                "update read-only user",
            )
        logger.info("Created read-only user %s", self.config.read_username)

    def add_read_only_user(self, repo: str, owner: Optional[str] = None) -> None:
        """
        Grant the read-only user read access to a mirrored repository.

        Args:
            repo: Repository name on the mirror host
            owner: Owner of the repository (default: the push user)
        """
        owner = owner or self.config.push_username
        with self.tunnel():
            self._request(
                "PUT",
                f"/repos/{owner}/{repo}/collaborators/{self.config.read_username}",
                {"permission": "read"},
                f"add read-only user to repo {owner}/{repo}",
            )
        logger.info("Granted %s read access to %s/%s", self.config.read_username, owner, repo)
