"""
Tunnel abstraction used to reach the internal git host.

The provisioning client only needs something it can connect and close around
each API call. Port-forwarding into a cluster is provided by the caller; a
directly reachable host uses :class:`DirectTunnel`.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Tunnel(Protocol):
    """Connection that must be open while talking to the mirror host."""

    def connect(self) -> None:
        ...

    def close(self) -> None:
        ...


class DirectTunnel:
    """No-op tunnel for a mirror host that is reachable without forwarding."""

    def connect(self) -> None:
        logger.debug("Direct connection to git server, no tunnel needed")

    def close(self) -> None:
        pass
