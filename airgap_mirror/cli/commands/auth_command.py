"""
Command-line implementation for looking up stored git credentials.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from airgap_mirror.cli.base_command import BaseCommand
from airgap_mirror.utils.credentials import find_auth_for_host

logger = logging.getLogger(__name__)


def show_auth(url: str, credentials_file: Optional[str] = None) -> None:
    """Print the user name stored for ``url``, never the password."""
    credential = find_auth_for_host(url, Path(credentials_file) if credentials_file else None)
    if credential.is_empty:
        print(f"No credentials found for {url}")
        return
    print(f"{credential.path}: {credential.username}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the auth command."""
    command = BaseCommand(
        description="Show which stored git credential would be used for a URL.",
    )
    command.parser.add_argument("url", help="Repository or host URL")
    command.parser.add_argument(
        "--credentials-file", help="Credential store to read (default: ~/.git-credentials)"
    )

    args = command.parse_args(argv)
    command.run_command(show_auth, args.url, args.credentials_file)


if __name__ == "__main__":
    main()
