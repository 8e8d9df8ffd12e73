"""
Command-line implementation for provisioning the mirror host.

Creates the mirror organization and the read-only user, and grants the
read-only user access to mirrored repositories.
"""

import logging
from typing import Optional, Sequence

from airgap_mirror.cli.base_command import BaseCommand
from airgap_mirror.core.provision import GitServerClient

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the provision command."""
    command = BaseCommand(
        description="Provision the organization and read-only user on the mirror git host.",
        epilog="""
Examples:
    airgap-mirror-provision create-org
    airgap-mirror-provision create-read-only-user
    airgap-mirror-provision grant-read mirror__github.com__org__repo.git

Environment Variables:
    GIT_SERVER_ADDRESS   Address of the git server (default: 127.0.0.1)
    GIT_SERVER_PORT      Port of the git server (default: 3000)
    GIT_PUSH_USERNAME    User the API calls authenticate as
    GIT_PUSH_PASSWORD    Password of the push user
    GIT_READ_USERNAME    Name of the read-only user
    GIT_READ_PASSWORD    Password of the read-only user
    GIT_MIRROR_ORG       Organization holding the mirrors
        """,
    )
    command.add_server_connection_args()

    actions = command.parser.add_subparsers(dest="action", required=True)
    actions.add_parser("create-org", help="Create the mirror organization")
    actions.add_parser("create-read-only-user", help="Create the read-only user")
    grant_parser = actions.add_parser(
        "grant-read", help="Give the read-only user read access to a repository"
    )
    grant_parser.add_argument("repo", help="Repository name on the mirror host")
    grant_parser.add_argument("--owner", help="Repository owner (default: the push user)")

    args = command.parse_args(argv)
    command.verify_required_args(args, ["push-password"])
    if args.action == "create-read-only-user":
        command.verify_required_args(args, ["read-password"])

    def _provision() -> None:
        client = GitServerClient(command.build_server_config(args))
        if args.action == "create-org":
            client.create_org()
        elif args.action == "create-read-only-user":
            client.create_read_only_user()
        else:
            client.add_read_only_user(args.repo, owner=args.owner)

    command.run_command(_provision)


if __name__ == "__main__":
    main()
