"""
Command-line implementation for rewriting git URLs to their mirror location.

Reads files (or stdin), replaces every upstream ``.git`` URL with the matching
repository under the push user on the mirror host, and writes the result to
stdout or back to the file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from airgap_mirror.cli.base_command import BaseCommand
from airgap_mirror.core.config import DEFAULT_PUSH_USER, get_env_variable
from airgap_mirror.core.exceptions import MirrorError
from airgap_mirror.core.urls import mutate_git_urls_in_text

logger = logging.getLogger(__name__)


def rewrite_files(
    host: str,
    files: Sequence[str],
    push_user: str = DEFAULT_PUSH_USER,
    in_place: bool = False,
) -> None:
    """
    Rewrite git URLs in each file.

    Args:
        host: Base URL of the mirror host
        files: Paths to rewrite, "-" for stdin
        push_user: Namespace the mirrors live under
        in_place: Write the result back instead of printing it

    Raises:
        MirrorError: If a file cannot be read or written
    """
    for file_name in files:
        if file_name == "-":
            sys.stdout.write(mutate_git_urls_in_text(host, sys.stdin.read(), push_user))
            continue

        path = Path(file_name)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise MirrorError(f"Unable to read {path}: {e}") from e

        output = mutate_git_urls_in_text(host, text, push_user)

        if not in_place:
            sys.stdout.write(output)
            continue

        if output == text:
            logger.info("No git URLs to rewrite in %s", path)
            continue

        try:
            path.write_text(output, encoding="utf-8")
        except OSError as e:
            raise MirrorError(f"Unable to write {path}: {e}") from e
        logger.info("Rewrote git URLs in %s", path)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the rewrite command."""
    command = BaseCommand(
        description="Rewrite git URLs in text files to point at the internal mirror.",
        epilog="""
Examples:
    airgap-mirror-rewrite --host http://127.0.0.1:3000 manifest.yaml
    cat values.yaml | airgap-mirror-rewrite --host http://git.local -
    airgap-mirror-rewrite --in-place manifests/*.yaml

Environment Variables:
    MIRROR_GIT_URL       Base URL of the mirror host
    GIT_PUSH_USERNAME    User namespace the mirrors are pushed under

URLs that already point at the push user namespace are left untouched.
        """,
    )
    command.behavior_group.add_argument(
        "--host",
        help="Mirror host base URL (default: from MIRROR_GIT_URL env var)",
        default=get_env_variable("MIRROR_GIT_URL"),
    )
    command.behavior_group.add_argument(
        "--push-user",
        help="Push user namespace (default: from GIT_PUSH_USERNAME env var)",
        default=get_env_variable("GIT_PUSH_USERNAME") or DEFAULT_PUSH_USER,
    )
    command.behavior_group.add_argument(
        "--in-place",
        help="Rewrite files in place instead of printing to stdout",
        action="store_true",
        default=False,
    )
    command.parser.add_argument("files", nargs="+", help="Files to rewrite, '-' for stdin")

    args = command.parse_args(argv)
    command.verify_required_args(args, ["host"])

    command.run_command(rewrite_files, args.host, args.files, args.push_user, args.in_place)


if __name__ == "__main__":
    main()
