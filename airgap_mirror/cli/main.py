"""
Command-line interface for the air-gapped mirroring tool.
"""

import argparse
import sys
from typing import Optional, Sequence

from airgap_mirror.cli.commands import (
    auth_command,
    provision_command,
    refs_command,
    rewrite_command,
)

COMMANDS = {
    "auth": auth_command.main,
    "provision": provision_command.main,
    "refs": refs_command.main,
    "rewrite": rewrite_command.main,
}


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the CLI tool."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = argparse.ArgumentParser(
        description="Air-gapped git mirroring tool",
        epilog="Run '%(prog)s <command> --help' for the options of a command.",
    )
    parser.add_argument("command", choices=sorted(COMMANDS), help="Command to run")

    # Everything after the command name belongs to the command itself
    args = parser.parse_args(argv[:1])
    COMMANDS[args.command](argv[1:])


if __name__ == "__main__":
    main()
