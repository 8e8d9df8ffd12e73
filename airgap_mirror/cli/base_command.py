"""
Base command utilities for standardizing CLI interfaces.
"""

import argparse
import logging
import sys
import traceback
from typing import Any, Callable, List, Optional, Sequence

from dotenv import load_dotenv
from pydantic import SecretStr

from airgap_mirror.core.config import (
    DEFAULT_ADDRESS,
    DEFAULT_ORG,
    DEFAULT_PORT,
    DEFAULT_PUSH_USER,
    DEFAULT_READ_USER,
    GitServerConfig,
    get_env_variable,
)
from airgap_mirror.core.exceptions import ConfigError, MirrorError


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure logging for the application with a standardized format.

    Args:
        level: Logging level (default: INFO)
    """
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(message)s",
        level=level,
    )
    # basicConfig is a no-op once handlers exist, --debug still has to apply
    logging.getLogger().setLevel(level)


class BaseCommand:
    """Base class for standardizing command-line interfaces."""

    def __init__(
        self,
        description: str,
        epilog: Optional[str] = None,
        formatter_class: Any = argparse.RawDescriptionHelpFormatter,
        prog: Optional[str] = None,
    ):
        """
        Initialize the base command.

        Args:
            description: Command description for help text
            epilog: Optional epilog text for help output
            formatter_class: Argument parser formatter class
            prog: Program name shown in usage (default: from sys.argv)
        """
        # Setup logging
        setup_logging()

        # Load environment variables
        load_dotenv()

        # Create parser
        self.parser = argparse.ArgumentParser(
            prog=prog, description=description, epilog=epilog, formatter_class=formatter_class
        )

        # Add common argument groups
        self.connection_group = self.parser.add_argument_group("Git Server Connection")
        self.behavior_group = self.parser.add_argument_group("Behavior")
        self.debug_group = self.parser.add_argument_group("Debug Options")

        # Add standard arguments
        self._add_standard_arguments()

    def _add_standard_arguments(self) -> None:
        """Add standard arguments that apply to most commands."""
        self.debug_group.add_argument("--debug", help="Enable debug logging", action="store_true")

    def add_server_connection_args(self) -> None:
        """Add mirror host connection arguments for commands that need them."""
        self.connection_group.add_argument(
            "--server-address",
            help="Git server address (default: from GIT_SERVER_ADDRESS env var)",
            default=get_env_variable("GIT_SERVER_ADDRESS") or DEFAULT_ADDRESS,
        )
        self.connection_group.add_argument(
            "--server-port",
            help="Git server port (default: from GIT_SERVER_PORT env var)",
            default=get_env_variable("GIT_SERVER_PORT") or str(DEFAULT_PORT),
        )
        self.connection_group.add_argument(
            "--push-username",
            help="Push user name (default: from GIT_PUSH_USERNAME env var)",
            default=get_env_variable("GIT_PUSH_USERNAME") or DEFAULT_PUSH_USER,
        )
        self.connection_group.add_argument(
            "--push-password",
            help="Push user password (default: from GIT_PUSH_PASSWORD env var)",
            default=get_env_variable("GIT_PUSH_PASSWORD"),
        )
        self.connection_group.add_argument(
            "--read-username",
            help="Read-only user name (default: from GIT_READ_USERNAME env var)",
            default=get_env_variable("GIT_READ_USERNAME") or DEFAULT_READ_USER,
        )
        self.connection_group.add_argument(
            "--read-password",
            help="Read-only user password (default: from GIT_READ_PASSWORD env var)",
            default=get_env_variable("GIT_READ_PASSWORD"),
        )
        self.connection_group.add_argument(
            "--org",
            help="Organization holding the mirrors (default: from GIT_MIRROR_ORG env var)",
            default=get_env_variable("GIT_MIRROR_ORG") or DEFAULT_ORG,
        )

    def build_server_config(self, args: argparse.Namespace) -> GitServerConfig:
        """
        Build the git server configuration from parsed arguments.

        Raises:
            ConfigError: If the arguments do not form a valid configuration
        """
        try:
            return GitServerConfig(
                address=args.server_address,
                port=int(args.server_port),
                push_username=args.push_username,
                push_password=SecretStr(args.push_password or ""),
                read_username=args.read_username,
                read_password=SecretStr(args.read_password or ""),
                org=args.org,
            )
        except ValueError as e:
            raise ConfigError(f"Configuration validation error: {e}") from e

    def parse_args(self, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
        """
        Parse command line arguments.

        Args:
            argv: Arguments to parse (default: sys.argv[1:])

        Returns:
            Parsed command line arguments
        """
        args = self.parser.parse_args(argv)

        # Enable debug logging if requested
        if args.debug:
            setup_logging(logging.DEBUG)

        return args

    def verify_required_args(self, args: argparse.Namespace, required_args: List[str]) -> None:
        """
        Verify required arguments are present.

        Args:
            args: Parsed command line arguments
            required_args: List of required argument names

        Raises:
            SystemExit: If any required arguments are missing
        """
        missing = []
        for arg_name in required_args:
            if not getattr(args, arg_name.replace("-", "_")):
                missing.append(arg_name)

        if missing:
            self.parser.error(f"Missing required arguments: {', '.join(missing)}")

    def run_command(self, command_func: Callable, *args, **kwargs) -> None:
        """
        Run the command function with standardized error handling.

        Args:
            command_func: Function to run
            *args: Positional arguments for the command function
            **kwargs: Keyword arguments for the command function
        """
        try:
            command_func(*args, **kwargs)
        except ConfigError as e:
            logging.error("Configuration error: %s", e)
            sys.exit(1)
        except MirrorError as e:
            logging.error("Mirror operation failed: %s", e)
            sys.exit(2)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logging.error("Unexpected error: %s", e)
            traceback.print_exc()
            sys.exit(3)
