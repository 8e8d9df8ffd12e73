"""
Command-line implementation for reference surgery on a local repository.

Strips classes of references before a repository is pushed to the mirror,
saves what was removed to a JSON file, and restores it afterwards.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from airgap_mirror.cli.base_command import BaseCommand
from airgap_mirror.core.exceptions import ConfigError, MirrorError
from airgap_mirror.core.refs import (
    Reference,
    add_refs,
    delete_branch_if_exists,
    is_head_copy,
    is_local_branch,
    is_online_remote_ref,
    list_references,
    remove_references,
    resolve_head,
)

logger = logging.getLogger(__name__)


def save_refs(refs: List[Reference], save_file: Path) -> None:
    """Write removed references to a JSON file."""
    try:
        with open(save_file, "w", encoding="utf-8") as f:
            json.dump([ref.to_dict() for ref in refs], f, indent=2)
    except OSError as e:
        raise MirrorError(f"Unable to save removed references to {save_file}: {e}") from e
    logger.info("Saved %d removed references to %s", len(refs), save_file)


def load_refs(save_file: Path) -> List[Reference]:
    """Read references saved by :func:`save_refs`."""
    try:
        with open(save_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        return [Reference.from_dict(item) for item in data]
    except OSError as e:
        raise ConfigError(f"Unable to read saved references from {save_file}: {e}") from e
    except (ValueError, KeyError, TypeError) as e:
        raise ConfigError(f"Invalid saved references file {save_file}: {e}") from e


def strip_refs(
    repo_path: str,
    online_remote: bool = False,
    local_branches: bool = False,
    head_copies: bool = False,
    save_file: Optional[str] = None,
    rollback_on_error: bool = False,
) -> List[Reference]:
    """
    Strip the selected classes of references from a repository.

    Steps run in a fixed order: online-remote refs, local branches, then
    HEAD copies. When ``save_file`` is given, everything removed so far is
    saved even if a later step fails.

    Returns:
        All removed references
    """
    steps = []
    if online_remote:
        steps.append(("online-remote", is_online_remote_ref))
    if local_branches:
        steps.append(("local-branch", is_local_branch))
    if head_copies:
        steps.append(("head-copy", lambda: is_head_copy(resolve_head(repo_path)[1])))

    removed: List[Reference] = []
    try:
        for step_name, make_predicate in steps:
            step_removed = remove_references(
                repo_path, make_predicate(), rollback_on_error=rollback_on_error
            )
            logger.info("Removed %d %s references", len(step_removed), step_name)
            removed.extend(step_removed)
    finally:
        if save_file:
            save_refs(removed, Path(save_file))

    print("\n===== REFERENCE STRIP SUMMARY =====")
    print(f"Repository: {repo_path}")
    print(f"References removed: {len(removed)}")
    for ref in removed:
        print(f"  - {ref.name}")

    return removed


def restore_refs(repo_path: str, save_file: str) -> None:
    """Restore references saved by a previous strip."""
    refs = load_refs(Path(save_file))
    add_refs(repo_path, refs)
    print(f"Restored {len(refs)} references to {repo_path}")


def print_refs(repo_path: str) -> None:
    """Print every reference of the repository."""
    for ref in list_references(repo_path):
        if ref.symbolic:
            print(f"{ref.name} -> {ref.target}")
        else:
            print(f"{ref.name} {ref.target}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the refs command."""
    command = BaseCommand(
        description="Strip, restore and inspect references of a local git repository.",
        epilog="""
Examples:
    airgap-mirror-refs strip ./repo --local-branches --head-copies --save removed.json
    airgap-mirror-refs restore ./repo --from removed.json
    airgap-mirror-refs delete-branch ./repo feature
    airgap-mirror-refs list ./repo

HEAD and the reference HEAD points to are never removed.
        """,
    )
    actions = command.parser.add_subparsers(dest="action", required=True)

    strip_parser = actions.add_parser("strip", help="Remove classes of references")
    strip_parser.add_argument("repo", help="Path of the local repository")
    strip_parser.add_argument(
        "--online-remote",
        help="Remove refs/remotes/online-upstream/* references",
        action="store_true",
    )
    strip_parser.add_argument(
        "--local-branches", help="Remove local branch references", action="store_true"
    )
    strip_parser.add_argument(
        "--head-copies",
        help="Remove non-tag references pointing at HEAD's commit",
        action="store_true",
    )
    strip_parser.add_argument("--save", help="JSON file to save removed references to")
    strip_parser.add_argument(
        "--rollback-on-error",
        help="Write back removed references if a removal fails",
        action="store_true",
    )

    restore_parser = actions.add_parser("restore", help="Restore saved references")
    restore_parser.add_argument("repo", help="Path of the local repository")
    restore_parser.add_argument(
        "--from", dest="save_file", required=True, help="JSON file written by strip --save"
    )

    delete_parser = actions.add_parser("delete-branch", help="Delete a branch if it exists")
    delete_parser.add_argument("repo", help="Path of the local repository")
    delete_parser.add_argument("branch", help="Branch name")

    list_parser = actions.add_parser("list", help="List references")
    list_parser.add_argument("repo", help="Path of the local repository")

    args = command.parse_args(argv)

    if args.action == "strip":
        if not (args.online_remote or args.local_branches or args.head_copies):
            command.parser.error(
                "No reference class selected. Specify at least one of: "
                "--online-remote, --local-branches, --head-copies"
            )
        command.run_command(
            strip_refs,
            args.repo,
            online_remote=args.online_remote,
            local_branches=args.local_branches,
            head_copies=args.head_copies,
            save_file=args.save,
            rollback_on_error=args.rollback_on_error,
        )
    elif args.action == "restore":
        command.run_command(restore_refs, args.repo, args.save_file)
    elif args.action == "delete-branch":
        command.run_command(delete_branch_if_exists, args.repo, args.branch)
    else:
        command.run_command(print_refs, args.repo)


if __name__ == "__main__":
    main()
