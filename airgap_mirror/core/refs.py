"""
Reference-set surgery on a local git repository.

Provides one generic primitive, :func:`remove_references`, which deletes every
reference matching a predicate while never touching ``HEAD`` or the reference
``HEAD`` resolves to, plus named policies built on top of it. Removed
references are returned so they can later be written back with
:func:`add_refs`.

Every function opens the repository fresh and closes it before returning.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from dulwich.errors import NotGitRepository, RefFormatError
from dulwich.file import FileLocked, ensure_dir_exists
from dulwich.refs import SYMREF, SymrefLoop, check_ref_format
from dulwich.repo import Repo

from airgap_mirror.core.exceptions import (
    HeadResolutionError,
    OpenError,
    RemovalError,
    RestoreError,
)

# Configure logging
logger = logging.getLogger(__name__)

HEAD = "HEAD"
BRANCH_PREFIX = "refs/heads/"
TAG_PREFIX = "refs/tags/"
REMOTE_PREFIX = "refs/remotes/"
ONLINE_REMOTE_NAME = "online-upstream"
ONLINE_REMOTE_REF_PREFIX = REMOTE_PREFIX + ONLINE_REMOTE_NAME + "/"

RepoPath = Union[str, "os.PathLike[str]"]

# Errors the dulwich refs container raises when it cannot write a ref file
_STORE_ERRORS = (OSError, FileLocked, RefFormatError)


@dataclass(frozen=True)
class Reference:
    """A named pointer to a commit hash, or to another reference."""

    name: str
    target: str
    symbolic: bool = False

    @property
    def hash(self) -> Optional[str]:
        """Commit hash for direct references, None for symbolic ones."""
        return None if self.symbolic else self.target

    @property
    def is_branch(self) -> bool:
        return self.name.startswith(BRANCH_PREFIX)

    @property
    def is_tag(self) -> bool:
        return self.name.startswith(TAG_PREFIX)

    @property
    def is_remote(self) -> bool:
        return self.name.startswith(REMOTE_PREFIX)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "target": self.target, "symbolic": self.symbolic}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reference":
        return cls(
            name=data["name"], target=data["target"], symbolic=bool(data.get("symbolic", False))
        )


ReferencePredicate = Callable[[Reference], bool]


def is_local_branch() -> ReferencePredicate:
    """Match references in the local branch namespace."""
    return lambda ref: ref.is_branch


def is_online_remote_ref(prefix: str = ONLINE_REMOTE_REF_PREFIX) -> ReferencePredicate:
    """Match remote-tracking references left over from an earlier mirror cycle."""
    return lambda ref: ref.name.startswith(prefix)


def is_head_copy(head_hash: str) -> ReferencePredicate:
    """Match non-tag references pointing at the same commit as HEAD."""
    # Tags are release markers and are kept even when they duplicate HEAD
    return lambda ref: not ref.is_tag and ref.hash == head_hash


def open_repository(repo_path: RepoPath) -> Repo:
    """
    Open the git repository at ``repo_path``.

    Raises:
        OpenError: If the path is not a valid repository
    """
    try:
        return Repo(os.fspath(repo_path))
    except (NotGitRepository, OSError) as e:
        logger.error("Unable to open git repository %s: %s", repo_path, e)
        raise OpenError(f"Not a valid git repo or unable to open {repo_path}") from e


def _read_reference(repo: Repo, name: bytes) -> Optional[Reference]:
    """Read a single reference without following it."""
    contents = repo.refs.read_ref(name)
    if not contents:
        return None
    if contents.startswith(SYMREF):
        return Reference(
            name=name.decode(), target=contents[len(SYMREF) :].decode(), symbolic=True
        )
    return Reference(name=name.decode(), target=contents.decode())


def _list_references(repo: Repo) -> List[Reference]:
    references = []
    for name in sorted(repo.refs.allkeys()):
        ref = _read_reference(repo, name)
        if ref is not None:
            references.append(ref)
    return references


def _resolve_head(repo: Repo, repo_path: RepoPath) -> Tuple[str, str]:
    """Return the name HEAD resolves to and its commit hash."""
    try:
        names, sha = repo.refs.follow(HEAD.encode())
    except (SymrefLoop, KeyError) as e:
        raise HeadResolutionError(f"Failed to resolve HEAD of {repo_path}: {e}") from e

    if sha is None:
        raise HeadResolutionError(
            f"Failed to resolve HEAD of {repo_path}: {names[-1].decode()} has no commits"
        )

    return names[-1].decode(), sha.decode()


def list_references(repo_path: RepoPath) -> List[Reference]:
    """List every reference of the repository, sorted by name."""
    with open_repository(repo_path) as repo:
        return _list_references(repo)


def resolve_head(repo_path: RepoPath) -> Tuple[str, str]:
    """
    Resolve HEAD of the repository at ``repo_path``.

    Returns:
        Tuple of (name HEAD resolves to, commit hash). The name is ``HEAD``
        itself when HEAD is detached.

    Raises:
        OpenError: If the path is not a valid repository
        HeadResolutionError: If HEAD does not point at a commit
    """
    with open_repository(repo_path) as repo:
        return _resolve_head(repo, repo_path)


def _remove_reference(repo: Repo, ref: Reference) -> None:
    # remove_if_equals does not follow symbolic references
    if not repo.refs.remove_if_equals(ref.name.encode(), None):
        raise RemovalError(f"Reference store refused to remove {ref.name}")


def _set_reference(repo: Repo, ref: Reference) -> None:
    name = ref.name.encode()
    if ref.symbolic:
        # set_symbolic_ref does not create missing parent directories
        ensure_dir_exists(os.path.dirname(repo.refs.refpath(name)))
        repo.refs.set_symbolic_ref(name, ref.target.encode())
        return

    # set_if_equals writes through symbolic refs, drop one occupying the name
    current = repo.refs.read_loose_ref(name)
    if current and current.startswith(SYMREF):
        repo.refs.remove_if_equals(name, None)

    if not repo.refs.set_if_equals(name, None, ref.target.encode()):
        raise RestoreError(f"Reference store refused to set {ref.name}")


def _set_references(repo: Repo, repo_path: RepoPath, refs: Iterable[Reference]) -> None:
    for ref in refs:
        try:
            _set_reference(repo, ref)
        except _STORE_ERRORS as e:
            logger.error("Failed to add reference %s to %s: %s", ref.name, repo_path, e)
            raise RestoreError(f"Failed to add references to {repo_path}: {e}") from e


def remove_references(
    repo_path: RepoPath,
    should_remove: ReferencePredicate,
    rollback_on_error: bool = False,
) -> List[Reference]:
    """
    Remove every reference matching ``should_remove``.

    HEAD and the reference HEAD resolves to are never removed, whatever the
    predicate says. The predicate is not evaluated for them.

    Deletion is not transactional: when a deletion fails, references removed
    before the failure stay removed and nothing is returned. Pass
    ``rollback_on_error=True`` to write them back before the error is raised.

    Args:
        repo_path: Path of the local repository
        should_remove: Predicate selecting the references to delete
        rollback_on_error: Restore already removed references on failure

    Returns:
        The removed references, in enumeration order

    Raises:
        OpenError: If the path is not a valid repository
        HeadResolutionError: If HEAD cannot be resolved
        RemovalError: If a deletion fails
        RestoreError: If rolling back after a failed deletion fails too
    """
    logger.debug("Remove git references %s", repo_path)
    with open_repository(repo_path) as repo:
        head_name, _ = _resolve_head(repo, repo_path)

        removed_refs: List[Reference] = []
        for ref in _list_references(repo):
            if ref.name in (HEAD, head_name) or not should_remove(ref):
                continue

            try:
                _remove_reference(repo, ref)
            except (RemovalError, *_STORE_ERRORS) as e:
                logger.error("Failed to remove reference %s from %s: %s", ref.name, repo_path, e)
                if rollback_on_error and removed_refs:
                    logger.info(
                        "Rolling back %d removed references in %s", len(removed_refs), repo_path
                    )
                    _set_references(repo, repo_path, removed_refs)
                raise RemovalError(f"Failed to remove references from {repo_path}: {e}") from e

            removed_refs.append(ref)

    logger.debug("Removed %d references from %s", len(removed_refs), repo_path)
    return removed_refs


def remove_local_branch_refs(repo_path: RepoPath) -> List[Reference]:
    """Remove all local branch references, returning the removed ones."""
    return remove_references(repo_path, is_local_branch())


def remove_online_remote_refs(repo_path: RepoPath) -> List[Reference]:
    """Remove all references pointing to the online-upstream remote."""
    return remove_references(repo_path, is_online_remote_ref())


def remove_head_copies(repo_path: RepoPath) -> List[Reference]:
    """
    Remove references that are not HEAD but point at HEAD's commit.

    Tags are never removed.

    Raises:
        HeadResolutionError: If HEAD cannot be resolved
    """
    logger.debug("Remove head copies for %s", repo_path)
    _, head_hash = resolve_head(repo_path)
    return remove_references(repo_path, is_head_copy(head_hash))


def add_refs(repo_path: RepoPath, refs: Iterable[Reference]) -> None:
    """
    Write back references, typically ones returned by a removal.

    References are set by name, so the last occurrence of a name wins.
    Stops at the first failure; references written before it are kept.

    Raises:
        OpenError: If the path is not a valid repository
        RestoreError: If a reference cannot be set
    """
    logger.debug("Add git refs %s", repo_path)
    with open_repository(repo_path) as repo:
        _set_references(repo, repo_path, refs)


def delete_branch_if_exists(repo_path: RepoPath, branch_name: str) -> None:
    """
    Ensure the given branch does not exist.

    Both the branch configuration section and the branch reference are
    removed. Either one already being absent is not an error.

    Args:
        repo_path: Path of the local repository
        branch_name: Short name ("feature") or full name ("refs/heads/feature")

    Raises:
        OpenError: If the path is not a valid repository
        RemovalError: If the branch name is invalid, or the configuration or
            the reference cannot be removed
    """
    short_name = branch_name
    if short_name.startswith(BRANCH_PREFIX):
        short_name = short_name[len(BRANCH_PREFIX) :]
    ref_name = BRANCH_PREFIX + short_name
    if not check_ref_format(ref_name.encode()):
        logger.error("Invalid branch name %s for %s", branch_name, repo_path)
        raise RemovalError(f"Invalid branch name {branch_name} for {repo_path}")

    logger.debug("Delete branch %s for %s if it exists", ref_name, repo_path)
    with open_repository(repo_path) as repo:
        config = repo.get_config()
        section = (b"branch", short_name.encode())
        if config.has_section(section):
            del config[section]
            try:
                config.write_to_path()
            except OSError as e:
                logger.error("Failed to delete branch %s in %s: %s", short_name, repo_path, e)
                raise RemovalError(f"Failed to delete branch {short_name} in {repo_path}") from e
        else:
            logger.debug("Branch %s is not configured in %s", short_name, repo_path)

        # Membership also loads packed refs, which the removal relies on
        if ref_name.encode() not in repo.refs:
            logger.debug("Branch reference %s does not exist in %s", ref_name, repo_path)
            return

        try:
            _remove_reference(repo, Reference(name=ref_name, target=""))
        except (RemovalError, *_STORE_ERRORS) as e:
            logger.error("Failed to delete branch reference %s in %s: %s", ref_name, repo_path, e)
            raise RemovalError(
                f"Failed to delete branch reference {ref_name} in {repo_path}"
            ) from e
