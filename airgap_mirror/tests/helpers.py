"""
Helpers for building small on-disk git repositories with dulwich.
"""

from pathlib import Path
from typing import Dict, Optional

from dulwich.objects import Blob, Commit, Tree
from dulwich.repo import Repo


def make_commit(repo: Repo, message: str, parent: Optional[bytes] = None) -> str:
    """Create a commit holding one file and return its hex hash."""
    blob = Blob.from_string(message.encode())
    tree = Tree()
    tree.add(b"README", 0o100644, blob.id)

    commit = Commit()
    commit.tree = tree.id
    commit.parents = [parent] if parent else []
    commit.author = commit.committer = b"Test User <test@example.com>"
    commit.author_time = commit.commit_time = 1700000000
    commit.author_timezone = commit.commit_timezone = 0
    commit.encoding = b"UTF-8"
    commit.message = message.encode()

    for obj in (blob, tree, commit):
        repo.object_store.add_object(obj)
    return commit.id.decode()


def set_refs(repo_path: Path, refs: Dict[str, str], head: Optional[str] = None) -> None:
    """Set direct references, and point HEAD at ``head`` if given."""
    with Repo(str(repo_path)) as repo:
        for name, sha in refs.items():
            repo.refs[name.encode()] = sha.encode()
        if head is not None:
            repo.refs.set_symbolic_ref(b"HEAD", head.encode())


def read_refs(repo_path: Path) -> Dict[str, bytes]:
    """Raw contents of every reference, symbolic references unresolved."""
    with Repo(str(repo_path)) as repo:
        return {name.decode(): repo.refs.read_ref(name) for name in repo.refs.allkeys()}
