"""
Shared fixtures: small on-disk git repositories built with dulwich.
"""

from dataclasses import dataclass
from pathlib import Path

import pytest
from dulwich.repo import Repo

from airgap_mirror.tests.helpers import make_commit, set_refs


@dataclass
class SampleRepo:
    """Path of a test repository and the commits its references use."""

    path: Path
    head_hash: str
    old_hash: str


@pytest.fixture
def empty_repo(tmp_path):
    """A freshly initialized repository without any commit."""
    path = tmp_path / "empty"
    path.mkdir()
    Repo.init(str(path)).close()
    return path


@pytest.fixture
def repo(tmp_path):
    """
    Repository with two commits.

    HEAD -> refs/heads/main, and refs/heads/feature plus the lightweight tag
    refs/tags/v1 on the same commit as main. refs/heads/old points at an
    older commit.
    """
    path = tmp_path / "repo"
    path.mkdir()
    with Repo.init(str(path)) as r:
        first = make_commit(r, "first")
        second = make_commit(r, "second", parent=first.encode())

    set_refs(
        path,
        {
            "refs/heads/main": second,
            "refs/heads/feature": second,
            "refs/heads/old": first,
            "refs/tags/v1": second,
        },
        head="refs/heads/main",
    )
    return SampleRepo(path=path, head_hash=second, old_hash=first)
