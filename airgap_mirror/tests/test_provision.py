"""
Tests for the mirror host provisioning client.
"""

from unittest.mock import MagicMock

import pytest
import requests
from pydantic import SecretStr

from airgap_mirror.core.config import GitServerConfig
from airgap_mirror.core.exceptions import ProvisioningError
from airgap_mirror.core.provision import REQUEST_TIMEOUT, GitServerClient

BASE_URL = "http://127.0.0.1:3000/api/v1"


class RecordingTunnel:
    """Tunnel double recording connect/close calls."""

    events = []

    def connect(self):
        self.events.append("connect")

    def close(self):
        self.events.append("close")


@pytest.fixture
def config():
    return GitServerConfig(
        push_password=SecretStr("push-secret"),
        read_password=SecretStr("read-secret"),
    )


@pytest.fixture
def tunnel_events():
    RecordingTunnel.events = []
    return RecordingTunnel.events


def _response(status_code, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


def _client(config, *responses):
    session = MagicMock()
    session.request.side_effect = list(responses)
    return GitServerClient(config, tunnel_factory=RecordingTunnel, session=session), session


def test_create_org(config, tunnel_events):
    client, session = _client(config, _response(201))

    client.create_org()

    session.request.assert_called_once_with(
        "POST",
        f"{BASE_URL}/orgs",
        json={"username": "mirror", "visibility": "limited"},
        auth=("mirror-git-user", "push-secret"),
        headers={"accept": "application/json", "Content-Type": "application/json"},
        timeout=REQUEST_TIMEOUT,
    )
    assert tunnel_events == ["connect", "close"]


def test_create_org_failure_status(config, tunnel_events):
    client, _ = _client(config, _response(422, '{"message": "org already exists"}'))

    with pytest.raises(ProvisioningError, match="create mirror org"):
        client.create_org()

    assert tunnel_events == ["connect", "close"]


def test_transport_error(config, tunnel_events):
    client, _ = _client(config, requests.ConnectionError("connection refused"))

    with pytest.raises(ProvisioningError, match="connection refused"):
        client.create_org()

    assert tunnel_events == ["connect", "close"]


def test_create_read_only_user(config, tunnel_events):
    client, session = _client(config, _response(201), _response(200))

    client.create_read_only_user()

    create_call, update_call = session.request.call_args_list
    assert create_call.args == ("POST", f"{BASE_URL}/admin/users")
    assert create_call.kwargs["json"] == {
        "username": "mirror-git-read-user",
        "password": "read-secret",
        "email": "mirror-reader@localhost.local",
        "must_change_password": False,
    }
    assert update_call.args == ("PATCH", f"{BASE_URL}/admin/users/mirror-git-read-user")
    assert update_call.kwargs["json"] == {
        "email": "mirror-reader@localhost.local",
        "max_repo_creation": 0,
        "allow_create_organization": False,
    }
    assert tunnel_events == ["connect", "close"]


def test_create_read_only_user_stops_after_failed_create(config, tunnel_events):
    client, session = _client(config, _response(500, "boom"))

    with pytest.raises(ProvisioningError, match="create read-only user"):
        client.create_read_only_user()

    assert session.request.call_count == 1
    assert tunnel_events == ["connect", "close"]


def test_create_read_only_user_failed_update(config, tunnel_events):
    client, _ = _client(config, _response(201), _response(403, "forbidden"))

    with pytest.raises(ProvisioningError, match="update read-only user"):
        client.create_read_only_user()


def test_add_read_only_user_defaults_to_push_user_namespace(config, tunnel_events):
    client, session = _client(config, _response(204))

    client.add_read_only_user("mirror__github.com__org__repo.git")

    session.request.assert_called_once()
    args, kwargs = session.request.call_args
    assert args == (
        "PUT",
        f"{BASE_URL}/repos/mirror-git-user/mirror__github.com__org__repo.git"
        "/collaborators/mirror-git-read-user",
    )
    assert kwargs["json"] == {"permission": "read"}
    assert tunnel_events == ["connect", "close"]


def test_add_read_only_user_with_owner(config, tunnel_events):
    client, session = _client(config, _response(204))

    client.add_read_only_user("repo", owner="mirror")

    assert session.request.call_args.args[1] == (
        f"{BASE_URL}/repos/mirror/repo/collaborators/mirror-git-read-user"
    )


def test_add_read_only_user_failure(config, tunnel_events):
    client, _ = _client(config, _response(404, "not found"))

    with pytest.raises(ProvisioningError, match="add read-only user"):
        client.add_read_only_user("repo")
