import base64

import pytest

from collins_sync.client.http import CollinsHttpClient
from collins_sync.core.config import CollinsConfig
from collins_sync.core.errors import CollinsRequestError, ConfigurationError
from collins_sync.core.types import CollinsAsset


class FakeHttp:
    """Records requests and replays canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, headers, params=None):
        self.requests.append((method, url, headers, dict(params or {})))
        return self.responses.pop(0)


ASSET_PAYLOAD = {
    "status": "success:ok",
    "data": {
        "ASSET": {
            "TAG": "db1",
            "TYPE": "SERVER_NODE",
            "STATUS": "Allocated",
            "STATE": {"ID": 3, "NAME": "RUNNING", "LABEL": "Running", "DESCRIPTION": "up"},
            "LOCATION": "DC1",
        },
        "ATTRIBS": {"0": {"POOL": "USERS", "PRIMARY_ROLE": "MASTER"}},
    },
}


def make_client(*responses) -> CollinsHttpClient:
    return CollinsHttpClient(
        base_url="https://collins.example.com/",
        username="jetpants",
        password="secret",
        http=FakeHttp(*responses),
    )


def test_get_asset_parses_payload_and_sends_basic_auth():
    client = make_client((200, ASSET_PAYLOAD))

    asset = client.get_asset("db1")

    assert asset is not None
    assert asset.status == "Allocated"
    assert asset.state.name == "RUNNING"
    assert asset.location == "DC1"
    assert asset.attribute("pool") == "USERS"

    method, url, headers, _ = client.http.requests[0]
    assert (method, url) == ("GET", "https://collins.example.com/api/asset/db1")
    expected = base64.b64encode(b"jetpants:secret").decode("ascii")
    assert headers["Authorization"] == f"Basic {expected}"


def test_get_asset_not_found_is_none():
    client = make_client((404, {}))
    assert client.get_asset("nope") is None


def test_get_asset_server_error_raises():
    client = make_client((500, {}))
    with pytest.raises(CollinsRequestError):
        client.get_asset("db1")


def test_set_status_with_state():
    client = make_client((200, {"data": {"SUCCESS": True}}))
    asset = CollinsAsset(tag="db1")

    assert client.set_status(asset, "Maintenance", "changed through jetpants", "RESTARTING")

    method, url, _, params = client.http.requests[0]
    assert (method, url) == ("POST", "https://collins.example.com/api/asset/db1/status")
    assert params == {"status": "Maintenance", "reason": "changed through jetpants", "state": "RESTARTING"}


def test_rejected_write_returns_false():
    client = make_client((400, {"status": "client_error"}), (200, {"data": {"SUCCESS": False}}))
    asset = CollinsAsset(tag="db1")

    assert not client.set_status(asset, "Maintenance")
    assert not client.set_attribute(asset, "POOL", "USERS")


def test_set_and_delete_attribute_requests():
    client = make_client((200, {"data": {"SUCCESS": True}}), (202, {}))
    asset = CollinsAsset(tag="db1")

    assert client.set_attribute(asset, "POOL", "USERS")
    assert client.delete_attribute(asset, "POOL")

    first, second = client.http.requests
    assert first[0:2] == ("POST", "https://collins.example.com/api/asset/db1")
    assert first[3] == {"attribute": "POOL;USERS"}
    assert second[0:2] == ("DELETE", "https://collins.example.com/api/asset/db1/attribute/POOL")


def test_state_create_request():
    client = make_client((201, {"data": {"SUCCESS": True}}))

    assert client.state_create("restarting", "restarting", "restarting", "Maintenance")

    method, url, _, params = client.http.requests[0]
    assert (method, url) == ("PUT", "https://collins.example.com/api/state/RESTARTING")
    assert params == {"label": "restarting", "description": "restarting", "status": "Maintenance"}


def test_find_assets_builds_selectors():
    client = make_client((200, {"data": {"Data": [ASSET_PAYLOAD["data"]]}}))

    found = client.find_assets({"pool": "users", "status": "Allocated"}, remote_lookup=True)

    assert [a.tag for a in found] == ["db1"]
    _, url, _, params = client.http.requests[0]
    assert url == "https://collins.example.com/api/assets"
    assert params["attribute"] == ["POOL;users"]
    assert params["status"] == "Allocated"
    assert params["remoteLookup"] == "true"


def test_from_config_requires_credentials():
    with pytest.raises(ConfigurationError, match="No Collins url set"):
        CollinsHttpClient.from_config(CollinsConfig(user="jetpants", password="secret"))


def test_plain_status_change_sends_no_reason():
    client = make_client((200, {"data": {"SUCCESS": True}}))

    assert client.set_status(CollinsAsset(tag="db1"), "Maintenance")

    assert client.http.requests[0][3] == {"status": "Maintenance"}
