from collins_sync.client.memory import InMemoryCollins
from collins_sync.core.config import CollinsConfig
from collins_sync.core.types import AssetState, CollinsAsset
from collins_sync.engine.context import CollinsContext
from collins_sync.mixin import CollinsMixin


class Server(CollinsMixin):
    def __init__(self, tag: str, context: CollinsContext) -> None:
        self.tag = tag
        self.collins_context = context

    def collins_asset(self):
        return self.collins_context.get_asset(self.tag)

    def __str__(self) -> str:
        return self.tag


def make_asset(**kwargs) -> CollinsAsset:
    defaults = dict(
        tag="db1",
        type="SERVER_NODE",
        status="ALLOCATED",
        state=AssetState(name="RUNNING"),
        location="DC1",
        attributes={"POOL": "USERS", "PRIMARY_ROLE": "MASTER"},
    )
    defaults.update(kwargs)
    return CollinsAsset(**defaults)


def make_server(*assets: CollinsAsset, tag: str = "db1") -> Server:
    collins = InMemoryCollins()
    for asset in assets:
        collins.add(asset)
    ctx = CollinsContext(config=CollinsConfig(datacenter="dc1"), service=collins, emit=lambda m: None)
    return Server(tag, ctx)


def test_single_field_returns_raw_value():
    server = make_server(make_asset())
    assert server.collins_get("pool") == "USERS"
    assert server.collins_get("status") == "ALLOCATED"


def test_single_state_returns_state_name():
    server = make_server(make_asset())
    assert server.collins_get("state") == "RUNNING"


def test_single_field_without_asset_is_empty_string():
    server = make_server(tag="missing")
    assert server.collins_get("pool") == ""
    assert server.collins_get("state") == ""


def test_unset_attribute_reads_as_none():
    server = make_server(make_asset())
    assert server.collins_get("secondary_role") is None


def test_multiple_fields_return_mapping_with_asset():
    asset = make_asset()
    server = make_server(asset)

    result = server.collins_get("pool", "primary_role", "state")

    assert result["pool"] == "USERS"
    assert result["primary_role"] == "MASTER"
    assert result["state"] == "RUNNING"
    assert result["asset"] == asset


def test_multiple_fields_without_asset():
    server = make_server(tag="missing")

    result = server.collins_get("pool", "state")

    assert result == {"pool": "", "state": "", "asset": None}


def test_single_element_list_still_returns_mapping():
    # A one element list takes the multi field path and returns a dict,
    # unlike a bare field. Kept as observed behavior.
    server = make_server(make_asset())

    result = server.collins_get(["pool"])

    assert isinstance(result, dict)
    assert result["pool"] == "USERS"
    assert "asset" in result


def test_duplicate_state_is_resolved_once():
    server = make_server(make_asset())

    result = server.collins_get(["state", "pool", "state"])

    assert result == {"pool": "USERS", "state": "RUNNING", "asset": result["asset"]}


def test_no_fields_returns_none():
    server = make_server(make_asset())
    assert server.collins_get() is None


def test_reads_ignore_locality():
    server = make_server(make_asset(location="DC2"))
    assert server.collins_get("pool") == "USERS"


def test_state_field_name_is_case_insensitive():
    server = make_server(make_asset())

    assert server.collins_get("STATE") == "RUNNING"
    assert server.collins_get("POOL") == "USERS"

    result = server.collins_get(["STATE", "Pool"])
    assert result["STATE"] == "RUNNING"
    assert result["Pool"] == "USERS"
