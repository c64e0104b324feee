from collins_sync.core.types import AssetState, CollinsAsset


def test_attributes_are_upper_cased_and_case_insensitive():
    asset = CollinsAsset(tag="db1", attributes={"pool": "USERS"})
    assert asset.attributes == {"POOL": "USERS"}
    assert asset.attribute("Pool") == "USERS"
    assert asset.get("pool") == "USERS"


def test_get_reads_builtin_fields_and_state():
    asset = CollinsAsset(tag="db1", type="SERVER_NODE", status="ALLOCATED", state=AssetState(name="RUNNING"))
    assert asset.get("status") == "ALLOCATED"
    assert asset.get("tag") == "db1"
    assert asset.get("state").name == "RUNNING"
    assert asset.get("location") is None


def test_from_json_without_state_or_attributes():
    asset = CollinsAsset.from_json({"ASSET": {"TAG": "db2", "TYPE": "SERVER_NODE", "STATUS": "Unallocated"}})
    assert asset.state == AssetState()
    assert asset.attributes == {}
    assert asset.location is None
    assert asset.is_server_node()


def test_none_attribute_value_becomes_empty_string():
    asset = CollinsAsset(tag="db1", attributes={"pool": None})
    assert asset.attributes == {"POOL": ""}
