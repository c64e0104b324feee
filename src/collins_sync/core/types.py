"""
Core types.

This file defines the asset handle the engine works against.

Important design choice
We keep a normalized, immutable view of a Collins asset instead of passing raw
json around. Every read is a fresh fetch, so a handle is a snapshot of the
asset at the moment it was resolved, never a cache that gets updated in place.

Attribute names
Collins stores attribute keys upper case. Lookups are case insensitive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

SERVER_NODE = "server_node"

BUILTIN_FIELDS = ("tag", "type", "location", "status")


@dataclass(frozen=True)
class AssetState:
    """
    Lifecycle sub state of an asset.

    A state only has meaning together with the asset status.
    An asset without a state carries AssetState with an empty name.
    """

    name: str = ""
    label: str = ""
    description: str = ""
    id: int = 0

    @classmethod
    def from_json(cls, obj: Mapping[str, Any] | None) -> "AssetState":
        if not obj:
            return cls()
        return cls(
            name=str(obj.get("NAME", "") or ""),
            label=str(obj.get("LABEL", "") or ""),
            description=str(obj.get("DESCRIPTION", "") or ""),
            id=int(obj.get("ID", 0) or 0),
        )


@dataclass(frozen=True)
class CollinsAsset:
    """
    Handle to one Collins asset record.

    tag
    Primary key in Collins.

    type
    Asset classification such as SERVER_NODE.

    location
    Datacenter recorded for the asset, None for single datacenter setups.

    attributes
    Free form facts, keys stored upper case.
    """

    tag: str
    type: str = "SERVER_NODE"
    status: str = ""
    state: AssetState = field(default_factory=AssetState)
    location: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {
            str(k).upper(): "" if v is None else str(v) for k, v in self.attributes.items()
        }
        object.__setattr__(self, "attributes", normalized)

    def attribute(self, key: str) -> Optional[str]:
        """Return the attribute value for key, or None when unset."""
        return self.attributes.get(key.upper())

    def get(self, field_name: str) -> Any:
        """
        Uniform field access.

        Built in fields come from the asset record, state returns the
        AssetState, anything else is an attribute lookup.
        """
        name = field_name.lower()
        if name in BUILTIN_FIELDS:
            return getattr(self, name)
        if name == "state":
            return self.state
        return self.attribute(field_name)

    def is_server_node(self) -> bool:
        return (self.type or "").lower() == SERVER_NODE

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "CollinsAsset":
        """
        Build a handle from a Collins asset payload.

        Collins returns ASSET for the record itself and ATTRIBS as a mapping
        of dimension to key value pairs. Dimension 0 is the default one.
        """
        asset_obj = data.get("ASSET", {}) or {}
        attribs_obj = data.get("ATTRIBS", {}) or {}

        attributes: Dict[str, str] = {}
        if isinstance(attribs_obj, dict):
            default_dim = attribs_obj.get("0", attribs_obj.get(0, {})) or {}
            if isinstance(default_dim, dict):
                for key, value in default_dim.items():
                    attributes[str(key).upper()] = "" if value is None else str(value)

        location = asset_obj.get("LOCATION")
        return cls(
            tag=str(asset_obj.get("TAG", "")),
            type=str(asset_obj.get("TYPE", "") or ""),
            status=str(asset_obj.get("STATUS", "") or ""),
            state=AssetState.from_json(asset_obj.get("STATE")),
            location=str(location) if location else None,
            attributes=attributes,
        )
