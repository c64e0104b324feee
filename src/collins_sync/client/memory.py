"""
In memory Collins.

This client is used for tests and local simulations.
It behaves like a tiny Collins keyed by asset tag.

Features
- Returns a fresh snapshot on every get, like a real lookup
- Rejects status and state pairings it does not know until state_create runs
- Can reject writes to chosen attribute keys
- Records every write in calls so tests can count network operations
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from collins_sync.client.base import CollinsService
from collins_sync.core.types import AssetState, CollinsAsset

DEFAULT_STATUSES = ("ALLOCATED", "MAINTENANCE", "PROVISIONED", "UNALLOCATED", "DECOMMISSIONED")


@dataclass
class InMemoryCollins(CollinsService):
    """
    In memory Collins service.

    assets
    Current asset records keyed by tag.

    statuses
    Statuses Collins accepts.

    pairings
    Known (status, state name) pairs. Status only transitions skip this check.

    rejected_attributes
    Upper case attribute keys whose writes are refused.

    calls
    Ordered log of write operations as (operation, arguments) tuples.
    """

    assets: dict[str, CollinsAsset] = field(default_factory=dict)
    statuses: set[str] = field(default_factory=lambda: set(DEFAULT_STATUSES))
    pairings: set[tuple[str, str]] = field(default_factory=set)
    rejected_attributes: set[str] = field(default_factory=set)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def add(self, asset: CollinsAsset) -> None:
        """Add or replace an asset record, registering its current pairing."""
        self.assets[asset.tag] = asset
        if asset.status:
            self.statuses.add(asset.status)
        if asset.status and asset.state.name:
            self.pairings.add((asset.status, asset.state.name))

    def writes(self, operation: str | None = None) -> list[tuple[str, tuple[Any, ...]]]:
        """Return recorded writes, optionally filtered by operation name."""
        if operation is None:
            return list(self.calls)
        return [c for c in self.calls if c[0] == operation]

    def get_asset(self, tag: str) -> CollinsAsset | None:
        asset = self.assets.get(tag)
        if asset is None:
            return None
        return replace(asset, attributes=dict(asset.attributes))

    def find_assets(
        self,
        selectors: Mapping[str, str],
        remote_lookup: bool = False,
    ) -> list[CollinsAsset]:
        found: list[CollinsAsset] = []
        for tag in sorted(self.assets):
            asset = self.assets[tag]
            if all(_matches(asset, key, value) for key, value in selectors.items()):
                found.append(replace(asset, attributes=dict(asset.attributes)))
        return found

    def set_status(
        self,
        asset: CollinsAsset,
        status: str,
        reason: str | None = None,
        state: str | None = None,
    ) -> bool:
        self.calls.append(("set_status", (asset.tag, status, reason, state)))
        current = self.assets.get(asset.tag)
        if current is None or status not in self.statuses:
            return False

        new_state = current.state
        if state:
            if (status, state) not in self.pairings:
                return False
            new_state = AssetState(name=state, label=state, description=state)

        self.assets[asset.tag] = replace(current, status=status, state=new_state)
        return True

    def set_attribute(self, asset: CollinsAsset, key: str, value: str) -> bool:
        self.calls.append(("set_attribute", (asset.tag, key, value)))
        current = self.assets.get(asset.tag)
        if current is None or key.upper() in self.rejected_attributes:
            return False

        attributes = dict(current.attributes)
        if value == "":
            attributes.pop(key.upper(), None)
        else:
            attributes[key.upper()] = value
        self.assets[asset.tag] = replace(current, attributes=attributes)
        return True

    def delete_attribute(self, asset: CollinsAsset, key: str) -> bool:
        self.calls.append(("delete_attribute", (asset.tag, key)))
        current = self.assets.get(asset.tag)
        if current is None or key.upper() not in current.attributes:
            return False

        attributes = dict(current.attributes)
        del attributes[key.upper()]
        self.assets[asset.tag] = replace(current, attributes=attributes)
        return True

    def state_create(self, name: str, label: str, description: str, status: str) -> bool:
        self.calls.append(("state_create", (name, label, description, status)))
        if status not in self.statuses:
            return False
        self.pairings.add((status, name))
        return True


def _matches(asset: CollinsAsset, key: str, value: str) -> bool:
    actual = asset.get(key)
    if isinstance(actual, AssetState):
        actual = actual.name
    return (actual or "").lower() == str(value).lower()
