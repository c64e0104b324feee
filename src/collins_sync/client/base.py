"""
Collins client interfaces.

Goal
Keep the attribute engine independent of the transport used to reach Collins.

The engine only needs the operations below. Write operations return a bool:
False means Collins rejected the write, for example a status and state pairing
it does not know. Transport failures raise instead.

We keep the interface narrow so it is easy to mock in tests.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from collins_sync.core.types import CollinsAsset


class CollinsService(Protocol):
    """
    Collins API operations used by this package.

    get_asset
    Fetch one asset by tag, None when Collins has no such asset.

    find_assets
    Search assets by attribute selectors.

    set_status
    Change status, optionally together with a state.

    set_attribute / delete_attribute
    Write or remove one free form attribute.

    state_create
    Register a new state definition tied to a status.
    """

    def get_asset(self, tag: str) -> CollinsAsset | None:
        """Return the asset for tag."""

    def find_assets(
        self,
        selectors: Mapping[str, str],
        remote_lookup: bool = False,
    ) -> list[CollinsAsset]:
        """Return assets matching every selector."""

    def set_status(
        self,
        asset: CollinsAsset,
        status: str,
        reason: str | None = None,
        state: str | None = None,
    ) -> bool:
        """Set status, and state when given."""

    def set_attribute(self, asset: CollinsAsset, key: str, value: str) -> bool:
        """Set attribute key to value."""

    def delete_attribute(self, asset: CollinsAsset, key: str) -> bool:
        """Remove attribute key."""

    def state_create(self, name: str, label: str, description: str, status: str) -> bool:
        """Create a state definition associated with status."""


class HttpClient(Protocol):
    """Simple http client interface for testability."""

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: Mapping[str, Any] | None = None,
    ) -> tuple[int, dict[str, Any]]:
        """Return status code and parsed json body."""
