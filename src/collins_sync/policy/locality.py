"""
Locality and mode policy.

Purpose
Keep mutations inside the datacenter this process runs in.

In a multi datacenter Collins setup we refuse to change attributes of server
node assets recorded in a remote datacenter. Reads are never restricted.

enable_inter_dc_mode lifts the restriction and turns on remote lookups.
Normally you do NOT want this, except in special situations such as a
migration between datacenters. There is no way back within a process.
"""

from __future__ import annotations

from dataclasses import dataclass

from collins_sync.core.config import CollinsConfig
from collins_sync.core.types import CollinsAsset

UNKNOWN_DC = "UNKNOWN-DC"


@dataclass
class LocalityPolicy:
    """
    Process wide locality settings.

    datacenter
    Configured datacenter name, None when not configured.

    remote_lookup
    When True, find calls search every datacenter.
    """

    datacenter: str | None = None
    remote_lookup: bool = False
    _inter_dc_mode: bool = False

    @classmethod
    def from_config(cls, config: CollinsConfig) -> "LocalityPolicy":
        return cls(
            datacenter=config.datacenter,
            remote_lookup=config.remote_lookup or config.inter_dc_mode,
            _inter_dc_mode=config.inter_dc_mode,
        )

    def current_datacenter(self) -> str:
        """Return the configured datacenter upper cased, or UNKNOWN-DC."""
        return (self.datacenter or UNKNOWN_DC).upper()

    def enable_inter_dc_mode(self) -> None:
        """Disable locality restrictions for the rest of the process."""
        self._inter_dc_mode = True
        self.remote_lookup = True

    @property
    def inter_dc_mode(self) -> bool:
        return self._inter_dc_mode

    def is_remote(self, asset: CollinsAsset) -> bool:
        """True for a server node recorded in another datacenter."""
        if not asset.is_server_node() or not asset.location:
            return False
        return asset.location.upper() != self.current_datacenter()

    def allows_mutation(self, asset: CollinsAsset | None) -> bool:
        """
        Decide whether the engine may write to this asset.

        None is allowed through so the caller keeps its own absent handle path.
        """
        if asset is None:
            return True
        if self._inter_dc_mode:
            return True
        return not self.is_remote(asset)
