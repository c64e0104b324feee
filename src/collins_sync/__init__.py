"""
collins_sync

This package keeps fleet objects (servers, pools, shards) in sync with the
facts Collins records about their assets.

We keep modules small and well separated:
core contains the asset handle, config and errors
policy contains the datacenter locality guard
client contains the Collins http client and an in memory double
engine contains the context and the attribute get and set logic
mixin contains the capability domain classes include
"""

from collins_sync.core.config import CollinsConfig
from collins_sync.core.errors import (
    CapabilityError,
    CollinsRequestError,
    CollinsSyncError,
    ConfigurationError,
    TransitionFailed,
    UnknownAttribute,
)
from collins_sync.core.types import AssetState, CollinsAsset
from collins_sync.engine.attributes import AttributeEngine
from collins_sync.engine.context import CollinsContext
from collins_sync.mixin import CollinsMixin
from collins_sync.policy.locality import LocalityPolicy

__all__ = [
    "AssetState",
    "AttributeEngine",
    "CapabilityError",
    "CollinsAsset",
    "CollinsConfig",
    "CollinsContext",
    "CollinsMixin",
    "CollinsRequestError",
    "CollinsSyncError",
    "ConfigurationError",
    "LocalityPolicy",
    "TransitionFailed",
    "UnknownAttribute",
]
