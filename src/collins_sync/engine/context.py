"""
Collins context.

Purpose
One explicit handle for everything the engine needs from the process:
configuration, locality policy, the Collins client and the notice sink.

Build it once at startup and hand it to the domain objects that include
CollinsMixin. Tests build one around InMemoryCollins.

The client is created lazily on first use and then reused. Missing url, user
or password is reported at that point, not at construction, so tools that
never touch Collins do not need credentials.

Facade
The context forwards exactly the CollinsService operations. Anything else is
not part of the supported surface and raises AttributeError.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from collins_sync.client.base import CollinsService
from collins_sync.client.http import CollinsHttpClient
from collins_sync.core.config import CollinsConfig
from collins_sync.core.types import CollinsAsset
from collins_sync.policy.locality import LocalityPolicy

logger = logging.getLogger(__name__)

notice_logger = logging.getLogger("collins_sync.notices")

WARNING_PREFIX = "WARNING:"

Emitter = Callable[[str], None]


def log_notice(message: str) -> None:
    """Default notice sink. WARNING: prefixed notices log at warning level."""
    if message.startswith(WARNING_PREFIX):
        notice_logger.warning(message)
    else:
        notice_logger.info(message)


class CollinsContext:
    """
    Process handle for Collins access.

    config
    Normalized plugin settings.

    service
    Optional prebuilt client. When omitted, CollinsHttpClient is built from
    config on first use.

    emit
    Notice sink receiving one line messages.
    """

    def __init__(
        self,
        config: CollinsConfig | None = None,
        service: CollinsService | None = None,
        emit: Emitter | None = None,
        policy: LocalityPolicy | None = None,
    ) -> None:
        self.config = config or CollinsConfig()
        self.policy = policy or LocalityPolicy.from_config(self.config)
        self._service = service
        self._emit = emit or log_notice

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, object] | None,
        emit: Emitter | None = None,
    ) -> "CollinsContext":
        return cls(config=CollinsConfig.from_mapping(settings), emit=emit)

    @property
    def service(self) -> CollinsService:
        if self._service is None:
            self._service = CollinsHttpClient.from_config(self.config)
            logger.info("collins client ready for %s", self.config.url)
        return self._service

    def emit(self, message: str) -> None:
        self._emit(message)

    def warn(self, message: str) -> None:
        self._emit(f"{WARNING_PREFIX} {message}")

    # Locality shortcuts, kept so callers do not need to reach into policy.

    def datacenter(self) -> str:
        return self.policy.current_datacenter()

    def enable_inter_dc_mode(self) -> None:
        self.policy.enable_inter_dc_mode()

    def inter_dc_mode(self) -> bool:
        return self.policy.inter_dc_mode

    # Forwarded CollinsService operations.

    def get_asset(self, tag: str) -> CollinsAsset | None:
        return self.service.get_asset(tag)

    def find_assets(self, selectors: Mapping[str, str]) -> list[CollinsAsset]:
        return self.service.find_assets(selectors, remote_lookup=self.policy.remote_lookup)

    def set_status(
        self,
        asset: CollinsAsset,
        status: str,
        reason: str | None = None,
        state: str | None = None,
    ) -> bool:
        return self.service.set_status(asset, status, reason, state)

    def set_attribute(self, asset: CollinsAsset, key: str, value: str) -> bool:
        return self.service.set_attribute(asset, key, value)

    def delete_attribute(self, asset: CollinsAsset, key: str) -> bool:
        return self.service.delete_attribute(asset, key)

    def state_create(self, name: str, label: str, description: str, status: str) -> bool:
        return self.service.state_create(name, label, description, status)
