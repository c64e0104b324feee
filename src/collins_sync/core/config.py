"""
Collins plugin configuration.

Settings live under plugins -> jetpants_collins in the host tool config file.
This module only normalizes them. Reading the file is the host's job.

Keys
url, user, password
  Required to talk to Collins. Checked when the client is first built,
  so a process that never touches Collins can run without them.

timeout
  Client timeout in seconds, default 30.

datacenter
  Datacenter this process runs in. Only matters for multi datacenter setups.

remote_lookup
  Ask Collins to search all datacenters on find calls.

inter_dc_mode
  Disable the locality guard. See LocalityPolicy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from collins_sync.core.errors import ConfigurationError

PLUGIN_NAME = "jetpants_collins"

REQUIRED_SETTINGS = ("url", "user", "password")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(frozen=True)
class CollinsConfig:
    url: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    timeout: int = 30
    datacenter: Optional[str] = None
    remote_lookup: bool = False
    inter_dc_mode: bool = False

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any] | None) -> "CollinsConfig":
        """
        Build a config from the jetpants_collins settings mapping.

        A full plugins mapping is accepted too, in which case the
        jetpants_collins section is used.
        """
        obj = obj or {}
        if PLUGIN_NAME in obj and isinstance(obj[PLUGIN_NAME], Mapping):
            obj = obj[PLUGIN_NAME]

        timeout_raw = obj.get("timeout")
        return cls(
            url=obj.get("url") or None,
            user=obj.get("user") or None,
            password=obj.get("password") or None,
            timeout=int(timeout_raw) if timeout_raw else 30,
            datacenter=obj.get("datacenter") or None,
            remote_lookup=_as_bool(obj.get("remote_lookup", False)),
            inter_dc_mode=_as_bool(obj.get("inter_dc_mode", False)),
        )

    def require_connection(self) -> None:
        """Raise ConfigurationError if a connection setting is missing."""
        for setting in REQUIRED_SETTINGS:
            if not getattr(self, setting):
                raise ConfigurationError(
                    f"No Collins {setting} set in plugins -> {PLUGIN_NAME} -> {setting}"
                )
