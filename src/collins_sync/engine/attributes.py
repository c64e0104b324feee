"""
Attribute access engine.

This engine reads and writes Collins facts for any object that can resolve
itself to a Collins asset.

Reads
get never consults the locality policy. A missing asset reads as "".

Writes
set compares the current value with the desired one and only calls Collins
when they differ, so calling it twice with the same input writes once.

Status and state travel together. Asking for a state without a status in
the same call is an error. When Collins does not know the requested pairing,
we register the state for that status and retry once.

Writes are not transactional. If the third field of a call is rejected,
the first two stay written.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol

from collins_sync.core.errors import TransitionFailed
from collins_sync.core.types import CollinsAsset
from collins_sync.engine.context import CollinsContext

logger = logging.getLogger(__name__)

TRANSITION_REASON = "changed through jetpants"

ASSET_KEY = "asset"
STATUS_KEY = "status"
STATE_KEY = "state"


class AssetProvider(Protocol):
    """Anything the engine can resolve to a Collins asset."""

    def collins_asset(self) -> CollinsAsset | None:
        """Return the asset for this object, or None if it has none yet."""


def _flatten(field_names: Iterable[Any]) -> list[str]:
    flat: list[str] = []
    for name in field_names:
        if isinstance(name, (list, tuple)):
            flat.extend(_flatten(name))
        else:
            flat.append(str(name))
    return flat


def _normalize_pairs(args: tuple[Any, ...]) -> dict[str, Any]:
    if len(args) == 1 and isinstance(args[0], Mapping):
        pairs = args[0]
    elif len(args) == 2:
        pairs = {args[0]: args[1]}
    else:
        raise TypeError("collins_set takes a mapping or a (field, value) pair")
    return {str(k).lower(): v for k, v in pairs.items()}


class AttributeEngine:
    """
    Get and set Collins facts on behalf of domain objects.

    context
    Supplies the Collins client, the locality policy and the notice sink.
    """

    def __init__(self, context: CollinsContext) -> None:
        self._context = context

    @property
    def context(self) -> CollinsContext:
        return self._context

    def get(self, owner: AssetProvider, *field_names: Any) -> Any:
        """
        Read one or more fields.

        One bare field returns a single value.
        Several fields, or a list of fields, return a dict that also carries
        the resolved asset under "asset". A one element list still returns
        a dict. With no fields, returns None.
        """
        asset = owner.collins_asset()

        if len(field_names) > 1 or (field_names and isinstance(field_names[0], (list, tuple))):
            fields = _flatten(field_names)
            state_keys = [f for f in dict.fromkeys(fields) if f.lower() == STATE_KEY]
            fields = [f for f in fields if f.lower() != STATE_KEY]

            # Keys keep the caller's spelling, lookups are case insensitive.
            results: dict[str, Any] = {f: (asset.get(f) if asset else "") for f in fields}
            for key in state_keys:
                results[key] = asset.state.name if asset else ""
            results[ASSET_KEY] = asset
            return results

        if len(field_names) == 1:
            if asset is None:
                return ""
            if str(field_names[0]).lower() == STATE_KEY:
                return asset.state.name
            return asset.get(str(field_names[0]))

        return None

    def set(self, owner: AssetProvider, *args: Any) -> None:
        """
        Write fields.

        Pass a mapping of field to value, or a field and a value.
        The mapping may carry "asset" to skip the lookup.
        """
        attrs = _normalize_pairs(args)
        asset = attrs.get(ASSET_KEY) or owner.collins_asset()

        if asset is not None and not self._context.policy.allows_mutation(asset):
            logger.debug(
                "asset %s is in %s, not %s, skipping writes",
                asset.tag,
                asset.location,
                self._context.datacenter(),
            )
            asset = None

        for key, val in attrs.items():
            if val is None:
                val = ""
            if key == ASSET_KEY:
                continue
            if key == STATUS_KEY:
                self._set_status(owner, asset, attrs, str(val))
            elif key == STATE_KEY:
                self._check_state(owner, asset, attrs, val)
            else:
                self._set_attribute(owner, asset, key, val)

    def _set_status(
        self,
        owner: AssetProvider,
        asset: CollinsAsset | None,
        attrs: Mapping[str, Any],
        status: str,
    ) -> None:
        if asset is None:
            self._context.warn(f"unable to set Collins status to {status}")
            return

        if attrs.get(STATE_KEY) is not None:
            self._transition(owner, asset, status, str(attrs[STATE_KEY]))
            return

        previous_status = asset.status
        if previous_status == status:
            return

        if not self._context.set_status(asset, status):
            raise TransitionFailed(f"{owner}: Unable to set Collins status to {status}")
        self._context.emit(f"Collins status changed from {previous_status} to {status}")

    def _transition(self, owner: AssetProvider, asset: CollinsAsset, status: str, state: str) -> None:
        previous_state = asset.state.name
        previous_status = asset.status
        if previous_state == state and previous_status == status:
            return

        ctx = self._context
        success = ctx.set_status(asset, status, TRANSITION_REASON, state)
        if not success:
            if ctx.state_create(state, state, state, status):
                logger.info("registered Collins state %s for status %s", state, status)
            success = ctx.set_status(asset, status, TRANSITION_REASON, state)
        if not success:
            raise TransitionFailed(
                f"{owner}: Unable to set Collins state to {state} "
                f"and Unable to set Collins status to {status}"
            )

        if previous_state != state:
            ctx.emit(f"Collins state changed from {previous_state} to {state}")
        if previous_status != status:
            ctx.emit(f"Collins status changed from {previous_status} to {status}")

    def _check_state(
        self,
        owner: AssetProvider,
        asset: CollinsAsset | None,
        attrs: Mapping[str, Any],
        state: Any,
    ) -> None:
        if attrs.get(STATUS_KEY) is None:
            raise TransitionFailed(f"{owner}: Unable to set state without setting a status")
        if asset is None or not asset.status:
            self._context.warn(f"unable to set Collins state to {state}")

    def _set_attribute(self, owner: AssetProvider, asset: CollinsAsset | None, key: str, val: Any) -> None:
        if asset is None:
            self._context.warn(f"unable to set Collins attribute {key} to {val}")
            return

        previous_value = asset.get(key)
        value = str(val).upper()
        if (previous_value or "") == value:
            return

        name = key.upper()
        if not self._context.set_attribute(asset, name, value):
            raise TransitionFailed(f"{owner}: Unable to set Collins attribute {key} to {val}")

        if value == "":
            self._context.emit(f"Collins attribute {name} removed (was: {previous_value})")
        elif not previous_value:
            self._context.emit(f"Collins attribute {name} set to {value}")
        else:
            self._context.emit(f"Collins attribute {name} changed from {previous_value} to {value}")
