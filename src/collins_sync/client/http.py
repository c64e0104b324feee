"""
Collins http client.

This is a minimal Collins REST client with no third party deps.

Design
HttpClient carries the transport so tests can swap it for a fake.
CollinsHttpClient maps the CollinsService operations onto Collins endpoints.

Rejections versus failures
A 4xx or 5xx answer to a write means Collins refused it, which we report as
False so the engine can decide what to do. Anything below http, such as a
refused connection or a timeout, raises CollinsRequestError.
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from collins_sync.client.base import CollinsService, HttpClient
from collins_sync.core.config import CollinsConfig
from collins_sync.core.errors import CollinsRequestError
from collins_sync.core.types import CollinsAsset

logger = logging.getLogger(__name__)


def _encode_params(params: Mapping[str, Any] | None) -> str:
    if not params:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, str(v)) for v in value)
        elif value is not None:
            pairs.append((key, str(value)))
    return urlencode(pairs)


@dataclass
class UrllibHttpClient(HttpClient):
    """Default http client using urllib."""

    timeout_seconds: int = 30

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: Mapping[str, Any] | None = None,
    ) -> tuple[int, dict[str, Any]]:
        query = _encode_params(params)
        data: bytes | None = None
        if method == "GET" and query:
            url = f"{url}?{query}"
        elif query:
            data = query.encode("utf-8")
            headers = dict(headers)
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        req = Request(url, data=data, headers=headers, method=method)
        try:
            with urlopen(req, timeout=self.timeout_seconds) as resp:
                return resp.status, _parse_body(resp.read())
        except HTTPError as exc:
            return exc.code, _parse_body(exc.read())
        except URLError as exc:
            raise CollinsRequestError(f"{method} {url} failed: {exc.reason}") from exc


def _parse_body(raw: bytes) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        body = json.loads(raw.decode("utf-8"))
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _success(code: int, body: dict[str, Any]) -> bool:
    if code >= 400:
        return False
    data = body.get("data", {})
    if isinstance(data, dict) and "SUCCESS" in data:
        return bool(data["SUCCESS"])
    return True


@dataclass
class CollinsHttpClient(CollinsService):
    """
    Collins REST client.

    base_url
    Collins root url, for example https://collins.example.com

    username and password
    Sent as http basic auth on every request.
    """

    base_url: str
    username: str
    password: str
    http: HttpClient = field(default_factory=UrllibHttpClient)

    @classmethod
    def from_config(cls, config: CollinsConfig) -> "CollinsHttpClient":
        config.require_connection()
        return cls(
            base_url=str(config.url),
            username=str(config.user),
            password=str(config.password),
            http=UrllibHttpClient(timeout_seconds=config.timeout),
        )

    def _headers(self) -> dict[str, str]:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return {"Accept": "application/json", "Authorization": f"Basic {token}"}

    def _call(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> tuple[int, dict[str, Any]]:
        url = f"{self.base_url.rstrip('/')}{path}"
        logger.debug("collins %s %s %s", method, path, dict(params or {}))
        return self.http.request(method, url, headers=self._headers(), params=params)

    def get_asset(self, tag: str) -> CollinsAsset | None:
        code, body = self._call("GET", f"/api/asset/{quote(tag)}")
        if code == 404:
            return None
        if code >= 400:
            raise CollinsRequestError(f"lookup of asset {tag} failed with http {code}")
        return CollinsAsset.from_json(body.get("data", {}) or {})

    def find_assets(
        self,
        selectors: Mapping[str, str],
        remote_lookup: bool = False,
    ) -> list[CollinsAsset]:
        params: dict[str, Any] = {"details": "true"}
        attribute_selectors: list[str] = []
        for key, value in selectors.items():
            if key.lower() in ("status", "state", "type"):
                params[key.lower()] = value
            else:
                attribute_selectors.append(f"{key.upper()};{value}")
        if attribute_selectors:
            params["attribute"] = attribute_selectors
        if remote_lookup:
            params["remoteLookup"] = "true"

        code, body = self._call("GET", "/api/assets", params)
        if code >= 400:
            raise CollinsRequestError(f"asset search failed with http {code}")

        data = body.get("data", {}) or {}
        raw_assets = data.get("Data", []) if isinstance(data, dict) else []
        return [CollinsAsset.from_json(obj) for obj in raw_assets if isinstance(obj, dict)]

    def set_status(
        self,
        asset: CollinsAsset,
        status: str,
        reason: str | None = None,
        state: str | None = None,
    ) -> bool:
        params: dict[str, Any] = {"status": status}
        if reason:
            params["reason"] = reason
        if state:
            params["state"] = state
        code, body = self._call("POST", f"/api/asset/{quote(asset.tag)}/status", params)
        return _success(code, body)

    def set_attribute(self, asset: CollinsAsset, key: str, value: str) -> bool:
        params = {"attribute": f"{key};{value}"}
        code, body = self._call("POST", f"/api/asset/{quote(asset.tag)}", params)
        return _success(code, body)

    def delete_attribute(self, asset: CollinsAsset, key: str) -> bool:
        code, body = self._call("DELETE", f"/api/asset/{quote(asset.tag)}/attribute/{quote(key)}")
        return _success(code, body)

    def state_create(self, name: str, label: str, description: str, status: str) -> bool:
        params = {"label": label, "description": description, "status": status}
        code, body = self._call("PUT", f"/api/state/{quote(name.upper())}", params)
        return _success(code, body)
