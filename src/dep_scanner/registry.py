"""NuGet v3 registry lookups.

The client reads the service index once to find the package base address
(the "flat container"), then issues one GET per package for its version list.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

import requests
import structlog
from jsonschema import Draft202012Validator
from requests import Response

from .config import DEFAULT_SERVICE_INDEX_URL, DEFAULT_TIMEOUT
from .models import Dependency
from .parsers.semver import NuGetVersion, try_parse

log = structlog.get_logger("dep_scanner.registry")

PACKAGE_BASE_ADDRESS_TYPE = "PackageBaseAddress/3.0.0"

USER_AGENT = "dep-scanner (+https://www.nuget.org/)"

SERVICE_INDEX_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["resources"],
    "properties": {
        "resources": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["@id", "@type"],
                "properties": {
                    "@id": {"type": "string", "minLength": 1},
                    "@type": {"type": ["string", "array"]},
                },
            },
        },
    },
}

VERSION_LIST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["versions"],
    "properties": {
        "versions": {"type": "array", "items": {"type": "string"}},
    },
}


class RegistryError(RuntimeError):
    """Raised when the registry cannot be queried or returns unusable data."""


class RegistryClient(Protocol):
    def latest_version(self, name: str) -> NuGetVersion | None: ...


def _http_get(url: str, timeout: float) -> Response:
    return requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)


def _get_json(url: str, timeout: float, schema: dict[str, Any]) -> dict[str, Any] | None:
    """GET ``url`` and validate the JSON body; None on 404."""
    try:
        response = _http_get(url, timeout)
    except requests.RequestException as exc:
        raise RegistryError(f"Failed to fetch {url}: {exc}") from exc

    if response.status_code == 404:
        return None
    if response.status_code != 200:
        raise RegistryError(f"Unexpected status code {response.status_code} fetching {url}")

    try:
        data = response.json()
    except ValueError as exc:
        raise RegistryError(f"Invalid JSON from {url}: {exc}") from exc

    errors = sorted(Draft202012Validator(schema).iter_errors(data), key=lambda e: list(e.path))
    if errors:
        pointer = "/".join(str(p) for p in errors[0].path) or "<root>"
        raise RegistryError(f"Unexpected payload from {url}: {pointer}: {errors[0].message}")

    return data


def _resource_types(resource: dict[str, Any]) -> list[str]:
    types = resource.get("@type")
    if isinstance(types, str):
        return [types]
    return [str(t) for t in types or []]


def select_latest(
    versions: Iterable[str], include_prerelease: bool = True
) -> NuGetVersion | None:
    """Return the highest parsable version, or None when nothing qualifies."""
    parsed = [v for v in (try_parse(raw) for raw in versions) if v is not None]
    if not include_prerelease:
        parsed = [v for v in parsed if not v.is_prerelease]
    return max(parsed, default=None)


class NuGetRegistryClient:
    """Sequential, uncached client for one NuGet v3 feed."""

    def __init__(
        self,
        service_index_url: str = DEFAULT_SERVICE_INDEX_URL,
        *,
        include_prerelease: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.service_index_url = service_index_url
        self.include_prerelease = include_prerelease
        self.timeout = timeout
        self._base_address: str | None = None

    @property
    def base_address(self) -> str:
        """Flat container address, discovered from the service index on first use."""
        if self._base_address is None:
            index = _get_json(self.service_index_url, self.timeout, SERVICE_INDEX_SCHEMA)
            if index is None:
                raise RegistryError(f"Service index not found: {self.service_index_url}")
            for resource in index["resources"]:
                if PACKAGE_BASE_ADDRESS_TYPE in _resource_types(resource):
                    self._base_address = resource["@id"].rstrip("/")
                    break
            else:
                raise RegistryError(
                    f"Service index {self.service_index_url} has no {PACKAGE_BASE_ADDRESS_TYPE} resource"
                )
            log.debug("base_address_discovered", base_address=self._base_address)
        return self._base_address

    def fetch_versions(self, name: str) -> list[str]:
        """Return every published version string of ``name`` (empty if unknown).

        The flat container lists unlisted versions too; they count like any other.
        """
        url = f"{self.base_address}/{name.lower()}/index.json"
        data = _get_json(url, self.timeout, VERSION_LIST_SCHEMA)
        if data is None:
            log.info("package_not_found", package=name)
            return []
        return list(data["versions"])

    def latest_version(self, name: str) -> NuGetVersion | None:
        return select_latest(self.fetch_versions(name), self.include_prerelease)


def resolve_latest(
    dependencies: Iterable[Dependency], client: RegistryClient
) -> list[Dependency]:
    """Attach the registry's latest version to each dependency, one at a time."""
    resolved: list[Dependency] = []
    for dep in dependencies:
        latest = client.latest_version(dep.name)
        log.debug(
            "latest_resolved",
            package=dep.name,
            current=str(dep.current_version),
            latest=str(latest) if latest is not None else None,
        )
        resolved.append(dep.with_latest(latest))
    return resolved
