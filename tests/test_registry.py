"""Tests for the NuGet registry client."""

from __future__ import annotations

import pytest
import requests

from dep_scanner import registry
from dep_scanner.models import Dependency
from dep_scanner.parsers.semver import NuGetVersion
from dep_scanner.registry import (
    NuGetRegistryClient,
    RegistryError,
    resolve_latest,
    select_latest,
)
from tests.conftest import FakeResponse

INDEX_URL = "https://example.test/v3/index.json"
BASE = "https://example.test/v3-flatcontainer"
SERVICE_INDEX = {
    "version": "3.0.0",
    "resources": [
        {"@id": "https://example.test/query", "@type": "SearchQueryService"},
        {"@id": BASE + "/", "@type": "PackageBaseAddress/3.0.0"},
    ],
}


@pytest.fixture
def http(monkeypatch):
    """Route registry GETs to a dict of url -> FakeResponse and record calls."""
    routes: dict[str, FakeResponse] = {INDEX_URL: FakeResponse(200, SERVICE_INDEX)}
    calls: list[str] = []

    def fake_get(url, timeout):
        calls.append(url)
        if url not in routes:
            return FakeResponse(404)
        return routes[url]

    monkeypatch.setattr(registry, "_http_get", fake_get)
    return routes, calls


class TestSelectLatest:
    def test_prerelease_counts_by_default(self):
        latest = select_latest(["1.0.0", "2.0.0", "1.10.0", "3.0.0-rc.1"])
        assert latest == NuGetVersion.parse("3.0.0-rc.1")

    def test_stable_only(self):
        latest = select_latest(["1.0.0", "2.0.0", "3.0.0-rc.1"], include_prerelease=False)
        assert latest == NuGetVersion.parse("2.0.0")

    def test_unparsable_entries_are_ignored(self):
        assert select_latest(["garbage", "1.0.0"]) == NuGetVersion.parse("1.0.0")

    def test_nothing_qualifies(self):
        assert select_latest([]) is None
        assert select_latest(["1.0.0-beta"], include_prerelease=False) is None


class TestNuGetRegistryClient:
    def test_latest_version(self, http):
        routes, calls = http
        routes[f"{BASE}/newtonsoft.json/index.json"] = FakeResponse(
            200, {"versions": ["12.0.3", "13.0.1", "13.0.2-beta1"]}
        )
        client = NuGetRegistryClient(INDEX_URL)

        assert client.latest_version("Newtonsoft.Json") == NuGetVersion.parse("13.0.2-beta1")
        assert calls == [INDEX_URL, f"{BASE}/newtonsoft.json/index.json"]

    def test_stable_only_client(self, http):
        routes, _ = http
        routes[f"{BASE}/newtonsoft.json/index.json"] = FakeResponse(
            200, {"versions": ["12.0.3", "13.0.1", "13.0.2-beta1"]}
        )
        client = NuGetRegistryClient(INDEX_URL, include_prerelease=False)

        assert client.latest_version("Newtonsoft.Json") == NuGetVersion.parse("13.0.1")

    def test_unlisted_versions_count(self, http):
        # The flat container has no listed flag; 1.5.0 stands in for an unlisted release.
        routes, _ = http
        routes[f"{BASE}/foo/index.json"] = FakeResponse(200, {"versions": ["1.0.0", "1.5.0"]})
        client = NuGetRegistryClient(INDEX_URL)

        assert client.fetch_versions("Foo") == ["1.0.0", "1.5.0"]
        assert client.latest_version("Foo") == NuGetVersion.parse("1.5.0")

    def test_service_index_is_read_once(self, http):
        routes, calls = http
        routes[f"{BASE}/a/index.json"] = FakeResponse(200, {"versions": ["1.0.0"]})
        routes[f"{BASE}/b/index.json"] = FakeResponse(200, {"versions": ["2.0.0"]})
        client = NuGetRegistryClient(INDEX_URL)

        client.latest_version("A")
        client.latest_version("B")

        assert calls.count(INDEX_URL) == 1

    def test_unknown_package(self, http):
        client = NuGetRegistryClient(INDEX_URL)
        assert client.fetch_versions("Nope") == []
        assert client.latest_version("Nope") is None

    def test_server_error(self, http):
        routes, _ = http
        routes[f"{BASE}/foo/index.json"] = FakeResponse(500)
        with pytest.raises(RegistryError, match="500"):
            NuGetRegistryClient(INDEX_URL).latest_version("Foo")

    def test_invalid_payload(self, http):
        routes, _ = http
        routes[f"{BASE}/foo/index.json"] = FakeResponse(200, {"versions": "1.0.0"})
        with pytest.raises(RegistryError, match="Unexpected payload"):
            NuGetRegistryClient(INDEX_URL).latest_version("Foo")

    def test_invalid_json(self, http):
        routes, _ = http
        routes[f"{BASE}/foo/index.json"] = FakeResponse(200, ValueError("bad json"))
        with pytest.raises(RegistryError, match="Invalid JSON"):
            NuGetRegistryClient(INDEX_URL).latest_version("Foo")

    def test_missing_base_address(self, http):
        routes, _ = http
        routes[INDEX_URL] = FakeResponse(200, {"resources": []})
        with pytest.raises(RegistryError, match="PackageBaseAddress"):
            NuGetRegistryClient(INDEX_URL).latest_version("Foo")

    def test_network_failure(self, monkeypatch):
        def boom(url, timeout):
            raise requests.ConnectionError("unreachable")

        monkeypatch.setattr(registry, "_http_get", boom)
        with pytest.raises(RegistryError, match="unreachable"):
            NuGetRegistryClient(INDEX_URL).latest_version("Foo")


class TestResolveLatest:
    def test_attaches_latest_in_order(self, fake_registry):
        client = fake_registry({"Foo": "2.0.0", "Bar": None})
        deps = [
            Dependency("Foo", NuGetVersion.parse("1.0.0")),
            Dependency("Bar", NuGetVersion.parse("1.0.0")),
        ]

        resolved = resolve_latest(deps, client)

        assert client.calls == ["Foo", "Bar"]
        assert resolved[0].latest_version == NuGetVersion.parse("2.0.0")
        assert resolved[1].latest_version is None
        assert deps[0].latest_version is None
