"""Shared pytest fixtures for dep-scanner tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from dep_scanner.parsers.semver import NuGetVersion


class FakeRegistry:
    """In-memory stand-in for NuGetRegistryClient."""

    def __init__(self, latest: dict[str, str | None]):
        self.latest = latest
        self.calls: list[str] = []

    def latest_version(self, name: str) -> NuGetVersion | None:
        self.calls.append(name)
        value = self.latest.get(name)
        return NuGetVersion.parse(value) if value else None


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def write_file(tmp_path):
    """Write ``text`` to ``tmp_path / relative`` and return the path."""

    def _write(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_registry():
    return FakeRegistry
