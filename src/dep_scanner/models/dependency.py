"""Dependency model."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..parsers.semver import NuGetVersion


@dataclass(frozen=True)
class Dependency:
    """A package pin found in the scanned tree.

    ``latest_version`` stays None until the registry has been queried, or when
    the registry does not know the package.
    """

    name: str
    current_version: NuGetVersion
    latest_version: NuGetVersion | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Dependency name must be non-empty")

    @property
    def is_outdated(self) -> bool:
        if self.latest_version is None:
            return False
        return self.latest_version > self.current_version

    def with_latest(self, latest: NuGetVersion | None) -> Dependency:
        return replace(self, latest_version=latest)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "current": str(self.current_version),
            "latest": str(self.latest_version) if self.latest_version is not None else None,
        }
