"""Project manifest models."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable


@dataclass(frozen=True)
class Manifest:
    """A project file's path relative to the scan root and its raw text.

    ``path`` keeps the leading separator (``/src/App/App.csproj``) so that
    excluded directory segments also match at the top level.
    """

    path: str
    text: str

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Manifest path must be non-empty")


@dataclass(frozen=True)
class ManifestSet:
    """Every matching manifest, plus the subset that counts as source."""

    all: tuple[Manifest, ...]
    source: tuple[Manifest, ...]

    @classmethod
    def from_iterables(
        cls, *, all_manifests: Iterable[Manifest], source: Iterable[Manifest]
    ) -> ManifestSet:
        return cls(all=tuple(all_manifests), source=tuple(source))

    @property
    def totals(self) -> dict[str, int]:
        return {"manifests": len(self.all), "sourceManifests": len(self.source)}
