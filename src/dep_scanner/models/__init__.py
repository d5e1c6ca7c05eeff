"""Data models shared by the collector, extractors and reporter."""

from __future__ import annotations

from .dependency import Dependency
from .manifest import Manifest, ManifestSet

__all__ = [
    "Dependency",
    "Manifest",
    "ManifestSet",
]
