"""Project manifest discovery utilities."""

from __future__ import annotations

import os
from pathlib import Path
from collections.abc import Iterable

import structlog

from .models import Manifest, ManifestSet

log = structlog.get_logger("dep_scanner.discovery")

MANIFEST_PATTERN = "*.*proj"
DEPENDENCY_MARKERS = ("<PackageReference", "<Reference")

# Directory names whose projects are tests, samples, harnesses or tooling.
EXCLUDED_SEGMENTS = (
    "test",
    "testassets",
    "samples",
    "perf",
    "eng",
    "ref",
    "submodules",
    "stress",
    "benchmark",
    "benchmarks",
    "FunctionalTests",
    ".packages",
)


def declares_dependencies(text: str) -> bool:
    """Return True when a project file textually declares package or assembly references."""
    return any(marker in text for marker in DEPENDENCY_MARKERS)


def is_source_manifest(path: str, excluded_segments: Iterable[str] = EXCLUDED_SEGMENTS) -> bool:
    """Return False when ``path`` runs through one of the excluded directories.

    The check is a case-sensitive containment test of ``<sep>segment<sep>``
    against the relative path, which carries a leading separator.
    """
    sep = os.sep
    return not any(f"{sep}{segment}{sep}" in path for segment in excluded_segments)


def relative_manifest_path(root: Path, path: Path) -> str:
    return os.sep + str(path.relative_to(root))


def split_manifests(
    manifests: Iterable[Manifest],
    excluded_segments: Iterable[str] = EXCLUDED_SEGMENTS,
) -> ManifestSet:
    """Partition already-read manifests into the full and the source sets."""
    segments = tuple(excluded_segments)
    all_manifests = [m for m in manifests if declares_dependencies(m.text)]
    source = [m for m in all_manifests if is_source_manifest(m.path, segments)]
    return ManifestSet.from_iterables(all_manifests=all_manifests, source=source)


def collect_manifests(
    root: Path,
    excluded_segments: Iterable[str] = EXCLUDED_SEGMENTS,
) -> ManifestSet:
    """Find project files recursively under root and read their text.

    Files are visited in sorted path order. Read errors propagate.
    """
    root = root.resolve()
    found: list[Manifest] = []

    for path in sorted(root.rglob(MANIFEST_PATTERN)):
        if not path.is_file():
            continue
        text = path.read_text(encoding="utf-8-sig")
        found.append(Manifest(path=relative_manifest_path(root, path), text=text))

    manifests = split_manifests(found, excluded_segments)
    log.info("manifests_collected", root=str(root), **manifests.totals)
    return manifests
