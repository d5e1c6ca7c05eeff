"""Core scanning entrypoints.

File-system and network access happen only here and in the registry client;
the extractors and the reporter work on in-memory manifests.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from .config import Settings
from .discovery import collect_manifests
from .models import Dependency, ManifestSet
from .parsers import dependencies_props, shared_versions
from .parsers.versions_props import VersionTable
from .registry import NuGetRegistryClient, RegistryClient, resolve_latest
from .report import Finding, aggregate, find_outdated

log = structlog.get_logger("dep_scanner.core")

DEPENDENCIES_FILE_NAME = "Dependencies.props"
VERSIONS_FILE = Path("eng") / "Versions.props"


@dataclass(frozen=True)
class ScanResult:
    manifests: ManifestSet
    dependencies: list[Dependency]
    findings: list[Finding]

    @property
    def report(self) -> dict[str, Any]:
        return aggregate(self.dependencies, self.findings)


def extract_dependencies(input_path: Path, root: Path, manifests: ManifestSet) -> list[Dependency]:
    """Read the input file and extract pins with the strategy its name selects.

    ``Dependencies.props`` is read together with ``<root>/eng/Versions.props``;
    any other file is treated as a shared version-variable file.
    """
    text = input_path.read_text(encoding="utf-8-sig")

    if input_path.name == DEPENDENCIES_FILE_NAME:
        versions_path = root / VERSIONS_FILE
        versions = VersionTable.from_text(
            versions_path.read_text(encoding="utf-8-sig"), str(versions_path)
        )
        deps = dependencies_props.parse(text, versions, str(input_path))
        strategy = "declarations"
    else:
        deps = shared_versions.parse(text, manifests.all, str(input_path))
        strategy = "shared-versions"

    log.info("dependencies_extracted", input=str(input_path), strategy=strategy, count=len(deps))
    return deps


def scan_repository(
    root: Path,
    input_path: Path,
    settings: Settings | None = None,
    client: RegistryClient | None = None,
) -> ScanResult:
    """Scan ``root`` and report dependencies pinned by ``input_path`` that are outdated.

    Params:
        root: source tree to scan for project files
        input_path: Dependencies.props or a version-variable props file
        settings: optional settings; defaults when None
        client: registry client; a NuGetRegistryClient built from settings when None
    """
    settings = settings or Settings()
    root = root.resolve()
    input_path = input_path.resolve()

    manifests = collect_manifests(root, settings.excluded_segments)
    dependencies = extract_dependencies(input_path, root, manifests)

    if client is None:
        client = NuGetRegistryClient(
            settings.service_index_url,
            include_prerelease=settings.include_prerelease,
            timeout=settings.timeout,
        )

    resolved = resolve_latest(dependencies, client)
    findings = find_outdated(resolved, manifests.source)

    return ScanResult(manifests=manifests, dependencies=resolved, findings=findings)
