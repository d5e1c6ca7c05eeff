"""Parse Dependencies.props and extract LatestPackageReference pins."""

from __future__ import annotations

import structlog

from ..models import Dependency
from .msbuild import local_name, parse_document
from .semver import try_parse
from .versions_props import VersionTable, unwrap_reference

log = structlog.get_logger("dep_scanner.parsers")

DECLARATION_TAG = "LatestPackageReference"


def parse(text: str, versions: VersionTable, source: str = "<string>") -> list[Dependency]:
    """Return the dependencies declared in a Dependencies.props document.

    Entries without an ``Include`` are item definitions and are skipped.
    Versions written as ``$(Variable)`` are looked up in ``versions``; when the
    variable cannot be resolved the package is not pinned by this repository
    and is left out.
    """
    root = parse_document(text, source)
    deps: list[Dependency] = []

    for element in root.iter():
        if local_name(element) != DECLARATION_TAG:
            continue

        name = element.get("Include")
        if not name:
            continue

        raw_version = element.get("Version") or ""
        version = try_parse(raw_version)
        if version is None:
            variable = unwrap_reference(raw_version)
            if variable is None:
                log.debug("dependency_skipped", package=name, version=raw_version)
                continue
            resolution = versions.resolve(variable)
            if not resolution.ok:
                log.debug(
                    "dependency_skipped",
                    package=name,
                    variable=variable,
                    status=resolution.status,
                )
                continue
            version = resolution.version

        deps.append(Dependency(name=name, current_version=version))

    return deps
