"""Extract dependencies from a shared version-variable file (Versions.props).

Each ``<FooVersion>`` element is a candidate pin. It only counts when some
project file references the variable, and the package name is taken from the
first element in that project whose ``Version`` attribute mentions it.
"""

from __future__ import annotations

from collections.abc import Iterable
import xml.etree.ElementTree as ET

import structlog

from ..models import Dependency, Manifest
from .msbuild import descendants, element_text, local_name, parse_document
from .semver import try_parse

log = structlog.get_logger("dep_scanner.parsers")

VARIABLE_SUFFIX = "Version"


def references_variable(text: str, variable: str) -> bool:
    """Coarse check: does ``text`` mention ``variable`` anywhere (any case)?"""
    return variable.lower() in text.lower()


def _find_reference(root: ET.Element, variable: str) -> ET.Element | None:
    for element in descendants(root):
        version = element.get("Version")
        if version is not None and references_variable(version, variable):
            return element
    return None


def parse(
    text: str,
    manifests: Iterable[Manifest],
    source: str = "<string>",
) -> list[Dependency]:
    """Return one dependency per version variable used by a project file."""
    root = parse_document(text, source)
    manifests = tuple(manifests)
    deps: list[Dependency] = []

    for element in descendants(root):
        variable = local_name(element)
        if not variable.endswith(VARIABLE_SUFFIX):
            continue

        candidates = [m for m in manifests if references_variable(m.text, variable)]
        if not candidates:
            # Not a package pin
            continue

        raw_version = element_text(element)
        version = try_parse(raw_version)
        if version is None:
            log.debug("variable_not_literal", variable=variable, value=raw_version)
            continue

        for manifest in candidates:
            reference = _find_reference(parse_document(manifest.text, manifest.path), variable)
            if reference is None:
                continue
            name = reference.get("Include") or reference.get("Update")
            if not name:
                continue

            deps.append(Dependency(name=name, current_version=version))
            log.debug("variable_matched", variable=variable, package=name, manifest=manifest.path)
            break

    return deps
