"""Outdated-dependency findings and report output."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Iterable
from typing import Any

from .models import Dependency, Manifest


@dataclass(frozen=True)
class Finding:
    """An outdated dependency and the source manifests that mention it."""

    dependency: Dependency
    manifests: tuple[str, ...]

    @property
    def summary_line(self) -> str:
        dep = self.dependency
        return f"{dep.name} {dep.current_version} => {dep.latest_version}"

    def to_dict(self) -> dict[str, Any]:
        data = self.dependency.to_dict()
        data["manifests"] = list(self.manifests)
        return data


def references_package(text: str, name: str) -> bool:
    """Coarse check: does a manifest's text contain the package name?"""
    return name in text


def find_outdated(
    dependencies: Iterable[Dependency], source_manifests: Iterable[Manifest]
) -> list[Finding]:
    """Return a finding for every dependency whose latest version is strictly newer."""
    sources = tuple(source_manifests)
    findings: list[Finding] = []
    for dep in dependencies:
        if not dep.is_outdated:
            continue
        paths = tuple(m.path for m in sources if references_package(m.text, dep.name))
        findings.append(Finding(dependency=dep, manifests=paths))
    return findings


def render_text(findings: Iterable[Finding]) -> list[str]:
    """Console lines: one summary line per finding, then its manifests."""
    lines: list[str] = []
    for finding in findings:
        lines.append(finding.summary_line)
        lines.extend(f" - {path}" for path in finding.manifests)
    return lines


def aggregate(dependencies: list[Dependency], findings: list[Finding]) -> dict[str, Any]:
    """Build a JSON-friendly report with totals and top-level flags."""

    report: dict[str, Any] = {
        "version": "1",
        "hasFindings": bool(findings),
        "findings": [f.to_dict() for f in findings],
        "totals": {
            "dependencies": len(dependencies),
            "outdated": len(findings),
        },
    }

    return report


def write_report(report: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")
