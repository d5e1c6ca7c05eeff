"""Human-readable Markdown summary rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Any


def render_summary(report: dict[str, Any]) -> str:
    """Return a Markdown string with totals and a table of outdated packages."""
    totals = report.get("totals", {})
    findings = report.get("findings", [])

    lines = []
    lines.append("# dep-scanner Summary")
    lines.append("")
    lines.append(
        f"Dependencies checked: {totals.get('dependencies', 0)} | Outdated: {totals.get('outdated', 0)}"
    )
    lines.append("")
    lines.append("| Package | Current | Latest | Referenced by |")
    lines.append("| --- | --- | --- | --- |")

    if not findings:
        lines.append("| (none) | n/a | n/a | n/a |")

    for finding in findings:
        manifests = "<br>".join(finding.get("manifests") or []) or "n/a"
        lines.append(
            f"| {finding.get('name', '')} | {finding.get('current', '')} "
            f"| {finding.get('latest', '')} | {manifests} |"
        )

    return "\n".join(lines) + "\n"


def append_summary(report: dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as fh:
        fh.write(render_summary(report))
