"""Tests for outdated findings, console lines and summaries."""

from __future__ import annotations

import json
import os

from dep_scanner.models import Dependency, Manifest
from dep_scanner.parsers.semver import NuGetVersion
from dep_scanner.report import aggregate, find_outdated, render_text, write_report
from dep_scanner.summary import append_summary, render_summary


def _dep(name: str, current: str, latest: str | None) -> Dependency:
    return Dependency(
        name,
        NuGetVersion.parse(current),
        NuGetVersion.parse(latest) if latest else None,
    )


APP = Manifest(f"{os.sep}src{os.sep}App.csproj", '<PackageReference Include="PackageName" />')
LIB = Manifest(f"{os.sep}src{os.sep}Lib.csproj", '<PackageReference Include="Other" />')
BOTH = Manifest(
    f"{os.sep}src{os.sep}Both.csproj",
    '<PackageReference Include="PackageName" /><PackageReference Include="PackageName" />',
)


class TestFindOutdated:
    def test_equal_versions_produce_nothing(self):
        assert find_outdated([_dep("PackageName", "1.2.3", "1.2.3")], [APP]) == []
        assert render_text(find_outdated([_dep("PackageName", "1.2.3", "1.2.3")], [APP])) == []

    def test_older_latest_produces_nothing(self):
        assert find_outdated([_dep("PackageName", "2.0.0", "1.0.0")], [APP]) == []

    def test_unknown_latest_produces_nothing(self):
        assert find_outdated([_dep("PackageName", "1.2.3", None)], [APP]) == []

    def test_outdated_lists_referencing_manifests(self):
        findings = find_outdated([_dep("PackageName", "1.2.3", "2.0.0")], [APP, LIB, BOTH])
        assert render_text(findings) == [
            "PackageName 1.2.3 => 2.0.0",
            f" - {APP.path}",
            f" - {BOTH.path}",
        ]

    def test_name_match_is_case_sensitive(self):
        findings = find_outdated([_dep("packagename", "1.0.0", "2.0.0")], [APP])
        assert findings[0].manifests == ()

    def test_stable_release_beats_its_prerelease(self):
        findings = find_outdated([_dep("PackageName", "2.0.0-rc.1", "2.0.0")], [APP])
        assert findings[0].summary_line == "PackageName 2.0.0-rc.1 => 2.0.0"


class TestAggregate:
    def test_totals_and_flags(self):
        deps = [_dep("PackageName", "1.2.3", "2.0.0"), _dep("Other", "1.0.0", "1.0.0")]
        report = aggregate(deps, find_outdated(deps, [APP]))

        assert report["hasFindings"] is True
        assert report["totals"] == {"dependencies": 2, "outdated": 1}
        assert report["findings"] == [
            {"name": "PackageName", "current": "1.2.3", "latest": "2.0.0", "manifests": [APP.path]}
        ]

    def test_write_report(self, tmp_path):
        path = tmp_path / "out" / "report.json"
        write_report(aggregate([], []), path)
        assert json.loads(path.read_text(encoding="utf-8"))["hasFindings"] is False


class TestSummary:
    def test_table_rows(self):
        deps = [_dep("PackageName", "1.2.3", "2.0.0")]
        text = render_summary(aggregate(deps, find_outdated(deps, [APP, BOTH])))

        assert "Dependencies checked: 1 | Outdated: 1" in text
        assert f"| PackageName | 1.2.3 | 2.0.0 | {APP.path}<br>{BOTH.path} |" in text

    def test_no_findings(self):
        assert "| (none) | n/a | n/a | n/a |" in render_summary(aggregate([], []))

    def test_append(self, tmp_path):
        path = tmp_path / "summary.md"
        path.write_text("existing\n", encoding="utf-8")
        append_summary(aggregate([], []), path)
        content = path.read_text(encoding="utf-8")
        assert content.startswith("existing\n# dep-scanner Summary")
