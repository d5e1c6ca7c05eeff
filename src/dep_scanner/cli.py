"""Command-line entrypoint.

Usage:
  dep-scanner ROOT INPUT

INPUT named Dependencies.props is read with ROOT/eng/Versions.props; any other
file is treated as a shared version-variable file.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import load_settings
from .core import scan_repository
from .logging_config import setup_logging
from .report import render_text, write_report
from .summary import append_summary

EXIT_OUTDATED = 10


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dep-scanner",
        description="Report NuGet dependencies that have newer published versions.",
    )
    parser.add_argument("root", type=Path, help="source tree to scan for project files")
    parser.add_argument("input", type=Path, help="Dependencies.props or a Versions.props file")
    args = parser.parse_args(argv)

    setup_logging()
    settings = load_settings()

    root = args.root.resolve()
    input_path = args.input.resolve()
    print(f"Scanning {root} with input {input_path}")

    result = scan_repository(root, input_path, settings=settings)
    for line in render_text(result.findings):
        print(line)

    report = result.report
    if settings.report_path is not None:
        write_report(report, settings.report_path)
    if settings.summary_path is not None:
        append_summary(report, settings.summary_path)

    if report["hasFindings"] and settings.fail_on_outdated:
        return EXIT_OUTDATED
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
