#!/usr/bin/env python3
"""Local entrypoint to run the scanner from a checkout.

Usage:
  python scripts/scan.py ROOT INPUT

This calls the same main() as the installed dep-scanner command.
"""

from __future__ import annotations

from dep_scanner.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
