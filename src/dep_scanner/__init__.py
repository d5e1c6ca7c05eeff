"""dep-scanner core package.

Finds NuGet dependencies pinned in a source tree that have newer versions on
the registry. The scanning logic in ``core`` is usable without the CLI.
"""

__all__ = [
    "core",
]
