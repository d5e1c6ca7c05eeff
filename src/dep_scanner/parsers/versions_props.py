"""Version-variable tables loaded from shared props files (eng/Versions.props).

A variable's value is either a literal version or a wrapped reference such as
``$(OtherPackageVersion)``. Resolution follows references until it reaches a
literal, and stops with a ``cyclic`` result when a chain loops or grows past
``MAX_DEPTH``.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from .msbuild import descendants, element_text, local_name, parse_document
from .semver import NuGetVersion, try_parse

log = structlog.get_logger("dep_scanner.parsers")

MAX_DEPTH = 32

RESOLVED = "resolved"
MISSING = "missing"
CYCLIC = "cyclic"
INVALID = "invalid"


def unwrap_reference(value: str) -> str | None:
    """Turn ``$(Name)`` into ``Name``.

    Only the fixed decoration width is removed (two leading characters, one
    trailing), so any value of at least four characters yields a name.
    """
    value = value.strip()
    if len(value) < 4:
        return None
    return value[2:-1]


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a variable."""

    version: NuGetVersion | None
    status: str

    @property
    def ok(self) -> bool:
        return self.status == RESOLVED


class VersionTable:
    """Case-insensitive variable name -> raw value mapping."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = {}
        for name, value in (values or {}).items():
            self._values.setdefault(name.lower(), value)

    @classmethod
    def from_text(cls, text: str, source: str = "<string>") -> VersionTable:
        if not text.strip():
            # An empty props file defines no variables.
            return cls()
        root = parse_document(text, source)
        table = cls()
        for element in descendants(root):
            name = local_name(element)
            if name:
                # First definition wins, like a document-order lookup.
                table._values.setdefault(name.lower(), element_text(element))
        return table

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str) -> str | None:
        return self._values.get(name.lower())

    def resolve(self, name: str) -> Resolution:
        """Follow ``name`` through references down to a literal version."""
        visited: set[str] = set()
        current: str | None = name

        while current is not None:
            key = current.lower()
            if key in visited or len(visited) >= MAX_DEPTH:
                log.debug("variable_cyclic", variable=name, at=current)
                return Resolution(None, CYCLIC)
            visited.add(key)

            value = self._values.get(key)
            if value is None:
                return Resolution(None, MISSING)

            version = try_parse(value)
            if version is not None:
                return Resolution(version, RESOLVED)

            current = unwrap_reference(value)

        log.debug("variable_invalid", variable=name)
        return Resolution(None, INVALID)
