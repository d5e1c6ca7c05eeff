"""NuGet-flavoured semantic versions.

Supported forms:
- one to four numeric parts (e.g., "1", "1.2", "1.2.3", "1.2.3.4")
- an optional prerelease label after "-" ("8.0.0-preview.7.23375.6")
- optional build metadata after "+", ignored for ordering and equality

Ordering follows SemVer 2.0: numeric parts first, a release sorts after any of
its prereleases, and prerelease labels compare identifier by identifier
(numeric identifiers numerically and below alphanumeric ones, alphanumeric
identifiers case-insensitively).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering


_VERSION_RE = re.compile(
    r"^(?P<release>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<meta>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class InvalidVersion(ValueError):
    """Raised when a string is not a NuGet version."""


def _prerelease_key(label: tuple[str, ...]) -> tuple[tuple[int, int, str], ...]:
    key = []
    for ident in label:
        if ident.isdigit():
            key.append((0, int(ident), ""))
        else:
            key.append((1, 0, ident.lower()))
    return tuple(key)


@total_ordering
@dataclass(frozen=True, eq=False)
class NuGetVersion:
    """Parsed version; compare instances with the usual operators."""

    major: int
    minor: int = 0
    patch: int = 0
    revision: int = 0
    prerelease: tuple[str, ...] = field(default_factory=tuple)
    metadata: str = ""

    @classmethod
    def parse(cls, text: str) -> NuGetVersion:
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise InvalidVersion(f"Invalid version: {text!r}")

        parts = [int(p) for p in match.group("release").split(".")]
        parts += [0] * (4 - len(parts))
        pre = match.group("pre")
        return cls(
            major=parts[0],
            minor=parts[1],
            patch=parts[2],
            revision=parts[3],
            prerelease=tuple(pre.split(".")) if pre else (),
            metadata=match.group("meta") or "",
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def release(self) -> tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, self.revision)

    def _key(self) -> tuple:
        # Releases sort after prereleases of the same numeric version.
        if self.prerelease:
            return (self.release, 0, _prerelease_key(self.prerelease))
        return (self.release, 1, ())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: NuGetVersion) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.metadata:
            text += f"+{self.metadata}"
        return text


def try_parse(text: str | None) -> NuGetVersion | None:
    """Return the parsed version, or None when ``text`` is not a version."""
    if not text:
        return None
    try:
        return NuGetVersion.parse(text)
    except InvalidVersion:
        return None
