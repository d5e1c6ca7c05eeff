"""Small helpers over ElementTree for MSBuild documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET


class ManifestParseError(ValueError):
    """Raised when an MSBuild document is not well-formed XML."""


def parse_document(text: str, source: str = "<string>") -> ET.Element:
    """Parse ``text`` and return the root element."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise ManifestParseError(f"Malformed XML in {source}: {exc}") from exc


def local_name(element: ET.Element) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tag names."""
    tag = element.tag
    if not isinstance(tag, str):
        # Comments and processing instructions.
        return ""
    return tag.rsplit("}", 1)[-1]


def element_text(element: ET.Element) -> str:
    """Return all text content of an element, stripped."""
    return "".join(element.itertext()).strip()


def descendants(root: ET.Element):
    """Yield every element below ``root`` in document order, excluding root."""
    it = root.iter()
    next(it)
    yield from it
