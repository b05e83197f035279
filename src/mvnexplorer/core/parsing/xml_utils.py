from __future__ import annotations

"""
Shared XML Primitives.

Namespace-agnostic helpers used by both the descriptor parser and the
archetype catalog parser. Maven documents appear with and without the
POM 4.0.0 namespace (and catalogs with their own), so children are matched
on their local name only.
"""

import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional

from mvnexplorer.domain.errors import ParseError


def parse_xml(text: Optional[str], source: str = "<string>") -> ET.Element:
    """
    Parse XML text into its root element.

    Args:
        text: Raw XML document.
        source: Label used in error messages (usually the file path).

    Returns:
        ET.Element: Document root.

    Raises:
        ParseError: If the text is empty or not well-formed.
    """
    if text is None or not text.strip():
        raise ParseError("empty document", source=source)
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        line, column = getattr(e, "position", (None, None))
        raise ParseError(str(e), source=source, line=line, column=column) from e


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""
    return tag.split("}")[-1] if "}" in tag else tag


def iter_children(el: ET.Element, tag: str) -> Iterator[ET.Element]:
    """Yield direct children whose local name equals ``tag``, in document order."""
    for child in el:
        if isinstance(child.tag, str) and local_name(child.tag) == tag:
            yield child


def find_child(el: Optional[ET.Element], tag: str) -> Optional[ET.Element]:
    """Return the first direct child named ``tag``, or None."""
    if el is None:
        return None
    return next(iter_children(el, tag), None)


def child_text(el: Optional[ET.Element], tag: str) -> Optional[str]:
    """
    Extract the stripped text of a direct child element.

    Returns:
        Optional[str]: Text content, or None if the child is absent or blank.
    """
    child = find_child(el, tag)
    if child is not None and child.text and child.text.strip():
        return child.text.strip()
    return None


def children_texts(el: Optional[ET.Element], tag: str) -> List[str]:
    """Collect non-blank stripped texts of all direct children named ``tag``."""
    if el is None:
        return []
    return [c.text.strip() for c in iter_children(el, tag) if c.text and c.text.strip()]
