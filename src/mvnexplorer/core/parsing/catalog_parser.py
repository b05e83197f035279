from __future__ import annotations

"""
Archetype Catalog Parser.

Reads ``archetype-catalog.xml`` documents. Each ``<archetype>`` entry
becomes one Archetype; merging entries that share coordinates is the
aggregator's job, so the result here preserves document order verbatim.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterator, List

from mvnexplorer.core.parsing.xml_utils import (
    child_text,
    children_texts,
    find_child,
    iter_children,
    local_name,
    parse_xml,
)
from mvnexplorer.domain.archetype_models import Archetype

logger = logging.getLogger(__name__)


def parse_archetype_catalog(text: str, source: str = "<string>") -> List[Archetype]:
    """
    Parse a catalog document into its archetype entries.

    Entries lacking a groupId or artifactId cannot be identified and are
    ignored.

    Args:
        text: Raw catalog XML.
        source: Label used in ParseError messages.

    Returns:
        List[Archetype]: Entries in document order.

    Raises:
        ParseError: If the XML is malformed.
    """
    root = parse_xml(text, source=source)
    items: List[Archetype] = []

    for entry in _iter_entries(root):
        group_id = child_text(entry, "groupId")
        artifact_id = child_text(entry, "artifactId")
        if not group_id or not artifact_id:
            logger.debug(f"Catalog '{source}': skipping entry without coordinates.")
            continue

        versions = children_texts(entry, "version")
        versions.extend(children_texts(find_child(entry, "versions"), "version"))

        items.append(Archetype(
            group_id=group_id,
            artifact_id=artifact_id,
            repository=child_text(entry, "repository"),
            description=child_text(entry, "description"),
            versions=versions,
        ))

    return items


def _iter_entries(root: ET.Element) -> Iterator[ET.Element]:
    """Yield archetype entries, wrapped in ``<archetypes>`` or not."""
    if local_name(root.tag) == "archetype":
        yield root
        return
    for wrapper in iter_children(root, "archetypes"):
        yield from iter_children(wrapper, "archetype")
    yield from iter_children(root, "archetype")
