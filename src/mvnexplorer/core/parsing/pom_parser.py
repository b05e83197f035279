from __future__ import annotations

"""
Build Descriptor Parser.

Turns ``pom.xml`` text into a PomDocument holding the coordinates and the
declared submodules. Parsing is pure: file access lives in ``load_pom``
which the discovery engine runs off the event loop.
"""

import xml.etree.ElementTree as ET
from typing import List

from mvnexplorer.core.parsing.xml_utils import (
    child_text,
    children_texts,
    find_child,
    local_name,
    parse_xml,
)
from mvnexplorer.domain.project_models import PomDocument


def parse_pom_text(text: str, source: str = "<string>") -> PomDocument:
    """
    Parse descriptor XML into a PomDocument.

    Missing coordinates do not fail the parse; they come back as empty
    strings so the project can still be displayed.

    Args:
        text: Raw XML of the descriptor.
        source: Label used in ParseError messages.

    Returns:
        PomDocument: Parsed coordinates and submodule list.

    Raises:
        ParseError: If the XML is malformed.
    """
    root = parse_xml(text, source=source)

    parent_el = find_child(root, "parent")
    parent_gid = child_text(parent_el, "groupId")
    parent_aid = child_text(parent_el, "artifactId")
    parent_ver = child_text(parent_el, "version")

    return PomDocument(
        group_id=child_text(root, "groupId") or parent_gid or "",
        artifact_id=child_text(root, "artifactId") or "",
        version=child_text(root, "version") or parent_ver,
        packaging=child_text(root, "packaging"),
        name=child_text(root, "name"),
        description=child_text(root, "description"),
        parent_group_id=parent_gid,
        parent_artifact_id=parent_aid,
        parent_version=parent_ver,
        modules=tuple(_collect_modules(root)),
    )


def load_pom(pom_path: str) -> PomDocument:
    """
    Read and parse a descriptor file.

    Raises:
        OSError: If the file cannot be read.
        ParseError: If the XML is malformed.
    """
    with open(pom_path, "r", encoding="utf-8", errors="replace") as f:
        text = f.read()
    return parse_pom_text(text, source=pom_path)


def _collect_modules(root: ET.Element) -> List[str]:
    """
    Gather submodule paths from every supported encoding.

    Accepts any number of ``<modules>`` wrappers as well as ``<module>``
    elements placed directly under the root, in document order.
    """
    modules: List[str] = []
    for child in root:
        if not isinstance(child.tag, str):
            continue
        tag = local_name(child.tag)
        if tag == "modules":
            modules.extend(children_texts(child, "module"))
        elif tag == "module" and child.text and child.text.strip():
            modules.append(child.text.strip())
    return modules
