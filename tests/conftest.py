from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures that lay out Maven workspaces on disk.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


POM_NS = "http://maven.apache.org/POM/4.0.0"


def pom_xml(
        artifact_id: Optional[str],
        modules: Sequence[str] = (),
        group_id: Optional[str] = "com.example",
        version: Optional[str] = "1.0.0",
        packaging: Optional[str] = None,
) -> str:
    """Render a minimal namespaced pom.xml."""
    parts = [f'<project xmlns="{POM_NS}">', "  <modelVersion>4.0.0</modelVersion>"]
    if group_id:
        parts.append(f"  <groupId>{group_id}</groupId>")
    if artifact_id:
        parts.append(f"  <artifactId>{artifact_id}</artifactId>")
    if version:
        parts.append(f"  <version>{version}</version>")
    if packaging:
        parts.append(f"  <packaging>{packaging}</packaging>")
    if modules:
        parts.append("  <modules>")
        parts.extend(f"    <module>{m}</module>" for m in modules)
        parts.append("  </modules>")
    parts.append("</project>")
    return "\n".join(parts) + "\n"


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def write_pom() -> Callable[..., Path]:
    """
    Factory writing ``<directory>/pom.xml`` (creating the directory).

    Returns:
        Callable[..., Path]: ``write_pom(directory, artifact_id, modules=..., ...)``.
    """
    def _write(directory: Path, artifact_id: Optional[str], modules: Sequence[str] = (), **kwargs) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        pom = directory / "pom.xml"
        pom.write_text(pom_xml(artifact_id, modules, **kwargs), encoding="utf-8")
        return pom

    return _write


@pytest.fixture
def multi_module_workspace(tmp_path: Path, write_pom: Callable[..., Path]) -> Path:
    """
    Workspace with an aggregator and one submodule.

    Structure:
    /ws
      pom.xml          (artifactId=parent, modules=[child])
      /child
        pom.xml        (artifactId=child)
    """
    ws = tmp_path / "ws"
    write_pom(ws, "parent", modules=["child"], packaging="pom")
    write_pom(ws / "child", "child")
    return ws
