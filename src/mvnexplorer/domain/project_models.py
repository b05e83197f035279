from __future__ import annotations

"""
Project Tree Domain Models.

Immutable node types of the project explorer tree. The tree is a tagged
union over three variants (workspace root, Maven project, synthetic
"Modules" group); each variant reports its NodeKind so presentation layers
can branch without isinstance checks.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from mvnexplorer.domain.constants import (
    MODULES_GROUP_LABEL,
    MODULES_ICON,
    PROJECT_ICON,
)

# -----------------------------------------------------------------------------
# NODE DISCRIMINATOR
# -----------------------------------------------------------------------------

class NodeKind(Enum):
    """Discriminator of the tree node variants."""
    WORKSPACE_ROOT = "WorkspaceItem"
    PROJECT = "mavenProject"
    MODULE_GROUP = "Modules"


# -----------------------------------------------------------------------------
# PARSED DESCRIPTOR
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PomDocument:
    """
    Lightweight parse result of one build descriptor.

    Only the structure needed to label projects and follow multi-module
    declarations is captured; inheritance and interpolation are not applied,
    except that a missing groupId falls back to the parent's groupId.

    Attributes:
        group_id: Declared (or parent-inherited) groupId, empty if unknown.
        artifact_id: Declared artifactId, empty if missing.
        version: Declared (or parent-inherited) version.
        packaging: Declared packaging, None when not declared.
        name: Human readable ``<name>``.
        description: ``<description>`` text.
        parent_group_id: groupId of the ``<parent>`` block.
        parent_artifact_id: artifactId of the ``<parent>`` block.
        parent_version: version of the ``<parent>`` block.
        modules: Declared submodule relative paths, in declaration order.
    """
    group_id: str = ""
    artifact_id: str = ""
    version: Optional[str] = None
    packaging: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    parent_group_id: Optional[str] = None
    parent_artifact_id: Optional[str] = None
    parent_version: Optional[str] = None
    modules: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def coordinates(self) -> str:
        """``groupId:artifactId`` pair, with blanks where unknown."""
        return f"{self.group_id}:{self.artifact_id}"


# -----------------------------------------------------------------------------
# TREE NODES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WorkspaceRoot:
    """
    Top-level scope corresponding to one workspace folder.

    Attributes:
        name: Display name (folder base name unless configured otherwise).
        path: Absolute root directory.
    """
    name: str
    path: str

    @property
    def kind(self) -> NodeKind:
        return NodeKind.WORKSPACE_ROOT

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class ProjectNode:
    """
    One discovered Maven project.

    Attributes:
        pom_path: Canonical absolute path of the descriptor file.
        document: Parsed descriptor.
        icon: Icon reference for presentation layers.
    """
    pom_path: str
    document: PomDocument
    icon: str = PROJECT_ICON

    @property
    def kind(self) -> NodeKind:
        return NodeKind.PROJECT

    @property
    def artifact_id(self) -> str:
        return self.document.artifact_id

    @property
    def group_id(self) -> str:
        return self.document.group_id

    @property
    def directory(self) -> str:
        """Directory containing the descriptor (module paths are relative to it)."""
        return os.path.dirname(self.pom_path)

    @property
    def modules(self) -> Tuple[str, ...]:
        return self.document.modules

    @property
    def label(self) -> str:
        """Artifact id, or the directory name when the descriptor lacks one."""
        return self.document.artifact_id or os.path.basename(self.directory)


@dataclass(frozen=True)
class ModuleGroupNode:
    """
    Synthetic "Modules" node deferring materialization of submodules.

    Attributes:
        owner: Project that declares the submodules.
        modules: Declared submodule relative paths.
        icon: Icon reference for presentation layers.
    """
    owner: ProjectNode
    modules: Tuple[str, ...]
    icon: str = MODULES_ICON

    @property
    def kind(self) -> NodeKind:
        return NodeKind.MODULE_GROUP

    @property
    def label(self) -> str:
        return MODULES_GROUP_LABEL


TreeNode = Union[WorkspaceRoot, ProjectNode, ModuleGroupNode]
