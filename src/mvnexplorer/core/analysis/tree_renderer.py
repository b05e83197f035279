from __future__ import annotations

"""
Project Tree Renderer.

Walks the lazily expanded project tree through the engine and converts it
into ASCII lines (├──, └──), one block per workspace root. This is the
terminal counterpart of a tree view driving ``expand`` on user clicks.
"""

from typing import FrozenSet, List

from mvnexplorer.core.services.project_tree import ProjectTreeEngine
from mvnexplorer.domain.project_models import ProjectNode, TreeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

async def render_project_tree(engine: ProjectTreeEngine, show_paths: bool = False) -> List[str]:
    """
    Expand every node reachable from the workspace roots and render it.

    Args:
        engine: Engine whose tree is rendered.
        show_paths: Append each project's descriptor path to its label.

    Returns:
        List[str]: Rendered lines.
    """
    lines: List[str] = []
    for root in engine.list_roots():
        lines.append(f"{root.label}")
        await _render_children(engine, root, lines, "", frozenset(), show_paths)
    return lines


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

async def _render_children(
        engine: ProjectTreeEngine,
        node: TreeNode,
        lines: List[str],
        prefix: str,
        ancestors: FrozenSet[str],
        show_paths: bool,
) -> None:
    """
    Recursively append the children of ``node``.

    A project already present on the current branch is printed but not
    expanded again, so module declarations pointing back up terminate.
    """
    children = await engine.expand(node)
    total = len(children)

    for i, child in enumerate(children):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{_label(child, show_paths)}")

        branch = ancestors
        if isinstance(child, ProjectNode):
            if child.pom_path in ancestors:
                continue
            branch = ancestors | {child.pom_path}

        new_prefix = prefix + ("    " if is_last else "│   ")
        await _render_children(engine, child, lines, new_prefix, branch, show_paths)


def _label(node: TreeNode, show_paths: bool) -> str:
    if show_paths and isinstance(node, ProjectNode):
        return f"{node.label} ({node.pom_path})"
    return node.label
