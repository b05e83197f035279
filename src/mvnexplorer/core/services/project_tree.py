from __future__ import annotations

"""
Project Tree Engine.

Builds the Maven project explorer tree on demand. Expanding a workspace
root scans it for descriptor files; expanding a project yields a synthetic
"Modules" group; expanding that group resolves the declared submodule paths.
Sibling reads and parses of one expansion run concurrently and a failure of
one sibling never cancels the others.

The engine owns the discovery cache (canonical descriptor path -> node) for
the current generation. The cache is only ever appended to or cleared as a
whole by ``refresh()``, which also bumps the generation so that expansions
still in flight from the previous generation are discarded on completion.
"""

import asyncio
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from mvnexplorer.core.parsing.pom_parser import load_pom
from mvnexplorer.core.services.scanner import scan_async
from mvnexplorer.domain.constants import DEFAULT_DESCRIPTOR_FILENAME, DEFAULT_MAX_DEPTH
from mvnexplorer.domain.errors import DanglingModuleReference, ParseError, ScanError
from mvnexplorer.domain.project_models import (
    ModuleGroupNode,
    ProjectNode,
    TreeNode,
    WorkspaceRoot,
)
from mvnexplorer.infra.fs import canonical_path

logger = logging.getLogger(__name__)


class ProjectTreeEngine:
    """
    Lazily expanded tree of the Maven projects found in workspace folders.
    """

    def __init__(
            self,
            workspace_folders: Sequence[str] = (),
            descriptor_filename: str = DEFAULT_DESCRIPTOR_FILENAME,
            max_depth: int = DEFAULT_MAX_DEPTH,
            hide_nested_modules: bool = True,
            on_tree_changed: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Args:
            workspace_folders: Root directories to explore.
            descriptor_filename: Base name of build descriptor files.
            max_depth: Scan depth below each root (negative = unbounded).
            hide_nested_modules: Omit, at workspace level, projects declared
                as submodules of another project from the same scan.
            on_tree_changed: Called when the whole tree must be re-queried.
        """
        self._workspace_folders = list(workspace_folders)
        self._descriptor_filename = descriptor_filename
        self._max_depth = max_depth
        self._hide_nested_modules = hide_nested_modules
        self._on_tree_changed = on_tree_changed

        self._cache: Dict[str, ProjectNode] = {}
        self._generation = 0
        self._scan_errors: List[ScanError] = []

    @classmethod
    def from_config(
            cls,
            settings: Mapping[str, Any],
            on_tree_changed: Optional[Callable[[], None]] = None,
    ) -> "ProjectTreeEngine":
        """Build an engine from a validated settings dictionary."""
        return cls(
            workspace_folders=settings.get("workspace_folders", []),
            descriptor_filename=settings.get("descriptor_filename", DEFAULT_DESCRIPTOR_FILENAME),
            max_depth=settings.get("max_depth", DEFAULT_MAX_DEPTH),
            hide_nested_modules=settings.get("hide_nested_modules", True),
            on_tree_changed=on_tree_changed,
        )

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        """Refresh epoch; incremented by every ``refresh()``."""
        return self._generation

    @property
    def scan_errors(self) -> List[ScanError]:
        """Directories skipped by workspace scans of the current generation."""
        return list(self._scan_errors)

    def list_roots(self) -> List[WorkspaceRoot]:
        """
        Enumerate the configured workspace folders.

        Returns:
            List[WorkspaceRoot]: One root per folder, empty if none configured.
        """
        roots: List[WorkspaceRoot] = []
        for folder in self._workspace_folders:
            path = os.path.abspath(folder)
            name = os.path.basename(os.path.normpath(path)) or path
            roots.append(WorkspaceRoot(name=name, path=path))
        return roots

    async def expand(self, node: Optional[TreeNode] = None) -> List[TreeNode]:
        """
        Compute the children of a tree node.

        ``None`` stands for the invisible tree root and yields the workspace
        roots. Unknown node types have no children.

        Args:
            node: Node being expanded.

        Returns:
            List[TreeNode]: Child nodes, in deterministic order.
        """
        if node is None:
            return list(self.list_roots())
        if isinstance(node, WorkspaceRoot):
            return list(await self._expand_workspace(node))
        if isinstance(node, ProjectNode):
            return list(self._expand_project(node))
        if isinstance(node, ModuleGroupNode):
            return list(await self._expand_modules(node))
        return []

    def refresh(self) -> None:
        """
        Start a new generation and ask the UI to re-query from the roots.

        The discovery cache is cleared before the notification fires, so no
        expansion issued afterwards can observe entries of the old generation.
        """
        self._generation += 1
        self._cache.clear()
        self._scan_errors.clear()
        logger.debug(f"Tree: Refreshed, generation {self._generation}.")

        if self._on_tree_changed is not None:
            self._on_tree_changed()

    def cached_projects(self) -> List[ProjectNode]:
        """All projects materialized in the current generation, sorted by path."""
        return [self._cache[path] for path in sorted(self._cache)]

    def find_project(self, query: str) -> Optional[ProjectNode]:
        """
        Look up a cached project by descriptor path, directory or artifactId.

        Returns:
            Optional[ProjectNode]: First match in path order, or None.
        """
        q = (query or "").strip()
        if not q:
            return None

        key = canonical_path(q)
        if key in self._cache:
            return self._cache[key]

        projects = self.cached_projects()
        for project in projects:
            if canonical_path(project.directory) == key:
                return project
        for project in projects:
            if q in (project.artifact_id, project.document.coordinates):
                return project
        return None

    async def expand_all(self) -> List[ProjectNode]:
        """
        Materialize every reachable project (roots, then modules recursively).

        Used by non-interactive front-ends that need the full project list
        without a user driving the expansion.

        Returns:
            List[ProjectNode]: The cached projects after the walk.
        """
        visited: Set[str] = set()
        roots = self.list_roots()
        layers = await asyncio.gather(*(self._expand_workspace(root) for root in roots))
        frontier: List[ProjectNode] = [p for layer in layers for p in layer]

        while frontier:
            groups: List[ModuleGroupNode] = []
            for project in frontier:
                if project.pom_path in visited:
                    continue
                visited.add(project.pom_path)
                groups.extend(self._expand_project(project))

            children = await asyncio.gather(*(self._expand_modules(g) for g in groups))
            frontier = [p for batch in children for p in batch if p.pom_path not in visited]

        return self.cached_projects()

    # -------------------------------------------------------------------------
    # EXPANSION STEPS
    # -------------------------------------------------------------------------

    async def _expand_workspace(self, root: WorkspaceRoot) -> List[ProjectNode]:
        """Scan a workspace folder and wrap every parsable descriptor."""
        generation = self._generation
        errors: List[ScanError] = []

        pom_paths = await scan_async(root.path, self._descriptor_filename, self._max_depth, errors)
        projects = await self._load_projects(canonical_path(p) for p in pom_paths)

        if not self._is_current(generation, root.label):
            return []

        self._scan_errors.extend(errors)
        projects = self._register(projects)

        if self._hide_nested_modules:
            projects = await self._top_level_only(projects)
            if not self._is_current(generation, root.label):
                return []

        logger.debug(f"Tree: Workspace '{root.name}' yields {len(projects)} project(s).")
        return projects

    def _expand_project(self, project: ProjectNode) -> List[ModuleGroupNode]:
        """A project with declared submodules gets a single deferred group node."""
        if not project.modules:
            return []
        return [ModuleGroupNode(owner=project, modules=project.modules)]

    async def _expand_modules(self, group: ModuleGroupNode) -> List[ProjectNode]:
        """Resolve declared submodules; dangling references are omitted."""
        generation = self._generation

        located = await asyncio.gather(
            *(asyncio.to_thread(self._locate_module, group.owner, m) for m in group.modules)
        )

        seen: Set[str] = set()
        present: List[str] = []
        for module, (pom_path, found) in zip(group.modules, located):
            if pom_path in seen:
                continue
            seen.add(pom_path)
            if found:
                present.append(pom_path)
            else:
                logger.debug(f"Tree: {DanglingModuleReference(module, pom_path)}")

        projects = await self._load_projects(present)

        if not self._is_current(generation, group.owner.label):
            return []

        return self._register(projects)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _locate_module(self, owner: ProjectNode, module: str) -> Tuple[str, bool]:
        """
        Turn a declared module path into a canonical descriptor path.

        A module may name its directory or, as Maven also allows, a
        descriptor file directly. Touches the filesystem; call it from a
        worker thread.

        Returns:
            Tuple[str, bool]: Descriptor path and whether that file exists.
        """
        target = os.path.join(owner.directory, module)
        if module.lower().endswith(".xml") and os.path.isfile(target):
            return canonical_path(target), True
        pom_path = canonical_path(os.path.join(target, self._descriptor_filename))
        return pom_path, os.path.isfile(pom_path)

    def _module_edges(self, projects: List[ProjectNode]) -> Dict[str, Set[str]]:
        """Descriptor paths each project declares as modules (blocking)."""
        edges: Dict[str, Set[str]] = {}
        for project in projects:
            edges[project.pom_path] = {
                self._locate_module(project, m)[0] for m in project.modules
            } - {project.pom_path}
        return edges

    async def _load_projects(self, pom_paths: Iterable[str]) -> List[ProjectNode]:
        """Parse descriptors concurrently; failures are logged and dropped."""
        paths = list(pom_paths)
        results = await asyncio.gather(
            *(self._load_project(p) for p in paths),
            return_exceptions=True,
        )

        projects: List[ProjectNode] = []
        for pom_path, result in zip(paths, results):
            if isinstance(result, BaseException):
                logger.error(f"Tree: Unexpected failure loading '{pom_path}': {result!r}")
            elif result is not None:
                projects.append(result)
        return projects

    async def _load_project(self, pom_path: str) -> Optional[ProjectNode]:
        try:
            document = await asyncio.to_thread(load_pom, pom_path)
        except ParseError as e:
            logger.warning(f"Tree: Skipping malformed descriptor {e}")
            return None
        except OSError as e:
            logger.warning(f"Tree: Cannot read descriptor '{pom_path}': {e}")
            return None
        return ProjectNode(pom_path=pom_path, document=document)

    def _register(self, projects: List[ProjectNode]) -> List[ProjectNode]:
        """
        Merge freshly parsed projects into the discovery cache.

        A path already cached resolves to the cached node, and a path seen
        twice in the batch is emitted once.
        """
        result: List[ProjectNode] = []
        emitted: Set[str] = set()
        for project in projects:
            if project.pom_path in emitted:
                continue
            emitted.add(project.pom_path)
            cached = self._cache.setdefault(project.pom_path, project)
            result.append(cached)
        return result

    async def _top_level_only(self, projects: List[ProjectNode]) -> List[ProjectNode]:
        """
        Drop projects that another project of the same batch declares as a module.

        Every project stays reachable: when module declarations form a cycle,
        the first member in path order is kept visible.
        """
        edges = await asyncio.to_thread(self._module_edges, projects)
        declared: Set[str] = set().union(*edges.values()) if edges else set()

        visible = {p.pom_path for p in projects if p.pom_path not in declared}
        reached = _reachable(visible, edges)
        for project in projects:
            if project.pom_path not in reached:
                visible.add(project.pom_path)
                reached |= _reachable({project.pom_path}, edges)

        return [p for p in projects if p.pom_path in visible]

    def _is_current(self, generation: int, label: str) -> bool:
        if generation == self._generation:
            return True
        logger.debug(
            f"Tree: Discarding stale expansion of '{label}' "
            f"(generation {generation}, current {self._generation})."
        )
        return False


def _reachable(starts: Set[str], edges: Mapping[str, Set[str]]) -> Set[str]:
    """Paths reachable from ``starts`` through module declarations."""
    seen = set(starts)
    stack = list(starts)
    while stack:
        for nxt in edges.get(stack.pop(), ()):
            if nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return seen
