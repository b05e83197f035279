from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, resolution of settings
(defaults, persistent storage and CLI overrides), dispatch of the requested
explorer action and rendering of its result, as text or JSON.
"""

import asyncio
import json
import os
import sys
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mvnexplorer.core.analysis.tree_renderer import render_project_tree
from mvnexplorer.core.services import commands
from mvnexplorer.core.services.catalog import ArchetypeCatalogService, search_archetypes
from mvnexplorer.core.services.history import CommandHistoryStore
from mvnexplorer.core.services.project_tree import ProjectTreeEngine
from mvnexplorer.domain.config import (
    load_config,
    load_prompt_defaults,
    save_config,
    save_prompt_defaults,
    validate_settings,
)
from mvnexplorer.domain.constants import ARCHETYPE_TERMINAL_LABEL
from mvnexplorer.domain.errors import CacheIOError, MvnExplorerError
from mvnexplorer.domain.project_models import ProjectNode
from mvnexplorer.infra.fs import read_text_if_exists
from mvnexplorer.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
    get_recent_logs,
)
from mvnexplorer.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

Handler = Callable[[Any, Dict[str, Any]], Awaitable[int]]


class UsageError(MvnExplorerError):
    """Invalid user input detected after argument parsing."""


# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 operational failure, 2 invalid input).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, rotating file in the data dir)
    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=get_default_log_path()))

    logger.debug("CLI execution initiated. Resolving settings...")

    # 3. Resolve settings (persistent state + command-line overrides)
    overrides = cli_args.args_to_overrides(args)
    raw_settings = _merge_settings(load_config(), overrides)
    settings, warnings = validate_settings(raw_settings)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_settings:
        save_config(settings)
        logger.info("Settings saved as new defaults.")

    if not settings["workspace_folders"]:
        settings["workspace_folders"] = [os.getcwd()]

    # 4. Dispatch
    handler = _resolve_handler(args)
    try:
        return asyncio.run(handler(args, settings))
    except UsageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except MvnExplorerError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.critical(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE


# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_settings(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of non-empty override values into the persisted settings.

    Args:
        base: Settings loaded from disk.
        overrides: Values mapped from the command line.

    Returns:
        Dict[str, Any]: The merged settings.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in base and v is not None:
            out[k] = v
    return out


def _resolve_handler(args: Any) -> Handler:
    if args.command == "archetypes":
        return _ARCHETYPE_HANDLERS[args.archetype_command]
    return _HANDLERS[args.command]


# -----------------------------------------------------------------------------
# TREE COMMANDS
# -----------------------------------------------------------------------------

async def _cmd_roots(args: Any, settings: Dict[str, Any]) -> int:
    roots = ProjectTreeEngine.from_config(settings).list_roots()
    if args.json_output:
        _print_json([{"name": r.name, "path": r.path} for r in roots])
    else:
        for r in roots:
            print(f"{r.name}\t{r.path}")
    return EXIT_OK


async def _cmd_tree(args: Any, settings: Dict[str, Any]) -> int:
    engine = ProjectTreeEngine.from_config(settings)
    lines = await render_project_tree(engine, show_paths=args.paths)
    if args.json_output:
        _print_json({"lines": lines})
    else:
        print("\n".join(lines))
    _report_scan_errors(engine)
    return EXIT_OK


async def _cmd_projects(args: Any, settings: Dict[str, Any]) -> int:
    engine = ProjectTreeEngine.from_config(settings)
    projects = await engine.expand_all()
    if args.json_output:
        _print_json([_project_to_dict(p) for p in projects])
    else:
        for p in projects:
            print(f"{p.label}\t{p.document.coordinates}:{p.document.version or ''}\t{p.pom_path}")
    _report_scan_errors(engine)
    return EXIT_OK


async def _cmd_show(args: Any, settings: Dict[str, Any]) -> int:
    project = await _select_project(settings, args.project)
    content = await asyncio.to_thread(read_text_if_exists, project.pom_path)
    if content is None:
        print(f"ERROR: Descriptor vanished: {project.pom_path}", file=sys.stderr)
        return EXIT_FAILURE
    if args.json_output:
        _print_json({"path": project.pom_path, "content": content})
    else:
        print(content)
    return EXIT_OK


# -----------------------------------------------------------------------------
# GOAL COMMANDS
# -----------------------------------------------------------------------------

async def _cmd_goal(args: Any, settings: Dict[str, Any]) -> int:
    properties, invalid = cli_args.parse_properties(args.properties)
    if invalid:
        raise UsageError(f"Malformed property (expected KEY=VALUE): {', '.join(invalid)}")

    project = await _select_project(settings, args.project)
    return await _run_goals(args, settings, project, args.goal, properties)


async def _cmd_custom(args: Any, settings: Dict[str, Any]) -> int:
    project = await _select_project(settings, args.project)
    store = CommandHistoryStore(max_entries=settings["history_size"])
    history = store.load(project.pom_path)

    if args.pick is not None:
        if not 1 <= args.pick <= len(history):
            raise UsageError(f"History has {len(history)} entries; cannot pick #{args.pick}.")
        command = history[args.pick - 1]
    else:
        command = (args.custom_command or "").strip()

    if not command:
        logger.info("Custom goal: empty command ignored.")
        return EXIT_OK

    try:
        commands.split_goals(command)
    except ValueError as e:
        raise UsageError(f"Cannot parse custom command {command!r}: {e}") from e

    try:
        store.record(project.pom_path, command)
    except CacheIOError as e:
        logger.warning(str(e))
        print(f"WARNING: {e}", file=sys.stderr)

    return await _run_goals(args, settings, project, command, None)


async def _cmd_history(args: Any, settings: Dict[str, Any]) -> int:
    project = await _select_project(settings, args.project)
    store = CommandHistoryStore(max_entries=settings["history_size"])
    entries = store.load(project.pom_path)
    path = store.cache_path(project.pom_path)

    if args.json_output:
        _print_json({"project": project.pom_path, "path": path, "entries": entries})
        return EXIT_OK

    print(f"History file: {path}")
    for i, entry in enumerate(entries, start=1):
        print(f"{i:>3}. {entry}")
    return EXIT_OK


async def _cmd_effective_pom(args: Any, settings: Dict[str, Any]) -> int:
    project = await _select_project(settings, args.project)
    executable = settings["maven_executable"]
    output_path = commands.effective_pom_output_path(project.pom_path)

    if args.dry_run:
        argv = commands.build_effective_pom_argv(executable, project.pom_path, output_path)
        print(" ".join(argv))
        return EXIT_OK

    content = await asyncio.to_thread(commands.generate_effective_pom, project.pom_path, executable)
    if content is None:
        print(f"ERROR: Could not generate the effective POM of {project.label}.", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        _print_json({"project": project.pom_path, "path": output_path, "content": content})
    else:
        print(content)
    return EXIT_OK


async def _run_goals(
        args: Any,
        settings: Dict[str, Any],
        project: ProjectNode,
        goals: Any,
        properties: Optional[Dict[str, str]],
) -> int:
    executable = settings["maven_executable"]
    display = commands.build_goal_command(executable, goals, project.pom_path, properties)

    if args.dry_run:
        print(display)
        return EXIT_OK

    argv = commands.build_goal_argv(executable, goals, project.pom_path, properties)
    runner = commands.TerminalRunner()
    rc = await asyncio.to_thread(runner.run, argv, commands.terminal_label(project), project.directory)
    return EXIT_OK if rc == 0 else EXIT_FAILURE


async def _cmd_logs(args: Any, settings: Dict[str, Any]) -> int:
    print(get_recent_logs(max(1, args.lines)), end="")
    return EXIT_OK


# -----------------------------------------------------------------------------
# ARCHETYPE COMMANDS
# -----------------------------------------------------------------------------

def _catalog_service(settings: Dict[str, Any]) -> ArchetypeCatalogService:
    return ArchetypeCatalogService(
        remote_url=settings["remote_catalog_url"],
        timeout=settings["catalog_timeout"],
        user_catalog_path=settings["user_catalog_path"],
    )


async def _cmd_archetypes_list(args: Any, settings: Dict[str, Any]) -> int:
    service = _catalog_service(settings)
    if args.common:
        items = await asyncio.to_thread(service.common_archetypes)
    else:
        items = await service.list_archetypes(include_remote=args.remote)

    if args.search:
        items = search_archetypes(items, args.search)

    if args.json_output:
        _print_json([asdict(a) for a in items])
    else:
        for a in items:
            print(f"{a.label}\t{a.latest_version or '-'}\t{a.description or ''}")
    return EXIT_OK


async def _cmd_archetypes_update(args: Any, settings: Dict[str, Any]) -> int:
    service = _catalog_service(settings)
    ok = await asyncio.to_thread(service.update_catalog)
    if not ok:
        print("ERROR: Archetype catalog could not be updated.", file=sys.stderr)
        return EXIT_FAILURE
    print(f"Catalog stored at {service.local_catalog_path}")
    return EXIT_OK


async def _cmd_archetypes_generate(args: Any, settings: Dict[str, Any]) -> int:
    defaults = load_prompt_defaults()
    group_id = (args.group_id or defaults["archetype_group_id"]).strip()
    artifact_id = (args.artifact_id or defaults["archetype_artifact_id"]).strip()
    version = (args.archetype_version or defaults["archetype_version"] or "").strip() or None

    for name, value in (("groupId", group_id), ("artifactId", artifact_id), ("version", version)):
        if value is not None and not commands.validate_coordinate(value):
            raise UsageError(f"Invalid archetype {name}: {value!r}")

    save_prompt_defaults({
        "archetype_group_id": group_id,
        "archetype_artifact_id": artifact_id,
        "archetype_version": version or "",
    })

    executable = settings["maven_executable"]
    if args.dry_run:
        print(commands.build_archetype_command(executable, group_id, artifact_id, version))
        return EXIT_OK

    cwd = os.path.abspath(args.cwd) if args.cwd else os.getcwd()
    if not os.path.isdir(cwd):
        raise UsageError(f"Target directory does not exist: {cwd}")

    argv = commands.build_archetype_argv(executable, group_id, artifact_id, version)
    runner = commands.TerminalRunner()
    rc = await asyncio.to_thread(runner.run, argv, ARCHETYPE_TERMINAL_LABEL, cwd)
    return EXIT_OK if rc == 0 else EXIT_FAILURE


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

async def _select_project(settings: Dict[str, Any], query: Optional[str]) -> ProjectNode:
    """
    Resolve the project a command targets.

    Without a query the workspace must contain exactly one project.

    Raises:
        UsageError: If no project, or more than one, matches.
    """
    engine = ProjectTreeEngine.from_config(settings)
    projects = await engine.expand_all()

    if query:
        project = engine.find_project(query)
        if project is None:
            raise UsageError(f"No project matches '{query}'.")
        return project

    if len(projects) == 1:
        return projects[0]
    if not projects:
        raise UsageError("No Maven project found in the workspace.")

    listing = "\n".join(f"  {p.label}\t{p.pom_path}" for p in projects)
    raise UsageError(f"Several projects found; choose one with --project:\n{listing}")


def _project_to_dict(project: ProjectNode) -> Dict[str, Any]:
    doc = project.document
    return {
        "label": project.label,
        "groupId": doc.group_id,
        "artifactId": doc.artifact_id,
        "version": doc.version,
        "packaging": doc.packaging,
        "pom": project.pom_path,
        "modules": list(doc.modules),
    }


def _report_scan_errors(engine: ProjectTreeEngine) -> None:
    for err in engine.scan_errors:
        logger.warning(str(err))


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


_HANDLERS: Dict[str, Handler] = {
    "roots": _cmd_roots,
    "tree": _cmd_tree,
    "projects": _cmd_projects,
    "show": _cmd_show,
    "goal": _cmd_goal,
    "custom": _cmd_custom,
    "history": _cmd_history,
    "effective-pom": _cmd_effective_pom,
    "logs": _cmd_logs,
}

_ARCHETYPE_HANDLERS: Dict[str, Handler] = {
    "list": _cmd_archetypes_list,
    "update": _cmd_archetypes_update,
    "generate": _cmd_archetypes_generate,
}

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
