from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema (global options and one
subcommand per explorer action) and translates the parsed namespace into
settings overrides understood by the domain configuration layer.
"""

import argparse
from typing import Any, Dict, List, Optional, Tuple

from mvnexplorer import __version__
from mvnexplorer.domain.constants import LIFECYCLE_GOALS

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the mvnexplorer CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="mvnexplorer",
        description="Browse Maven projects in workspace folders and run goals against them.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # --- Discovery ---
    p.add_argument(
        "-w", "--workspace",
        dest="workspace_folders",
        action="append",
        default=None,
        help="Workspace folder to explore (repeatable). Defaults to the configured folders or the current directory.",
    )
    p.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=None,
        help="Directory levels scanned below each workspace folder (-1 = unbounded).",
    )
    p.add_argument(
        "--descriptor",
        dest="descriptor_filename",
        default=None,
        help="Descriptor file name to look for (default: pom.xml).",
    )
    p.add_argument(
        "--flat",
        action="store_true",
        help="List nested modules at workspace level too.",
    )
    p.add_argument(
        "--save-settings",
        dest="save_settings",
        action="store_true",
        help="Persist the discovery and execution options of this run as the new defaults.",
    )

    # --- Execution ---
    p.add_argument(
        "--mvn",
        dest="maven_executable",
        default=None,
        help="Maven executable (default: mvn).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the Maven command instead of running it.",
    )

    # --- Output and diagnostics ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine readable JSON.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    sub.add_parser("roots", help="List workspace folders.")

    tree = sub.add_parser("tree", help="Print the project tree.")
    tree.add_argument("--paths", action="store_true", help="Show descriptor paths.")

    sub.add_parser("projects", help="List every discovered project.")

    show = sub.add_parser("show", help="Print the raw descriptor of a project.")
    _add_project_option(show)

    goal = sub.add_parser("goal", help="Run a lifecycle goal on a project.")
    goal.add_argument("goal", choices=LIFECYCLE_GOALS, help="Lifecycle goal.")
    _add_project_option(goal)
    goal.add_argument(
        "-D",
        dest="properties",
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help="System property passed to Maven (repeatable).",
    )

    custom = sub.add_parser("custom", help="Run custom goals and remember them.")
    _add_project_option(custom)
    chosen = custom.add_mutually_exclusive_group(required=True)
    chosen.add_argument("--command", dest="custom_command", default=None, help="Goals and options to run.")
    chosen.add_argument("--pick", type=int, default=None, help="Re-run the N-th history entry (1 = latest).")

    history = sub.add_parser("history", help="Show the custom goal history of a project.")
    _add_project_option(history)

    effective = sub.add_parser("effective-pom", help="Generate and print the effective descriptor.")
    _add_project_option(effective)

    logs = sub.add_parser("logs", help="Print the tail of the diagnostic log file.")
    logs.add_argument("-n", "--lines", type=int, default=100, help="Number of lines (default: 100).")

    arch = sub.add_parser("archetypes", help="Archetype catalog operations.")
    arch_sub = arch.add_subparsers(dest="archetype_command", metavar="ACTION")
    arch_sub.required = True

    arch_list = arch_sub.add_parser("list", help="List known archetypes.")
    arch_list.add_argument("--remote", action="store_true", help="Include the remote catalog.")
    arch_list.add_argument("--common", action="store_true", help="Only the bundled common archetypes.")
    arch_list.add_argument("--search", default=None, help="Filter by free text.")

    arch_sub.add_parser("update", help="Download the remote catalog for offline use.")

    arch_gen = arch_sub.add_parser("generate", help="Create a project from an archetype.")
    arch_gen.add_argument("-g", "--group-id", dest="group_id", default=None)
    arch_gen.add_argument("-a", "--artifact-id", dest="artifact_id", default=None)
    arch_gen.add_argument("-v", "--archetype-version", dest="archetype_version", default=None)
    arch_gen.add_argument("--cwd", default=None, help="Directory in which the project is generated.")

    return p


def _add_project_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p", "--project",
        default=None,
        help="Descriptor path, project directory or artifactId. Required when several projects exist.",
    )

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into settings overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Settings overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["workspace_folders"] = args.workspace_folders
    overrides["max_depth"] = args.max_depth
    overrides["descriptor_filename"] = args.descriptor_filename
    overrides["maven_executable"] = args.maven_executable

    if args.flat:
        overrides["hide_nested_modules"] = False

    return overrides


def parse_properties(values: Optional[List[str]]) -> Tuple[Dict[str, str], List[str]]:
    """
    Split ``KEY=VALUE`` items.

    Returns:
        Tuple[Dict[str, str], List[str]]: (Properties, malformed items).
    """
    props: Dict[str, str] = {}
    invalid: List[str] = []
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            invalid.append(item)
            continue
        props[key.strip()] = value
    return props, invalid
