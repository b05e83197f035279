from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of global options to settings overrides.
2. Subcommand schemas.
3. KEY=VALUE property parsing.
"""

import pytest

from mvnexplorer.interface.cli.args import args_to_overrides, build_parser, parse_properties


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_global_options_mapping():
    """Verify global options are mapped to settings overrides."""
    args = parse_args([
        "-w", "/ws1",
        "--workspace", "/ws2",
        "--max-depth", "3",
        "--descriptor", "build.xml",
        "--mvn", "./mvnw",
        "--flat",
        "projects",
    ])

    overrides = args_to_overrides(args)

    assert overrides["workspace_folders"] == ["/ws1", "/ws2"]
    assert overrides["max_depth"] == 3
    assert overrides["descriptor_filename"] == "build.xml"
    assert overrides["maven_executable"] == "./mvnw"
    assert overrides["hide_nested_modules"] is False


def test_cli_defaults_leave_settings_untouched():
    """Unset options map to None so persisted settings win."""
    overrides = args_to_overrides(parse_args(["tree"]))

    assert overrides["workspace_folders"] is None
    assert overrides["max_depth"] is None
    assert "hide_nested_modules" not in overrides
    assert parse_args(["tree"]).save_settings is False
    assert parse_args(["--save-settings", "tree"]).save_settings is True


def test_goal_subcommand():
    args = parse_args(["--dry-run", "goal", "install", "-p", "core", "-D", "skipTests=true"])

    assert args.command == "goal"
    assert args.goal == "install"
    assert args.project == "core"
    assert args.properties == ["skipTests=true"]
    assert args.dry_run is True


def test_goal_rejects_unknown_lifecycle_phase():
    with pytest.raises(SystemExit) as exc:
        parse_args(["goal", "explode"])
    assert exc.value.code == 2


def test_custom_requires_command_or_pick():
    with pytest.raises(SystemExit):
        parse_args(["custom"])
    assert parse_args(["custom", "--pick", "2"]).pick == 2
    assert parse_args(["custom", "--command", "clean verify"]).custom_command == "clean verify"


def test_archetype_subcommands():
    args = parse_args(["archetypes", "generate", "-g", "org.x", "-a", "tpl", "-v", "1.0", "--cwd", "/tmp"])
    assert args.archetype_command == "generate"
    assert (args.group_id, args.artifact_id, args.archetype_version) == ("org.x", "tpl", "1.0")

    listing = parse_args(["archetypes", "list", "--remote", "--search", "web"])
    assert listing.remote is True
    assert listing.search == "web"


def test_missing_subcommand_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        parse_args([])
    assert exc.value.code == 2


def test_parse_properties():
    """Verify KEY=VALUE splitting and detection of malformed items."""
    props, invalid = parse_properties(["a=1", "b=x=y", "c=", "broken", "=v"])

    assert props == {"a": "1", "b": "x=y", "c": ""}
    assert invalid == ["broken", "=v"]
