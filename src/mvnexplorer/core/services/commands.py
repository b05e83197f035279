from __future__ import annotations

"""
Maven Command Construction and Execution.

Renders the Maven invocations offered by the explorer (lifecycle and custom
goals, archetype generation, effective descriptor) both as an argv list for
execution and as a quoted one-line string for display. Execution is handed
to a TerminalRunner so front-ends and tests can substitute their own.
"""

import logging
import os
import re
import shlex
import shutil
import subprocess
from typing import List, Mapping, Optional, Sequence, Union

from mvnexplorer.domain.constants import (
    COORDINATE_PATTERN,
    TERMINAL_LABEL_PREFIX,
)
from mvnexplorer.domain.project_models import ProjectNode
from mvnexplorer.infra.fs import get_effective_pom_output_path, read_text_if_exists, safe_mkdir

logger = logging.getLogger(__name__)

_COORDINATE_RE = re.compile(COORDINATE_PATTERN)

Goals = Union[str, Sequence[str]]


# -----------------------------------------------------------------------------
# COMMAND BUILDERS
# -----------------------------------------------------------------------------

def split_goals(goals: Goals) -> List[str]:
    """
    Normalize a goal specification into a token list.

    A string is split with shell rules, so custom commands such as
    ``clean install -DskipTests`` or quoted property values keep their meaning.
    """
    if isinstance(goals, str):
        return shlex.split(goals)
    return [g for g in (str(x).strip() for x in goals) if g]


def build_goal_argv(
        executable: str,
        goals: Goals,
        pom_path: str,
        properties: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """
    Build the argv running goals against one descriptor.

    Returns:
        List[str]: ``[mvn, <goals...>, -f, <pom>, -Dk=v ...]``.
    """
    argv = [executable, *split_goals(goals), "-f", pom_path]
    for key, value in (properties or {}).items():
        argv.append(f"-D{key}={value}")
    return argv


def build_goal_command(
        executable: str,
        goals: Goals,
        pom_path: str,
        properties: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render a goal invocation as the command line shown to the user.

    Example:
        ``mvn clean install -f "/ws/app/pom.xml" -Dmaven.test.skip="true"``
    """
    parts = [executable, *split_goals(goals), "-f", _quote(pom_path)]
    for key, value in (properties or {}).items():
        parts.append(f"-D{key}={_quote(value)}")
    return " ".join(parts)


def terminal_label(project: ProjectNode) -> str:
    """Name of the terminal session running goals for a project."""
    return f"{TERMINAL_LABEL_PREFIX}{project.label}"


def validate_coordinate(value: Optional[str]) -> bool:
    """Check that a groupId/artifactId/version token is safe to pass to Maven."""
    return bool(value) and _COORDINATE_RE.match(value) is not None


def build_archetype_argv(
        executable: str,
        group_id: str,
        artifact_id: str,
        version: Optional[str] = None,
) -> List[str]:
    """
    Build the argv of ``archetype:generate``.

    Raises:
        ValueError: If a coordinate contains characters outside
            letters, digits, ``_``, ``-`` and ``.``.
    """
    _require_coordinate("groupId", group_id)
    _require_coordinate("artifactId", artifact_id)
    argv = [
        executable,
        "archetype:generate",
        f"-DarchetypeArtifactId={artifact_id}",
        f"-DarchetypeGroupId={group_id}",
    ]
    if version:
        _require_coordinate("version", version)
        argv.append(f"-DarchetypeVersion={version}")
    return argv


def build_archetype_command(
        executable: str,
        group_id: str,
        artifact_id: str,
        version: Optional[str] = None,
) -> str:
    """Display form of ``build_archetype_argv``."""
    argv = build_archetype_argv(executable, group_id, artifact_id, version)
    parts = argv[:2]
    for arg in argv[2:]:
        key, _, value = arg.partition("=")
        parts.append(f"{key}={_quote(value)}")
    return " ".join(parts)


def build_effective_pom_argv(executable: str, pom_path: str, output_path: str) -> List[str]:
    return [executable, "help:effective-pom", "-f", pom_path, f"-Doutput={output_path}"]


# -----------------------------------------------------------------------------
# EXECUTION
# -----------------------------------------------------------------------------

class TerminalRunner:
    """
    Runs Maven processes in the foreground of the current terminal.
    """

    def __init__(self, cwd: Optional[str] = None) -> None:
        self._cwd = cwd

    def run(self, argv: Sequence[str], label: str = "", cwd: Optional[str] = None) -> int:
        """
        Run a command with inherited stdio.

        Returns:
            int: Process exit code; 127 when the executable cannot be found.
        """
        resolved = _resolve_argv(argv)
        logger.info(f"[{label or resolved[0]}] {' '.join(resolved)}")
        try:
            completed = subprocess.run(resolved, cwd=cwd or self._cwd, check=False)
        except FileNotFoundError as e:
            logger.error(f"Executable not found: {e}")
            return 127
        return completed.returncode

    def capture(self, argv: Sequence[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
        """
        Run a command collecting its output as text.

        Raises:
            FileNotFoundError: If the executable cannot be found.
        """
        resolved = _resolve_argv(argv)
        logger.debug(f"Capturing: {' '.join(resolved)}")
        return subprocess.run(
            resolved,
            cwd=cwd or self._cwd,
            capture_output=True,
            text=True,
            check=False,
        )


def effective_pom_output_path(pom_path: str, output_dir: Optional[str] = None) -> str:
    """File receiving the effective descriptor of ``pom_path``."""
    return get_effective_pom_output_path(pom_path, base_dir=output_dir)


def generate_effective_pom(
        pom_path: str,
        executable: str = "mvn",
        output_dir: Optional[str] = None,
        runner: Optional[TerminalRunner] = None,
) -> Optional[str]:
    """
    Produce the effective descriptor of a project.

    The run counts as successful only when Maven exits with 0, writes nothing
    to stderr and the output file exists afterwards.

    Args:
        pom_path: Descriptor of the project.
        executable: Maven executable.
        output_dir: Directory for the generated file (user data dir by default).
        runner: Process runner.

    Returns:
        Optional[str]: Content of the effective descriptor, or None on failure.
    """
    runner = runner or TerminalRunner()
    output_path = effective_pom_output_path(pom_path, output_dir)

    ok, err = safe_mkdir(os.path.dirname(output_path))
    if not ok:
        logger.error(f"Effective POM: Cannot create output directory: {err}")
        return None

    argv = build_effective_pom_argv(executable, pom_path, output_path)
    try:
        completed = runner.capture(argv, cwd=os.path.dirname(pom_path))
    except OSError as e:
        logger.error(f"Effective POM: Failed to start Maven: {e}")
        return None

    stderr = (completed.stderr or "").strip()
    if completed.returncode != 0 or stderr or not os.path.isfile(output_path):
        logger.error(
            f"Effective POM: Generation failed for {pom_path} "
            f"(exit={completed.returncode}): {stderr or (completed.stdout or '').strip()[-500:]}"
        )
        return None

    try:
        return read_text_if_exists(output_path)
    except OSError as e:
        logger.error(f"Effective POM: Cannot read {output_path}: {e}")
        return None


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _quote(value: str) -> str:
    return '"' + str(value).replace('"', '\\"') + '"'


def _require_coordinate(name: str, value: Optional[str]) -> None:
    if not validate_coordinate(value):
        raise ValueError(f"Invalid archetype {name}: {value!r}")


def _resolve_argv(argv: Sequence[str]) -> List[str]:
    """Resolve the executable through PATH (``mvn.cmd`` on Windows)."""
    args = list(argv)
    if args:
        args[0] = shutil.which(args[0]) or args[0]
    return args
