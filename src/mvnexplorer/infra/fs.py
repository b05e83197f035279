from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation, per-user storage resolution and
safe text persistence utilities. Acts as an abstraction over the 'os' module
to ensure uniform behavior across Windows and Unix-like systems.
"""

import hashlib
import os
import tempfile
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "MvnExplorer"
UNIX_APP_DIR_NAME = ".mvnexplorer"
HISTORY_SUBDIR = "history"
EFFECTIVE_POM_SUBDIR = "effective-poms"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/MvnExplorer
    - Linux/Mac: ~/.mvnexplorer

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def canonical_path(path: str) -> str:
    """
    Produce the canonical identity of a path (absolute, normalized).

    Two spellings of the same location ('a/./b', 'a/b/', 'a/c/../b') map to
    the same string, which makes the result usable as a deduplication key.
    """
    return os.path.normcase(os.path.normpath(os.path.abspath(path)))


def path_digest(path: str) -> str:
    """Stable SHA-256 digest of a canonical path, used to name per-project files."""
    return hashlib.sha256(canonical_path(path).encode("utf-8")).hexdigest()


def get_history_cache_path(project_path: str, base_dir: Optional[str] = None) -> str:
    """
    Resolve the command-history cache file owned by one project.

    Args:
        project_path: Descriptor path identifying the project.
        base_dir: Optional storage root (defaults to the user data dir).

    Returns:
        str: Absolute path of the line-oriented history file.
    """
    root = base_dir or os.path.join(get_user_data_dir(), HISTORY_SUBDIR)
    return os.path.join(root, f"{path_digest(project_path)}.txt")


def get_effective_pom_output_path(pom_path: str, base_dir: Optional[str] = None) -> str:
    """Resolve where the generated effective descriptor of a project is written."""
    root = base_dir or os.path.join(get_user_data_dir(), EFFECTIVE_POM_SUBDIR)
    return os.path.join(root, f"effective-pom-{path_digest(pom_path)[:16]}.xml")

# -----------------------------------------------------------------------------
# FILESYSTEM I/O API
# -----------------------------------------------------------------------------

def read_text_if_exists(path: Optional[str]) -> Optional[str]:
    """
    Read a UTF-8 text file, returning None when it is absent.

    Args:
        path: File to read (None is accepted and yields None).

    Returns:
        Optional[str]: File content or None.

    Raises:
        OSError: When the file exists but cannot be read.
    """
    if not path or not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def atomic_write_text(path: str, content: str) -> None:
    """
    Replace the content of a file in a single rename step.

    The content is staged in a sibling temporary file which is then moved
    over the target, so readers never observe a half-written file.

    Raises:
        OSError: When the directory or the file cannot be written.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)
