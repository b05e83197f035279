from __future__ import annotations

"""
Descriptor Discovery Service.

Depth-bounded filesystem search for build descriptor files. Unreadable
directories and symlink cycles are skipped so that one bad folder only
shrinks the result instead of aborting the whole scan. Directory links
pointing back into the scanned tree are not followed, so every descriptor
is reported under its real location. All state is local
to a call, so independent roots can be scanned concurrently.
"""

import asyncio
import logging
import os
from typing import List, Optional, Set, Tuple

from mvnexplorer.domain.errors import ScanError

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def find_all_in_dir(
        root: str,
        filename: str,
        max_depth: int = -1,
        errors: Optional[List[ScanError]] = None,
) -> List[str]:
    """
    Collect every file named ``filename`` below ``root``.

    Depth counts directory levels below the root: 0 inspects only the
    root's own entries, 1 also descends into its direct subdirectories,
    and any negative value removes the bound.

    Args:
        root: Directory to search.
        filename: Exact base name to match.
        max_depth: Maximum number of directory levels to descend.
        errors: Optional accumulator receiving a ScanError per skipped directory.

    Returns:
        List[str]: Absolute paths of matches in lexical order.
    """
    root_abs = os.path.abspath(root)
    root_real = os.path.realpath(root_abs)
    matches: List[str] = []
    visited: Set[str] = set()

    stack: List[Tuple[str, int]] = [(root_abs, max_depth)]
    while stack:
        directory, remaining = stack.pop()

        real = os.path.realpath(directory)
        if real in visited:
            logger.debug(f"Scanner: Skipping already visited directory {directory}")
            continue
        visited.add(real)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            _record(errors, ScanError(directory, e.strerror or str(e)))
            continue

        subdirs: List[Tuple[str, int]] = []
        for entry in entries:
            if entry.name == filename and _is_file(entry):
                matches.append(entry.path)
            elif remaining != 0 and _is_dir(entry):
                if _links_inside(entry, root_real):
                    logger.debug(f"Scanner: Skipping link into the scanned tree {entry.path}")
                    continue
                subdirs.append((entry.path, remaining - 1 if remaining > 0 else remaining))

        # Reversed so that siblings are popped in lexical order.
        stack.extend(reversed(subdirs))

    matches.sort()
    logger.debug(f"Scanner: {len(matches)} '{filename}' found under {root_abs} (depth={max_depth})")
    return matches


async def scan_async(
        root: str,
        filename: str,
        max_depth: int = -1,
        errors: Optional[List[ScanError]] = None,
) -> List[str]:
    """Run ``find_all_in_dir`` in a worker thread so the event loop keeps serving."""
    return await asyncio.to_thread(find_all_in_dir, root, filename, max_depth, errors)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _is_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def _record(errors: Optional[List[ScanError]], error: ScanError) -> None:
    """Log a skipped directory and hand it to the caller's accumulator."""
    logger.debug(f"Scanner: {error}")
    if errors is not None:
        errors.append(error)


def _links_inside(entry: os.DirEntry, root_real: str) -> bool:
    """True for a directory symlink whose target the scan reaches under its own name."""
    try:
        if not entry.is_symlink():
            return False
    except OSError:
        return False
    target = os.path.realpath(entry.path)
    return target == root_real or target.startswith(root_real.rstrip(os.sep) + os.sep)
