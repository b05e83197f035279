from __future__ import annotations

"""
Command History Persistence Service.

Keeps, per project, a bounded most-recently-used list of the custom goal
strings the user has run. Each project owns one plain-text cache file with
one command per line, most recent first. Reads are fail-safe (a missing or
unreadable file is an empty history); write failures are raised as
CacheIOError so the caller can show a non-fatal notice.
"""

import logging
import os
import threading
from typing import List, Optional, Sequence

from mvnexplorer.domain.constants import DEFAULT_HISTORY_SIZE
from mvnexplorer.domain.errors import CacheIOError
from mvnexplorer.infra.fs import HISTORY_SUBDIR, atomic_write_text, get_history_cache_path, get_user_data_dir

logger = logging.getLogger(__name__)


def promote(history: Sequence[str], item: str, limit: int = DEFAULT_HISTORY_SIZE) -> List[str]:
    """
    Move (or insert) a command to the front of a history list.

    Other occurrences of the command are removed so each entry appears once,
    and the result is truncated to ``limit`` entries. The input is not modified.

    Args:
        history: Current history, most recent first.
        item: Command to promote (surrounding whitespace is ignored).
        limit: Maximum length of the result.

    Returns:
        List[str]: New history list.
    """
    command = item.strip()
    if not command:
        return list(history)[:limit]
    rest = [h for h in history if h != command]
    return ([command] + rest)[:limit]


class CommandHistoryStore:
    """
    Per-project MRU command list backed by line-oriented cache files.
    """

    def __init__(self, cache_dir: Optional[str] = None, max_entries: int = DEFAULT_HISTORY_SIZE) -> None:
        """
        Args:
            cache_dir: Directory holding the history files
                (defaults to ``<user data dir>/history``).
            max_entries: Bound applied on load and on promotion.
        """
        self._cache_dir = cache_dir or os.path.join(get_user_data_dir(), HISTORY_SUBDIR)
        self._max_entries = max(1, int(max_entries))
        self._lock = threading.RLock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def cache_path(self, project_path: str) -> str:
        """Absolute path of the history file owned by a project."""
        return get_history_cache_path(project_path, base_dir=self._cache_dir)

    def load(self, project_path: str) -> List[str]:
        """
        Read a project's history, most recent first.

        Returns:
            List[str]: Up to ``max_entries`` commands; empty when the file is
            missing or cannot be read.
        """
        path = self.cache_path(project_path)
        if not os.path.exists(path):
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = [line.strip() for line in f]
        except OSError as e:
            logger.warning(f"History: {CacheIOError(path, str(e))}")
            return []

        return [line for line in lines if line][: self._max_entries]

    def promote(self, history: Sequence[str], item: str) -> List[str]:
        """Promote ``item`` using this store's bound."""
        return promote(history, item, self._max_entries)

    def save(self, project_path: str, history: Sequence[str]) -> None:
        """
        Overwrite a project's history file.

        Raises:
            CacheIOError: If the file cannot be written.
        """
        path = self.cache_path(project_path)
        entries = [h for h in (e.strip() for e in history) if h][: self._max_entries]
        content = "".join(f"{h}\n" for h in entries)

        try:
            with self._lock:
                atomic_write_text(path, content)
        except OSError as e:
            raise CacheIOError(path, str(e)) from e

        logger.debug(f"History: {len(entries)} entries saved for {project_path}")

    def record(self, project_path: str, command: str) -> List[str]:
        """
        Load, promote and persist in one step.

        Returns:
            List[str]: The updated history.

        Raises:
            CacheIOError: If the updated history cannot be written.
        """
        with self._lock:
            updated = self.promote(self.load(project_path), command)
            self.save(project_path, updated)
        return updated
