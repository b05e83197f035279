from __future__ import annotations

"""
Archetype Catalog Service.

Aggregates archetype catalogs from several sources (remote repository,
bundled default, locally cached copy, user supplied file) into a single
deduplicated list. A source that is missing, unreachable or malformed is
skipped; aggregation never fails as a whole.
"""

import asyncio
import logging
import os
from collections import OrderedDict
from typing import Iterable, List, Optional, Sequence, Tuple

from mvnexplorer.core.parsing.catalog_parser import parse_archetype_catalog
from mvnexplorer.domain import constants as const
from mvnexplorer.domain.archetype_models import Archetype
from mvnexplorer.domain.errors import CatalogFetchError, ParseError
from mvnexplorer.infra import network
from mvnexplorer.infra.fs import atomic_write_text, get_user_data_dir, read_text_if_exists

logger = logging.getLogger(__name__)

_RESOURCES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "resources")


# -----------------------------------------------------------------------------
# PURE AGGREGATION
# -----------------------------------------------------------------------------

def merge_archetypes(lists: Iterable[Iterable[Archetype]]) -> List[Archetype]:
    """
    Merge archetype lists by (groupId, artifactId).

    Version lists are concatenated in source order, but a version already
    listed for the key is not repeated: ``["1.0"]`` then ``["2.0", "1.0"]``
    merges to ``["1.0", "2.0"]``. Descriptive fields keep the first non-empty
    value seen. Output order is first-seen order. Inputs are not modified.
    """
    merged: "OrderedDict[Tuple[str, str], Archetype]" = OrderedDict()

    for items in lists:
        for item in items:
            current = merged.get(item.key)
            if current is None:
                merged[item.key] = Archetype(
                    group_id=item.group_id,
                    artifact_id=item.artifact_id,
                    repository=item.repository,
                    description=item.description,
                    versions=list(dict.fromkeys(item.versions)),
                )
                continue

            for version in item.versions:
                if version not in current.versions:
                    current.versions.append(version)
            if not current.description and item.description:
                current.description = item.description
            if not current.repository and item.repository:
                current.repository = item.repository

    return list(merged.values())


def aggregate_catalogs(
        texts: Sequence[Optional[str]],
        labels: Optional[Sequence[str]] = None,
) -> List[Archetype]:
    """
    Parse and merge several catalog documents.

    Args:
        texts: Raw catalog XML per source; None marks an absent source.
        labels: Optional source names for diagnostics.

    Returns:
        List[Archetype]: Merged entries in first-seen order.
    """
    parsed: List[List[Archetype]] = []

    for index, text in enumerate(texts):
        label = labels[index] if labels and index < len(labels) else f"source #{index + 1}"
        if text is None:
            logger.debug(f"Catalog: {label} not available.")
            continue
        try:
            parsed.append(parse_archetype_catalog(text, source=label))
        except ParseError as e:
            logger.warning(f"Catalog: {CatalogFetchError(label, str(e))}")

    return merge_archetypes(parsed)


def search_archetypes(items: Sequence[Archetype], query: str) -> List[Archetype]:
    """
    Filter and rank archetypes for a free-text query.

    Ranking: exact artifactId, artifactId prefix, substring of
    ``groupId:artifactId``, substring of the description. Ties keep the
    input order. A blank query returns the input unchanged.
    """
    q = (query or "").strip().lower()
    if not q:
        return list(items)

    ranked: List[Tuple[int, int, Archetype]] = []
    for position, item in enumerate(items):
        artifact = item.artifact_id.lower()
        if artifact == q:
            rank = 0
        elif artifact.startswith(q):
            rank = 1
        elif q in item.label.lower():
            rank = 2
        elif item.description and q in item.description.lower():
            rank = 3
        else:
            continue
        ranked.append((rank, position, item))

    ranked.sort(key=lambda r: (r[0], r[1]))
    return [item for _, _, item in ranked]


# -----------------------------------------------------------------------------
# CATALOG SOURCES
# -----------------------------------------------------------------------------

class ArchetypeCatalogService:
    """
    Resolves catalog sources and keeps the offline copy of the remote catalog.
    """

    def __init__(
            self,
            remote_url: str = const.REMOTE_ARCHETYPE_CATALOG_URL,
            timeout: float = const.CATALOG_FETCH_TIMEOUT,
            user_catalog_path: str = "",
            cache_dir: Optional[str] = None,
            bundled_path: Optional[str] = None,
    ) -> None:
        self._remote_url = remote_url
        self._timeout = timeout
        self._user_catalog_path = user_catalog_path
        self._cache_dir = cache_dir or get_user_data_dir()
        self._bundled_path = bundled_path or os.path.join(_RESOURCES_DIR, const.BUNDLED_CATALOG_RESOURCE)

    @property
    def local_catalog_path(self) -> str:
        """Offline copy of the last successfully fetched remote catalog."""
        return os.path.join(self._cache_dir, const.LOCAL_CATALOG_FILENAME)

    def update_catalog(self) -> bool:
        """
        Download the remote catalog and persist it for offline use.

        The previous offline copy is kept when the download fails or the
        downloaded document does not parse.

        Returns:
            bool: True if a fresh catalog was stored.
        """
        if not self._remote_url:
            logger.warning("Catalog: No remote catalog URL configured.")
            return False

        xml_text = network.fetch_archetype_catalog(self._remote_url, timeout=self._timeout)
        if xml_text is None:
            return False
        return self._persist_remote(xml_text)

    def common_archetypes(self) -> List[Archetype]:
        """Archetypes of the bundled default catalog only."""
        return aggregate_catalogs([self._read_source(self._bundled_path)], labels=["bundled"])

    async def list_archetypes(self, include_remote: bool = False) -> List[Archetype]:
        """
        Aggregate every available catalog source.

        Sources are read concurrently and merged in the order remote,
        bundled, local cache, user catalog. A reachable remote catalog is
        also persisted as the new local cache.

        Args:
            include_remote: Also query the remote repository.

        Returns:
            List[Archetype]: Merged archetypes.
        """
        labels = ["remote", "bundled", "local cache", "user catalog"]
        jobs = [
            self._fetch_remote() if include_remote else _nothing(),
            asyncio.to_thread(self._read_source, self._bundled_path),
            asyncio.to_thread(self._read_source, self.local_catalog_path),
            asyncio.to_thread(self._read_source, self._user_catalog_path),
        ]
        results = await asyncio.gather(*jobs, return_exceptions=True)

        texts: List[Optional[str]] = []
        for label, result in zip(labels, results):
            if isinstance(result, BaseException):
                logger.warning(f"Catalog: {CatalogFetchError(label, str(result))}")
                texts.append(None)
            else:
                texts.append(result)

        if texts[0] is not None:
            await asyncio.to_thread(self._persist_remote, texts[0])

        archetypes = aggregate_catalogs(texts, labels=labels)
        logger.info(f"Catalog: {len(archetypes)} archetypes available.")
        return archetypes

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    async def _fetch_remote(self) -> Optional[str]:
        return await asyncio.to_thread(
            network.fetch_archetype_catalog, self._remote_url, self._timeout
        )

    def _persist_remote(self, xml_text: str) -> bool:
        """Store a remote catalog locally if it parses."""
        try:
            count = len(parse_archetype_catalog(xml_text, source=self._remote_url))
        except ParseError as e:
            logger.warning(f"Catalog: {CatalogFetchError(self._remote_url, str(e))}")
            return False

        try:
            atomic_write_text(self.local_catalog_path, xml_text)
        except OSError as e:
            logger.error(f"Catalog: Failed to store offline copy at '{self.local_catalog_path}': {e}")
            return False

        logger.info(f"Catalog: Offline copy updated ({count} entries).")
        return True

    @staticmethod
    def _read_source(path: str) -> Optional[str]:
        """Read a catalog file, treating unreadable files as absent."""
        try:
            return read_text_if_exists(path)
        except OSError as e:
            logger.warning(f"Catalog: {CatalogFetchError(path, str(e))}")
            return None


async def _nothing() -> None:
    return None

