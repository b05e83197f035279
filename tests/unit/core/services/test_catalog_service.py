from __future__ import annotations

"""
Unit tests for the Archetype Catalog Service.

Verifies merging by (groupId, artifactId), tolerance to missing and
malformed sources, search ranking and the offline catalog copy.
"""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from mvnexplorer.core.services.catalog import (
    ArchetypeCatalogService,
    aggregate_catalogs,
    merge_archetypes,
    search_archetypes,
)
from mvnexplorer.domain.archetype_models import Archetype


def _catalog(*entries: str) -> str:
    return "<archetype-catalog><archetypes>" + "".join(entries) + "</archetypes></archetype-catalog>"


def _entry(group: str, artifact: str, version: str, description: str = "") -> str:
    desc = f"<description>{description}</description>" if description else ""
    return (
        f"<archetype><groupId>{group}</groupId><artifactId>{artifact}</artifactId>"
        f"<version>{version}</version>{desc}</archetype>"
    )


# -----------------------------------------------------------------------------
# PURE AGGREGATION
# -----------------------------------------------------------------------------

def test_merge_unions_versions_by_coordinates() -> None:
    """TC-01: Same (g, a) across sources collapses into one entry."""
    first = [Archetype("g", "a", versions=["1.0"]), Archetype("g", "b", versions=["2.0"])]
    second = [Archetype("g", "a", versions=["1.0", "1.1"], description="later")]

    merged = merge_archetypes([first, second])

    assert [m.label for m in merged] == ["g:a", "g:b"]
    assert merged[0].versions == ["1.0", "1.1"]
    assert merged[0].description == "later"
    assert first[0].versions == ["1.0"]


def test_merge_keeps_first_seen_version_order_without_repeats() -> None:
    """TC-01b: Concatenation skips versions already listed for the key."""
    merged = merge_archetypes([
        [Archetype("org.x", "quickstart", versions=["1.0"])],
        [Archetype("org.x", "quickstart", versions=["2.0", "1.0"])],
    ])

    assert len(merged) == 1
    assert merged[0].versions == ["1.0", "2.0"]


def test_merge_is_keyed_by_both_coordinates() -> None:
    """TC-02: Equal artifactIds under different groupIds stay distinct."""
    merged = merge_archetypes([[Archetype("g1", "a")], [Archetype("g2", "a")]])
    assert len(merged) == 2


def test_aggregate_skips_absent_and_malformed_sources() -> None:
    """TC-03: One bad source never fails the aggregation."""
    good = _catalog(_entry("g", "a", "1"))
    merged = aggregate_catalogs([None, "<broken", good], labels=["remote", "local", "bundled"])

    assert [m.label for m in merged] == ["g:a"]


def test_aggregate_all_sources_unavailable() -> None:
    """TC-04: No usable source yields an empty list."""
    assert aggregate_catalogs([None, None]) == []


def test_search_ranking() -> None:
    """TC-05: exact artifactId > prefix > coordinate substring > description."""
    items = [
        Archetype("org.x", "tool-webapp", description="misc"),
        Archetype("org.webapp", "other"),
        Archetype("org.y", "plain", description="A webapp template"),
        Archetype("org.z", "webapp-starter"),
        Archetype("org.w", "webapp"),
        Archetype("org.v", "unrelated"),
    ]

    labels = [a.label for a in search_archetypes(items, "WebApp")]

    assert labels == [
        "org.w:webapp",
        "org.z:webapp-starter",
        "org.x:tool-webapp",
        "org.webapp:other",
        "org.y:plain",
    ]


def test_search_blank_query_returns_everything() -> None:
    """TC-06: A blank query does not filter."""
    items = [Archetype("g", "a"), Archetype("g", "b")]
    assert search_archetypes(items, "  ") == items


# -----------------------------------------------------------------------------
# CATALOG SOURCES
# -----------------------------------------------------------------------------

@pytest.fixture
def service(tmp_path: Path) -> ArchetypeCatalogService:
    bundled = tmp_path / "bundled.xml"
    bundled.write_text(_catalog(_entry("org.apache.maven.archetypes", "maven-archetype-quickstart", "1.4")), encoding="utf-8")
    user = tmp_path / "user.xml"
    user.write_text(_catalog(_entry("com.corp", "corp-service", "3.0")), encoding="utf-8")
    return ArchetypeCatalogService(
        remote_url="https://repo.example/archetype-catalog.xml",
        timeout=1,
        user_catalog_path=str(user),
        cache_dir=str(tmp_path / "cache"),
        bundled_path=str(bundled),
    )


def test_common_archetypes_reads_bundled_only(service: ArchetypeCatalogService) -> None:
    """TC-07: The common list comes from the bundled catalog."""
    assert [a.artifact_id for a in service.common_archetypes()] == ["maven-archetype-quickstart"]


def test_list_without_remote_merges_local_sources(service: ArchetypeCatalogService) -> None:
    """TC-08: Bundled, cached and user catalogs are merged; remote is not queried."""
    with patch("mvnexplorer.core.services.catalog.network.fetch_archetype_catalog") as mock_fetch:
        items = asyncio.run(service.list_archetypes())

    mock_fetch.assert_not_called()
    assert [a.artifact_id for a in items] == ["maven-archetype-quickstart", "corp-service"]


def test_list_with_remote_puts_remote_first_and_caches_it(service: ArchetypeCatalogService) -> None:
    """TC-09: A reachable remote catalog leads the merge and is stored offline."""
    remote = _catalog(
        _entry("org.apache.maven.archetypes", "maven-archetype-quickstart", "1.5"),
        _entry("io.remote", "remote-only", "0.1"),
    )
    with patch("mvnexplorer.core.services.catalog.network.fetch_archetype_catalog", return_value=remote):
        items = asyncio.run(service.list_archetypes(include_remote=True))

    assert [a.artifact_id for a in items] == ["maven-archetype-quickstart", "remote-only", "corp-service"]
    assert items[0].versions == ["1.5", "1.4"]
    assert Path(service.local_catalog_path).read_text(encoding="utf-8") == remote


def test_list_with_unreachable_remote_falls_back(service: ArchetypeCatalogService) -> None:
    """TC-10: An unreachable remote is simply absent."""
    with patch("mvnexplorer.core.services.catalog.network.fetch_archetype_catalog", return_value=None):
        items = asyncio.run(service.list_archetypes(include_remote=True))

    assert len(items) == 2
    assert not Path(service.local_catalog_path).exists()


def test_update_catalog_persists_valid_document(service: ArchetypeCatalogService) -> None:
    """TC-11: update_catalog stores a parsable remote catalog."""
    remote = _catalog(_entry("g", "a", "1"))
    with patch("mvnexplorer.core.services.catalog.network.fetch_archetype_catalog", return_value=remote):
        assert service.update_catalog() is True

    assert Path(service.local_catalog_path).read_text(encoding="utf-8") == remote


def test_update_catalog_keeps_previous_copy_on_bad_download(service: ArchetypeCatalogService) -> None:
    """TC-12: Malformed or failed downloads never replace the offline copy."""
    previous = _catalog(_entry("g", "old", "1"))
    Path(service.local_catalog_path).parent.mkdir(parents=True, exist_ok=True)
    Path(service.local_catalog_path).write_text(previous, encoding="utf-8")

    with patch("mvnexplorer.core.services.catalog.network.fetch_archetype_catalog", return_value="<oops"):
        assert service.update_catalog() is False
    with patch("mvnexplorer.core.services.catalog.network.fetch_archetype_catalog", return_value=None):
        assert service.update_catalog() is False

    assert Path(service.local_catalog_path).read_text(encoding="utf-8") == previous


def test_bundled_resource_ships_with_package() -> None:
    """TC-13: The default bundled catalog is present and parsable."""
    items = ArchetypeCatalogService(cache_dir="/nonexistent").common_archetypes()
    assert "maven-archetype-quickstart" in [a.artifact_id for a in items]
