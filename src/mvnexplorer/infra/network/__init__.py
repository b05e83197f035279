from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the HTTP clients used by the catalog service.
"""

from mvnexplorer.infra.network.catalog_client import fetch_archetype_catalog, fetch_text
from mvnexplorer.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

__all__ = [
    "fetch_archetype_catalog",
    "fetch_text",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
]
