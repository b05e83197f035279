from __future__ import annotations

"""
Archetype Catalog HTTP Client.

Downloads remote archetype catalogs. Every failure mode (timeout, transport
error, HTTP error status) is logged and reported as a missing document so
catalog aggregation can continue with its remaining sources.
"""

import logging
from typing import Optional

import requests

from mvnexplorer.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


def fetch_text(url: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[str]:
    """
    Retrieve a remote text document with a bounded wait.

    Args:
        url: Absolute URL of the resource.
        timeout: Seconds to wait for connect and read before giving up.

    Returns:
        Optional[str]: Decoded body, or None on any network failure.
    """
    headers = {"User-Agent": USER_AGENT}
    logger.debug(f"Network: Fetching {url} (timeout={timeout}s)")

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        if not response.encoding:
            response.encoding = "utf-8"

        size_kb = len(response.content) / 1024
        logger.info(f"Network: Downloaded {size_kb:.1f} KB from {url}.")
        return response.text

    except requests.exceptions.Timeout:
        logger.warning(f"Network: Request to {url} timed out after {timeout}s.")
    except requests.exceptions.RequestException as e:
        logger.warning(f"Network: Communication error while fetching {url}: {e}")

    return None


def fetch_archetype_catalog(url: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[str]:
    """Acquire the raw XML of a remote archetype catalog."""
    xml_text = fetch_text(url, timeout=timeout)
    if xml_text is not None and not xml_text.strip():
        logger.warning(f"Network: Catalog at {url} is empty.")
        return None
    return xml_text
