from __future__ import annotations

"""
Integration tests for Network Infrastructure.

Utilizes mocking to verify archetype catalog downloads and their failure
modes without making real network calls.
"""

from unittest.mock import MagicMock, patch

import requests

from mvnexplorer.infra.network import USER_AGENT, fetch_archetype_catalog, fetch_text

# -----------------------------------------------------------------------------
# DOWNLOAD TESTS
# -----------------------------------------------------------------------------

def test_fetch_text_success() -> None:
    """TC-01: Body is returned and the request carries timeout and user agent."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.encoding = None
    mock_response.content = b"<archetype-catalog/>"
    mock_response.text = "<archetype-catalog/>"

    with patch("requests.get", return_value=mock_response) as mock_get:
        result = fetch_text("https://repo.example/catalog.xml", timeout=5)

    assert result == "<archetype-catalog/>"
    assert mock_response.encoding == "utf-8"
    _, kwargs = mock_get.call_args
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["User-Agent"] == USER_AGENT


def test_fetch_text_timeout_returns_none() -> None:
    """TC-02: Timeouts are reported as a missing document."""
    with patch("requests.get", side_effect=requests.exceptions.Timeout):
        assert fetch_text("https://repo.example/catalog.xml", timeout=1) is None


def test_fetch_text_http_error_returns_none() -> None:
    """TC-03: HTTP error statuses are reported as a missing document."""
    mock_response = MagicMock()
    mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")

    with patch("requests.get", return_value=mock_response):
        assert fetch_text("https://repo.example/missing.xml") is None


def test_fetch_text_connection_error_returns_none() -> None:
    """TC-04: Transport failures are reported as a missing document."""
    with patch("requests.get", side_effect=requests.exceptions.ConnectionError("offline")):
        assert fetch_text("https://repo.example/catalog.xml") is None


def test_fetch_archetype_catalog_blank_body() -> None:
    """TC-05: An empty catalog body counts as unavailable."""
    with patch("mvnexplorer.infra.network.catalog_client.fetch_text", return_value="  \n"):
        assert fetch_archetype_catalog("https://repo.example/catalog.xml") is None

    with patch("mvnexplorer.infra.network.catalog_client.fetch_text", return_value="<x/>"):
        assert fetch_archetype_catalog("https://repo.example/catalog.xml") == "<x/>"
