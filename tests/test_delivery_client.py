"""Tests for the delivery API client."""

from unittest.mock import Mock, call

import pytest
import requests

from content_vault.core.delivery import DeliveryClient, FetchError
from tests.factories import SYNC_URL, asset_item, deleted_item, entry_item


def _response(payload=None, error=None):
    response = Mock()
    response.json.return_value = payload
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def http_session():
    """Create a mock requests session."""
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(http_session):
    """Create DeliveryClient instance."""
    return DeliveryClient(
        space_id="space",
        access_token="secret",
        timeout=5.0,
        session=http_session,
    )


class TestDeliveryClient:
    """Test DeliveryClient."""

    def test_init(self, client, http_session):
        """Test the sync URL and authorization header."""
        assert client.sync_url == SYNC_URL
        assert http_session.headers["Authorization"] == "Bearer secret"

    def test_api_url_trailing_slash(self, http_session):
        """Test a trailing slash on the base URL is ignored."""
        client = DeliveryClient(
            "space",
            "secret",
            environment="staging",
            api_url="https://preview.example.com/",
            session=http_session,
        )

        assert client.sync_url == (
            "https://preview.example.com/spaces/space/environments/staging/sync"
        )

    def test_fetch_full_space(self, client, http_session):
        """Test an initial sync in a single page."""
        http_session.get.return_value = _response(
            {
                "items": [asset_item("a1"), entry_item("c1")],
                "nextSyncUrl": f"{SYNC_URL}?sync_token=tok1",
            }
        )

        space = client.fetch_full_space()

        http_session.get.assert_called_once_with(
            SYNC_URL, params={"initial": "true"}, timeout=5.0
        )
        assert [a.id for a in space.assets] == ["a1"]
        assert [e.id for e in space.entries] == ["c1"]
        assert space.sync_token == "tok1"

    def test_fetch_delta_follows_pages(self, client, http_session):
        """Test result pages are followed until the next sync URL."""
        page_url = f"{SYNC_URL}?sync_token=page2"
        http_session.get.side_effect = [
            _response({"items": [entry_item("c1")], "nextPageUrl": page_url}),
            _response(
                {
                    "items": [deleted_item("c2")],
                    "nextSyncUrl": f"{SYNC_URL}?sync_token=tok2",
                }
            ),
        ]

        space = client.fetch_delta("tok1")

        assert http_session.get.call_args_list == [
            call(SYNC_URL, params={"sync_token": "tok1"}, timeout=5.0),
            call(page_url, params=None, timeout=5.0),
        ]
        assert [e.id for e in space.entries] == ["c1"]
        assert space.deleted_entries == ["c2"]
        assert space.sync_token == "tok2"

    def test_empty_delta(self, client, http_session):
        """Test a delta without changes."""
        http_session.get.return_value = _response(
            {"items": [], "nextSyncUrl": f"{SYNC_URL}?sync_token=tok2"}
        )

        space = client.fetch_delta("tok1")

        assert space.entries == []
        assert space.sync_token == "tok2"

    def test_http_error(self, client, http_session):
        """Test HTTP errors become FetchError."""
        http_session.get.return_value = _response(
            error=requests.exceptions.HTTPError("401 Unauthorized")
        )

        with pytest.raises(FetchError, match="401"):
            client.fetch_full_space()

    def test_connection_error(self, client, http_session):
        """Test connection errors become FetchError."""
        http_session.get.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(FetchError):
            client.fetch_delta("tok1")

    def test_invalid_json(self, client, http_session):
        """Test unparseable bodies become FetchError."""
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        http_session.get.return_value = response

        with pytest.raises(FetchError, match="Invalid JSON"):
            client.fetch_full_space()

    def test_non_object_body(self, client, http_session):
        """Test bodies that are not JSON objects become FetchError."""
        http_session.get.return_value = _response(["not", "a", "page"])

        with pytest.raises(FetchError, match="Unexpected response body"):
            client.fetch_full_space()

    def test_missing_next_sync_url(self, client, http_session):
        """Test a last page without next sync URL is rejected."""
        http_session.get.return_value = _response({"items": []})

        with pytest.raises(FetchError, match="no next page or sync URL"):
            client.fetch_full_space()

    def test_malformed_item(self, client, http_session):
        """Test items the models cannot read become FetchError."""
        http_session.get.return_value = _response(
            {
                "items": [{"sys": {"type": "Entry"}}],
                "nextSyncUrl": f"{SYNC_URL}?sync_token=tok1",
            }
        )

        with pytest.raises(FetchError, match="Malformed sync payload"):
            client.fetch_full_space()
