"""Client for the remote content delivery sync endpoint.

Fetches either the whole space (initial sync) or the changes since a
continuation token, following result pages until the server hands out the
URL for the next sync.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from ...models import SynchronizedSpace

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://cdn.contentful.com"
DEFAULT_ENVIRONMENT = "master"
DEFAULT_TIMEOUT = 30.0


class FetchError(Exception):
    """Raised when the remote content could not be fetched."""

    pass


class DeliveryClient:
    """Fetches sync pages from the content delivery API."""

    def __init__(
        self,
        space_id: str,
        access_token: str,
        environment: str = DEFAULT_ENVIRONMENT,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize delivery client.

        Args:
            space_id: Id of the space to sync
            access_token: Delivery API access token
            environment: Environment of the space
            api_url: Base URL of the delivery API
            timeout: Timeout for every HTTP request in seconds
            session: Optional preconfigured requests session
        """
        self.space_id = space_id
        self.environment = environment
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})

    @property
    def sync_url(self) -> str:
        return (
            f"{self.api_url}/spaces/{self.space_id}"
            f"/environments/{self.environment}/sync"
        )

    def fetch_full_space(self) -> SynchronizedSpace:
        """Fetch every published resource of the space."""
        return self._sync({"initial": "true"})

    def fetch_delta(self, token: str) -> SynchronizedSpace:
        """Fetch the changes since the sync that produced ``token``."""
        return self._sync({"sync_token": token})

    def _sync(self, params: Dict[str, str]) -> SynchronizedSpace:
        url = self.sync_url
        query: Optional[Dict[str, str]] = params
        items: List[Dict[str, Any]] = []
        pages = 0

        while True:
            payload = self._get(url, query)
            pages += 1
            items.extend(payload.get("items") or [])

            next_page_url = payload.get("nextPageUrl")
            if next_page_url:
                # Page URLs already carry their token
                url, query = next_page_url, None
                continue

            next_sync_url = payload.get("nextSyncUrl")
            if not next_sync_url:
                raise FetchError("Sync response carries no next page or sync URL")
            break

        logger.info("Fetched %d items in %d page(s)", len(items), pages)
        try:
            return SynchronizedSpace.from_items(items, next_sync_url)
        except (KeyError, ValueError, ValidationError) as e:
            raise FetchError(f"Malformed sync payload: {e}") from e

    def _get(self, url: str, params: Optional[Dict[str, str]]) -> Dict[str, Any]:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(payload, dict):
            raise FetchError(f"Unexpected response body from {url}")
        return payload
