"""Event Data Provider Client - Imperative Shell.

This module handles HTTP communication with the event provider API.
All I/O is contained here; parsing and filtering are in the core module.

Every failure degrades to an empty EventCollection so the map stays
renderable.
"""

import asyncio
import logging
from typing import Any

import requests

from quakemap.core.config import DataSourceConfig
from quakemap.core.event import EventCollection, count_events, parse_event_collection
from quakemap.core.source import DataSourceMode


logger = logging.getLogger(__name__)


class DataProviderClient:
    """Client for fetching city -> events mappings from the provider.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        config: DataSourceConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize provider client.

        Args:
            config: Endpoints and timeout (defaults used if not provided)
            session: HTTP session to reuse (created if not provided)
        """
        self.config = config or DataSourceConfig()
        self.http = session or requests.Session()

    def fetch_payload(self, mode: DataSourceMode) -> dict[str, Any] | None:
        """Fetch the raw JSON body for a source.

        This method performs blocking HTTP I/O.

        Args:
            mode: Data source to query

        Returns:
            Decoded JSON body, or None if the request failed
        """
        url = self.config.url_for(mode)

        logger.info("Fetching %s events from %s", mode.value, url)

        try:
            response = self.http.get(url, timeout=self.config.timeout_seconds)
            response.raise_for_status()
            return response.json()

        except requests.Timeout:
            logger.error("Event request to %s timed out", url)
        except requests.HTTPError as e:
            logger.error(
                "Event provider returned %d for %s",
                e.response.status_code if e.response is not None else 0,
                url,
            )
        except requests.RequestException as e:
            logger.error("Event request to %s failed: %s", url, str(e))
        except ValueError as e:
            logger.error("Event provider returned invalid JSON: %s", str(e))

        return None

    def fetch_sync(self, mode: DataSourceMode) -> EventCollection:
        """Fetch and parse events for a source, blocking.

        Args:
            mode: Data source to query

        Returns:
            Parsed EventCollection, empty on any failure
        """
        payload = self.fetch_payload(mode)
        if payload is None:
            return {}

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            logger.warning("Event payload has no 'data' mapping, treating as empty")
            return {}

        collection = parse_event_collection(payload)

        logger.info(
            "Fetched %d events in %d cities (%s)",
            count_events(collection),
            len(collection),
            mode.value,
        )

        return collection

    async def fetch(self, mode: DataSourceMode) -> EventCollection:
        """Fetch events for a source without blocking the event loop.

        Args:
            mode: Data source to query

        Returns:
            Parsed EventCollection, empty on any failure
        """
        return await asyncio.to_thread(self.fetch_sync, mode)
