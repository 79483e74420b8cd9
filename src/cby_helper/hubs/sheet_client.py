"""
Sheet Client - fetches the hub directory from the spreadsheet endpoint
"""

import requests
from typing import Optional

from cby_helper.common.config import DEFAULT_SHEET_ENDPOINT
from cby_helper.common.logger import setup_logger
from cby_helper.hubs.directory import HubDirectory, build_directory

logger = setup_logger(__name__)


class FetchError(Exception):
    """Raised by SheetClient.load when the directory cannot be loaded."""
    pass


class SheetClient:
    """Client for the spreadsheet-backed hub directory endpoint."""

    def __init__(self, endpoint: str = DEFAULT_SHEET_ENDPOINT, timeout: Optional[float] = None):
        """
        Args:
            endpoint: URL returning the hub sheet as a JSON array
            timeout: Request timeout in seconds. None waits indefinitely.
        """
        self.endpoint = endpoint
        self.timeout = timeout

    def load(self) -> HubDirectory:
        """
        Fetch and parse the hub directory.

        Raises:
            FetchError: On network failure, HTTP error status, malformed or
                over-nested JSON, or any row that cannot be parsed
        """
        try:
            response = requests.get(self.endpoint, timeout=self.timeout)
            response.raise_for_status()

            rows = response.json()
            if not isinstance(rows, list):
                raise ValueError(f"Expected a JSON array, got {type(rows).__name__}")

            directory = build_directory(rows)

        except Exception as e:
            raise FetchError(str(e) or type(e).__name__) from e

        logger.info("Fetched hub directory: %d hubs", len(directory))
        return directory

    def fetch(self) -> HubDirectory:
        """
        Fetch the hub directory, failing soft.

        Never raises: any problem is logged and an empty directory is returned,
        so "no hubs" and "fetch failed" look the same to the caller.
        """
        try:
            return self.load()
        except FetchError as e:
            logger.error("Failed to fetch hub directory: %s", e)
            return {}


def fetch_hub_directory(endpoint: str = DEFAULT_SHEET_ENDPOINT, timeout: Optional[float] = None) -> HubDirectory:
    """Fetch the hub directory once with a throwaway client."""
    return SheetClient(endpoint, timeout=timeout).fetch()
