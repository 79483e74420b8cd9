"""
Hub directory model and the sheet endpoint client.
"""

from cby_helper.hubs.directory import HubDirectory, HubRecord, build_directory
from cby_helper.hubs.sheet_client import FetchError, SheetClient, fetch_hub_directory
