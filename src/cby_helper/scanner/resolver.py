"""
Scan resolution: barcode payload text -> HubRecord.
"""

import json
from dataclasses import dataclass

from cby_helper.hubs.directory import HubDirectory, HubRecord, coerce_int

PAYLOAD_HUB_FIELD = "destination_hub_id"


class InvalidBarcodeError(Exception):
    """
    Raised for any scan that cannot be resolved.

    Malformed payloads and unknown hub ids are deliberately the same error;
    `reason` is only meant for logs.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ScanPayload:
    """The part of a scanned AWB payload that matters for sorting."""
    destination_hub_id: int


def parse_scan_payload(raw_text: str) -> ScanPayload:
    """
    Parse scanned text into a ScanPayload.

    Raises:
        InvalidBarcodeError: If the text is not a JSON object with an
            integer-coercible destination_hub_id
    """
    try:
        obj = json.loads(raw_text.strip())
    except (ValueError, AttributeError, RecursionError) as e:
        raise InvalidBarcodeError(f"Payload is not JSON: {e}") from e

    if not isinstance(obj, dict):
        raise InvalidBarcodeError("Payload is not a JSON object")

    if PAYLOAD_HUB_FIELD not in obj:
        raise InvalidBarcodeError(f"Payload has no {PAYLOAD_HUB_FIELD}")

    try:
        hub_id = coerce_int(obj[PAYLOAD_HUB_FIELD])
    except ValueError as e:
        raise InvalidBarcodeError(str(e)) from e

    return ScanPayload(destination_hub_id=hub_id)


def resolve(raw_text: str, directory: HubDirectory) -> HubRecord:
    """
    Resolve scanned text against a hub directory.

    Args:
        raw_text: Text committed by the scanner or operator
        directory: Current hub directory (may be empty or stale)

    Returns:
        The stored HubRecord for the payload's hub id

    Raises:
        InvalidBarcodeError: If the payload is malformed or the hub is unknown
    """
    payload = parse_scan_payload(raw_text)

    record = directory.get(payload.destination_hub_id)
    if record is None:
        raise InvalidBarcodeError(f"Unknown hub id {payload.destination_hub_id}")

    return record
