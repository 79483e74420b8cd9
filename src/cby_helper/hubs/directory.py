"""
Hub directory data model.

A hub directory maps the integer hub id printed in shipment barcodes to the
hub's name, sack segregation code and OSA lane, as published in the hub sheet.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable

# Column headers of the hub sheet, as emitted by the sheet endpoint
FIELD_HUB_ID = "Shipment Destination Hub ID"
FIELD_HUB_NAME = "Shipment Destination Hub Name"
FIELD_SACK = "Sack Segregation"
FIELD_OSA_LANE = "OSA lane"

# Optional sign and ASCII digits; no underscores or other Unicode digits
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class DirectoryFormatError(ValueError):
    """Raised when a sheet row cannot be turned into a HubRecord."""
    pass


@dataclass(frozen=True)
class HubRecord:
    """One destination hub row."""
    hub_id: int
    hub_name: str
    sack_code: str
    osa_lane: str

    def as_triple(self):
        """(hub name, sack code, OSA lane), in display order."""
        return (self.hub_name, self.sack_code, self.osa_lane)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hub_id": self.hub_id,
            "hub_name": self.hub_name,
            "sack_code": self.sack_code,
            "osa_lane": self.osa_lane,
        }


HubDirectory = Dict[int, HubRecord]


def coerce_int(value: Any) -> int:
    """
    Coerce a JSON value to an int.

    Accepts ints, integral floats (42.0) and integer strings of ASCII
    digits with an optional sign (" 42 ", "+42").
    Booleans, None, fractional numbers and anything else are rejected.

    Raises:
        ValueError: If the value is not integer-coercible
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if _INT_PATTERN.fullmatch(text):
            return int(text)
    raise ValueError(f"not an integer: {value!r}")


def coerce_text(value: Any) -> str:
    """Coerce a JSON cell to text; numbers are accepted, None and containers are not."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"not a text value: {value!r}")


def record_from_row(row: Any) -> HubRecord:
    """
    Build a HubRecord from one element of the sheet array.

    Raises:
        DirectoryFormatError: If the row is not an object or a field is missing/invalid
    """
    if not isinstance(row, dict):
        raise DirectoryFormatError(f"Expected an object, got {type(row).__name__}")

    try:
        return HubRecord(
            hub_id=coerce_int(row[FIELD_HUB_ID]),
            hub_name=coerce_text(row[FIELD_HUB_NAME]),
            sack_code=coerce_text(row[FIELD_SACK]),
            osa_lane=coerce_text(row[FIELD_OSA_LANE]),
        )
    except KeyError as e:
        raise DirectoryFormatError(f"Missing field {e}") from e
    except ValueError as e:
        raise DirectoryFormatError(str(e)) from e


def build_directory(rows: Iterable[Any]) -> HubDirectory:
    """
    Build a directory from sheet rows.

    All or nothing: the first bad row aborts the whole build.
    Later rows win when a hub id repeats.
    """
    directory: HubDirectory = {}
    for row in rows:
        record = record_from_row(row)
        directory[record.hub_id] = record
    return directory
