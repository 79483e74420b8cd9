"""
Scanner screen state.

The screen is one immutable ScannerState value. Every user or network event
is a pure function from the old state to the new one, so the session only
ever swaps a single reference.

Status transitions:
- IDLE -> RESOLVED | INVALID (scan committed)
- RESOLVED -> RESOLVED | INVALID (next scan committed)
- RESOLVED -> IDLE (directory refreshed)
- INVALID -> IDLE (overlay dismissed, or input edited)
- INVALID -> RESOLVED | INVALID (scan committed over the overlay)
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional

from cby_helper.common.logger import setup_logger
from cby_helper.hubs.directory import HubDirectory, HubRecord
from cby_helper.scanner.resolver import InvalidBarcodeError, resolve

logger = setup_logger(__name__)


class ScanStatus(Enum):
    """What the scanner screen is currently showing."""
    IDLE = "idle"            # Waiting for a scan
    RESOLVED = "resolved"    # Showing hub name, sack code and OSA lane
    INVALID = "invalid"      # Showing the "Invalid Barcode" overlay


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


VALID_TRANSITIONS: Dict[ScanStatus, List[ScanStatus]] = {
    ScanStatus.IDLE: [ScanStatus.RESOLVED, ScanStatus.INVALID],
    ScanStatus.RESOLVED: [ScanStatus.RESOLVED, ScanStatus.INVALID, ScanStatus.IDLE],
    ScanStatus.INVALID: [ScanStatus.IDLE, ScanStatus.RESOLVED, ScanStatus.INVALID],
}


@dataclass(frozen=True)
class ScannerState:
    """Everything the scanner screen displays."""
    status: ScanStatus = ScanStatus.IDLE
    record: Optional[HubRecord] = None
    directory: HubDirectory = field(default_factory=dict)
    pending_refreshes: int = 0
    last_input: str = ""

    @property
    def loading(self) -> bool:
        """True while at least one refresh is in flight."""
        return self.pending_refreshes > 0

    @property
    def is_invalid(self) -> bool:
        return self.status == ScanStatus.INVALID

    @property
    def is_resolved(self) -> bool:
        return self.status == ScanStatus.RESOLVED

    @property
    def hub_count(self) -> int:
        return len(self.directory)


def can_transition(current: ScanStatus, target: ScanStatus) -> bool:
    """Check whether current -> target is allowed."""
    return target in VALID_TRANSITIONS.get(current, [])


def _move(state: ScannerState, target: ScanStatus, **changes) -> ScannerState:
    if not can_transition(state.status, target):
        raise StateTransitionError(
            f"Invalid transition: {state.status.name} -> {target.name}"
        )
    return replace(state, status=target, **changes)


def commit_scan(state: ScannerState, raw_text: str) -> ScannerState:
    """
    Resolve committed scanner input.

    Resolution uses whatever directory is currently held, so scans keep
    working against the previous directory while a refresh is in flight.
    """
    try:
        record = resolve(raw_text, state.directory)
    except InvalidBarcodeError as e:
        logger.info("Invalid barcode: %s", e.reason)
        return _move(state, ScanStatus.INVALID, record=None, last_input=raw_text)

    logger.info("Resolved hub %d -> %s", record.hub_id, record.hub_name)
    return _move(state, ScanStatus.RESOLVED, record=record, last_input=raw_text)


def input_changed(state: ScannerState) -> ScannerState:
    """Typing into the field clears the invalid overlay; nothing else changes."""
    if state.is_invalid:
        return _move(state, ScanStatus.IDLE)
    return state


def dismiss_invalid(state: ScannerState) -> ScannerState:
    """
    Dismiss the invalid overlay (tap or back).

    Raises:
        StateTransitionError: If the overlay is not showing
    """
    if not state.is_invalid:
        raise StateTransitionError(f"Cannot dismiss from {state.status.name}")
    return _move(state, ScanStatus.IDLE, record=None)


def begin_refresh(state: ScannerState) -> ScannerState:
    """Mark one more refresh as in flight."""
    return replace(state, pending_refreshes=state.pending_refreshes + 1)


def finish_refresh(state: ScannerState, directory: HubDirectory) -> ScannerState:
    """
    Swap in a freshly fetched directory and clear the result panel.

    The directory is replaced wholesale, even when empty.
    """
    pending = max(state.pending_refreshes - 1, 0)
    if state.is_resolved:
        return _move(state, ScanStatus.IDLE, record=None, directory=dict(directory),
                     pending_refreshes=pending)
    return replace(state, directory=dict(directory), pending_refreshes=pending)


def abandon_refresh(state: ScannerState) -> ScannerState:
    """A refresh was cancelled; drop it from the loading count."""
    return replace(state, pending_refreshes=max(state.pending_refreshes - 1, 0))
