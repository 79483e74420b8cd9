"""
Scanner Session for CBY Helper.

Owns the scanner screen state and wires it to the outside world:
committed scans, background directory refreshes and the delayed input
re-focus that hardware scanners need.
"""

import threading
from typing import Callable, Optional

from cby_helper.common.config import Config, DEFAULT_REFOCUS_DELAY_MS
from cby_helper.common.logger import setup_logger
from cby_helper.hubs.directory import HubDirectory
from cby_helper.hubs.sheet_client import SheetClient
from cby_helper.scanner import state as scan_state
from cby_helper.scanner.refresher import DirectoryRefresher, RefreshTask
from cby_helper.scanner.state import ScannerState

logger = setup_logger(__name__)


class ScannerSession:
    """
    Controller for one scanner screen.

    The screen state is a single immutable ScannerState; every operation
    computes the next state and swaps the reference under a lock. Callbacks
    run outside the lock.

    Usage:
        session = ScannerSession(SheetClient(url), on_state_changed=render)
        session.refresh()
        session.submit('{"destination_hub_id": 42}')
        session.close()
    """

    def __init__(
        self,
        client: SheetClient,
        refocus_delay: float = DEFAULT_REFOCUS_DELAY_MS / 1000.0,
        on_state_changed: Optional[Callable[[ScannerState], None]] = None,
        on_refocus: Optional[Callable[[], None]] = None,
        on_refreshed: Optional[Callable[[int], None]] = None,
        on_refresh_failed: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            client: SheetClient used for directory refreshes
            refocus_delay: Seconds to wait before re-focusing input after a scan
            on_state_changed: Callback(state) after every state change
            on_refocus: Callback() when the input should take focus again
            on_refreshed: Callback(hub_count) after a directory was swapped in
            on_refresh_failed: Callback(error) when a refresh could not load
        """
        self.refocus_delay = refocus_delay
        self._on_state_changed = on_state_changed
        self._on_refocus = on_refocus
        self._on_refreshed = on_refreshed
        self._on_refresh_failed = on_refresh_failed

        self._lock = threading.Lock()
        self._state = ScannerState()
        self._refocus_timer: Optional[threading.Timer] = None
        self._closed = False

        self._refresher = DirectoryRefresher(
            client,
            on_complete=self._refresh_complete,
            on_failed=self._refresh_failed,
            on_cancelled=self._refresh_cancelled,
        )

        logger.info("ScannerSession initialized - endpoint: %s", client.endpoint)

    @classmethod
    def from_config(cls, config: Config, **callbacks) -> "ScannerSession":
        """Build a session from configuration."""
        client = SheetClient(config.sheet_endpoint, timeout=config.sheet_timeout)
        return cls(client, refocus_delay=config.refocus_delay, **callbacks)

    @property
    def state(self) -> ScannerState:
        """Current screen state."""
        with self._lock:
            return self._state

    @property
    def directory(self) -> HubDirectory:
        return self.state.directory

    def _apply(self, transition, *args) -> ScannerState:
        with self._lock:
            old = self._state
            new = transition(old, *args)
            self._state = new

        if new is not old:
            self._notify(self._on_state_changed, new)
        return new

    def _notify(self, callback, *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error("Error in session callback: %s", e)

    def _schedule_refocus(self) -> None:
        with self._lock:
            if self._closed:
                return
            if self._refocus_timer is not None:
                self._refocus_timer.cancel()
            timer = threading.Timer(self.refocus_delay, self._refocus)
            timer.daemon = True
            self._refocus_timer = timer
        timer.start()

    def _refocus(self) -> None:
        self._notify(self._on_refocus)

    # Scanner input

    def submit(self, raw_text: str) -> ScannerState:
        """
        Commit scanner input.

        Returns:
            The new state; RESOLVED with the hub record, or INVALID
        """
        new = self._apply(scan_state.commit_scan, raw_text)
        self._schedule_refocus()
        return new

    def input_changed(self) -> ScannerState:
        """The operator edited the input field."""
        return self._apply(scan_state.input_changed)

    def dismiss(self) -> bool:
        """
        Dismiss the invalid overlay.

        Returns:
            True if the overlay was showing
        """
        if not self.state.is_invalid:
            return False
        self._apply(scan_state.dismiss_invalid)
        return True

    # Directory refresh

    def refresh(self) -> RefreshTask:
        """Start a background directory refresh."""
        self._apply(scan_state.begin_refresh)
        return self._refresher.refresh()

    def _refresh_complete(self, task: RefreshTask, directory: HubDirectory) -> None:
        new = self._apply(scan_state.finish_refresh, directory)
        logger.info("Directory refresh %d applied: %d hubs", task.task_id, new.hub_count)

        self._notify(self._on_refreshed, new.hub_count)
        self._schedule_refocus()

    def _refresh_failed(self, task: RefreshTask, error: str) -> None:
        self._apply(scan_state.abandon_refresh)
        self._notify(self._on_refresh_failed, error)
        self._schedule_refocus()

    def _refresh_cancelled(self, task: RefreshTask) -> None:
        self._apply(scan_state.abandon_refresh)

    def close(self) -> None:
        """Cancel pending work."""
        with self._lock:
            self._closed = True
            timer, self._refocus_timer = self._refocus_timer, None
        if timer is not None:
            timer.cancel()

        cancelled = self._refresher.cancel_all()
        if cancelled:
            logger.info("Cancelled %d in-flight refreshes", cancelled)

    def __repr__(self) -> str:
        current = self.state
        return f"ScannerSession(status={current.status.name}, hubs={current.hub_count})"
