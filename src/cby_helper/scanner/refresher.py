"""
Directory Refresher for CBY Helper.

Runs each hub directory refresh on its own background thread. Refreshes are
not serialized: a second refresh may start before the first one finishes,
and whichever completes last wins.
"""

import threading
from typing import Callable, Optional

from cby_helper.common.logger import setup_logger
from cby_helper.hubs.directory import HubDirectory
from cby_helper.hubs.sheet_client import SheetClient

logger = setup_logger(__name__)


class RefreshTask:
    """
    Handle for one in-flight refresh.

    Cancelling does not interrupt the HTTP request; it only guarantees
    that neither completion callback fires for this task. Once the fetch
    has finished and its outcome is being applied, cancel() has no effect.
    """

    def __init__(self, task_id: int):
        self.task_id = task_id
        self.directory: Optional[HubDirectory] = None
        self.error: Optional[str] = None
        self._lock = threading.Lock()
        self._settled = False
        self._cancelled = threading.Event()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def cancel(self) -> bool:
        """
        Cancel the task.

        Returns:
            True if the result will be discarded, False if it was already applied
        """
        with self._lock:
            if self._settled:
                return False
            self._cancelled.set()
            return True

    def _settle(self) -> bool:
        """Close the task to cancellation. Returns False if it was cancelled."""
        with self._lock:
            self._settled = True
            return not self._cancelled.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def succeeded(self) -> bool:
        return self.done and self.error is None and not self.cancelled

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the fetch finishes. Returns False on timeout."""
        return self._done.wait(timeout)

    def __repr__(self) -> str:
        return f"RefreshTask(id={self.task_id}, done={self.done}, cancelled={self.cancelled})"


class DirectoryRefresher:
    """
    Starts background fetches of the hub directory.

    Usage:
        refresher = DirectoryRefresher(client, on_complete=apply, on_failed=report)
        task = refresher.refresh()
    """

    def __init__(
        self,
        client: SheetClient,
        on_complete: Optional[Callable[[RefreshTask, HubDirectory], None]] = None,
        on_failed: Optional[Callable[[RefreshTask, str], None]] = None,
        on_cancelled: Optional[Callable[[RefreshTask], None]] = None,
    ):
        """
        Args:
            client: SheetClient used for every refresh
            on_complete: Callback(task, directory) after a successful fetch
            on_failed: Callback(task, error) after a failed fetch
            on_cancelled: Callback(task) when a cancelled fetch finishes
        """
        self._client = client
        self._on_complete = on_complete
        self._on_failed = on_failed
        self._on_cancelled = on_cancelled

        self._lock = threading.Lock()
        self._next_id = 1
        self._in_flight = {}

    @property
    def in_flight(self) -> int:
        """Number of refreshes still running."""
        with self._lock:
            return len(self._in_flight)

    def refresh(self) -> RefreshTask:
        """Start a refresh in the background and return its handle."""
        with self._lock:
            task = RefreshTask(self._next_id)
            self._next_id += 1
            self._in_flight[task.task_id] = task

        task._thread = threading.Thread(
            target=self._run,
            args=(task,),
            name=f"DirectoryRefresh-{task.task_id}",
            daemon=True
        )
        task._thread.start()

        logger.info("Directory refresh %d started", task.task_id)
        return task

    def cancel_all(self) -> int:
        """Cancel every in-flight refresh. Returns how many were cancelled."""
        with self._lock:
            tasks = list(self._in_flight.values())
        return sum(1 for task in tasks if task.cancel())

    def _run(self, task: RefreshTask) -> None:
        try:
            try:
                task.directory = self._client.load()
            except Exception as e:
                task.error = str(e) or type(e).__name__
                logger.error("Directory refresh %d failed: %s", task.task_id, task.error)
            finally:
                with self._lock:
                    self._in_flight.pop(task.task_id, None)

            self._finish(task)
        finally:
            task._done.set()

    def _finish(self, task: RefreshTask) -> None:
        try:
            if not task._settle():
                logger.info("Directory refresh %d cancelled, result discarded", task.task_id)
                if self._on_cancelled:
                    self._on_cancelled(task)
            elif task.error is not None:
                if self._on_failed:
                    self._on_failed(task, task.error)
            elif self._on_complete:
                self._on_complete(task, task.directory)
        except Exception as e:
            logger.error("Error in refresh callback: %s", e)
