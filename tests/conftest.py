"""
Pytest Fixtures for CBY Helper Tests

Provides sample sheet rows, directories and stand-in sheet clients used
across the test files.
"""

import threading
import time

import pytest

from cby_helper.hubs.directory import HubRecord, build_directory
from cby_helper.hubs.sheet_client import FetchError


SAMPLE_ROWS = [
    {
        "Shipment Destination Hub ID": 42,
        "Shipment Destination Hub Name": "North Hub",
        "Sack Segregation": "A",
        "OSA lane": "1",
    },
    {
        "Shipment Destination Hub ID": 7,
        "Shipment Destination Hub Name": "Coimbatore Hub",
        "Sack Segregation": "B",
        "OSA lane": "4",
    },
    {
        "Shipment Destination Hub ID": 1031,
        "Shipment Destination Hub Name": "Tiruppur DC",
        "Sack Segregation": "D",
        "OSA lane": "12",
    },
]

TEST_ENDPOINT = "http://sheet.test/exec"


class StubSheetClient:
    """Sheet client returning a fixed directory, or failing with FetchError."""

    endpoint = TEST_ENDPOINT

    def __init__(self, directory=None, error=None):
        self.directory = directory or {}
        self.error = error
        self.calls = 0

    def load(self):
        self.calls += 1
        if self.error:
            raise FetchError(self.error)
        return dict(self.directory)


class GatedSheetClient:
    """
    Sheet client whose loads block until released.

    Each load takes the next queued result (a directory or an exception)
    and waits on its own gate, so tests control completion order.
    """

    endpoint = TEST_ENDPOINT

    def __init__(self, results):
        self._results = list(results)
        self._lock = threading.Lock()
        self.gates = []

    def load(self):
        with self._lock:
            result = self._results.pop(0)
            gate = threading.Event()
            self.gates.append(gate)
        gate.wait(5)
        if isinstance(result, Exception):
            raise result
        return dict(result)

    def wait_started(self, count, timeout=2.0):
        """Wait until `count` loads are blocked on their gates."""
        deadline = time.time() + timeout
        while time.time() < deadline:
            with self._lock:
                if len(self.gates) >= count:
                    return True
            time.sleep(0.005)
        return False

    def release(self, index):
        self.gates[index].set()


def wait_until(condition, timeout=2.0):
    """Poll `condition` until it is true or the timeout expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return condition()


@pytest.fixture
def sample_rows():
    """Rows as served by the sheet endpoint."""
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_directory():
    """Directory built from SAMPLE_ROWS."""
    return build_directory(SAMPLE_ROWS)


@pytest.fixture
def north_hub():
    return HubRecord(hub_id=42, hub_name="North Hub", sack_code="A", osa_lane="1")


@pytest.fixture
def stub_client(sample_directory):
    """Sheet client that always loads the sample directory."""
    return StubSheetClient(sample_directory)


@pytest.fixture
def failing_client():
    """Sheet client that always fails."""
    return StubSheetClient(error="Connection refused")


@pytest.fixture
def gated_client_factory():
    """Build a GatedSheetClient; gates are released on teardown."""
    clients = []

    def factory(results):
        client = GatedSheetClient(results)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        for gate in client.gates:
            gate.set()
