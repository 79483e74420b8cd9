"""
Tests for the scanner screen state and its transitions.
"""

import pytest

from cby_helper.scanner.state import (
    ScannerState,
    ScanStatus,
    StateTransitionError,
    abandon_refresh,
    begin_refresh,
    can_transition,
    commit_scan,
    dismiss_invalid,
    finish_refresh,
    input_changed,
)


@pytest.fixture
def ready(sample_directory):
    """Idle state with the sample directory loaded."""
    return ScannerState(directory=sample_directory)


class TestScanStatus:
    """Tests for ScanStatus enum."""

    def test_status_values(self):
        assert ScanStatus.IDLE.value == "idle"
        assert ScanStatus.RESOLVED.value == "resolved"
        assert ScanStatus.INVALID.value == "invalid"


class TestInitialState:

    def test_defaults(self):
        state = ScannerState()
        assert state.status == ScanStatus.IDLE
        assert state.record is None
        assert state.directory == {}
        assert state.loading is False
        assert state.hub_count == 0


class TestTransitionTable:
    """Tests for can_transition."""

    @pytest.mark.parametrize("current,target", [
        (ScanStatus.IDLE, ScanStatus.RESOLVED),
        (ScanStatus.IDLE, ScanStatus.INVALID),
        (ScanStatus.RESOLVED, ScanStatus.RESOLVED),
        (ScanStatus.RESOLVED, ScanStatus.IDLE),
        (ScanStatus.INVALID, ScanStatus.IDLE),
        (ScanStatus.INVALID, ScanStatus.RESOLVED),
    ])
    def test_valid(self, current, target):
        assert can_transition(current, target) is True

    def test_idle_to_idle_invalid(self):
        assert can_transition(ScanStatus.IDLE, ScanStatus.IDLE) is False


class TestCommitScan:
    """Tests for commit_scan."""

    def test_resolves_known_hub(self, ready):
        state = commit_scan(ready, '{"destination_hub_id": 42}')
        assert state.status == ScanStatus.RESOLVED
        assert state.record.as_triple() == ("North Hub", "A", "1")
        assert state.last_input == '{"destination_hub_id": 42}'

    def test_unknown_hub_is_invalid(self, ready):
        state = commit_scan(ready, '{"destination_hub_id": 8}')
        assert state.status == ScanStatus.INVALID
        assert state.record is None

    def test_garbage_is_invalid(self, ready):
        assert commit_scan(ready, "not json").is_invalid

    def test_invalid_clears_previous_result(self, ready):
        resolved = commit_scan(ready, '{"destination_hub_id": 42}')
        state = commit_scan(resolved, "not json")
        assert state.is_invalid
        assert state.record is None

    def test_consecutive_scans(self, ready):
        state = commit_scan(ready, '{"destination_hub_id": 42}')
        state = commit_scan(state, '{"destination_hub_id": 7}')
        assert state.record.hub_name == "Coimbatore Hub"

    def test_scan_over_invalid_overlay(self, ready):
        state = commit_scan(ready, "not json")
        state = commit_scan(state, '{"destination_hub_id": 7}')
        assert state.is_resolved

    def test_does_not_mutate_input_state(self, ready):
        commit_scan(ready, '{"destination_hub_id": 42}')
        assert ready.status == ScanStatus.IDLE
        assert ready.record is None

    def test_resolves_while_loading(self, ready, north_hub):
        loading = begin_refresh(ready)
        state = commit_scan(loading, '{"destination_hub_id": 42}')
        assert state.status == ScanStatus.RESOLVED
        assert state.record == north_hub
        assert state.loading is True
        assert state.directory is loading.directory

    def test_deeply_nested_input_is_invalid(self, ready):
        assert commit_scan(ready, "[" * 100000).status == ScanStatus.INVALID

    def test_same_input_same_result(self, ready):
        first = commit_scan(ready, '{"destination_hub_id": 1031}')
        second = commit_scan(ready, '{"destination_hub_id": 1031}')
        assert first == second


class TestInvalidOverlay:
    """Tests for leaving the INVALID state."""

    def test_input_changed_clears_invalid(self, ready):
        state = input_changed(commit_scan(ready, "oops"))
        assert state.status == ScanStatus.IDLE

    def test_input_changed_keeps_result(self, ready):
        resolved = commit_scan(ready, '{"destination_hub_id": 42}')
        assert input_changed(resolved) is resolved

    def test_dismiss(self, ready):
        state = dismiss_invalid(commit_scan(ready, "oops"))
        assert state.status == ScanStatus.IDLE
        assert state.record is None

    def test_dismiss_when_not_invalid_raises(self, ready):
        with pytest.raises(StateTransitionError):
            dismiss_invalid(ready)

        with pytest.raises(StateTransitionError):
            dismiss_invalid(commit_scan(ready, '{"destination_hub_id": 42}'))


class TestRefresh:
    """Tests for the refresh transitions."""

    def test_begin_sets_loading(self):
        state = begin_refresh(ScannerState())
        assert state.loading is True
        assert state.pending_refreshes == 1

    def test_overlapping_refreshes_counted(self):
        state = begin_refresh(begin_refresh(ScannerState()))
        state = finish_refresh(state, {})
        assert state.loading is True
        state = finish_refresh(state, {})
        assert state.loading is False

    def test_finish_swaps_directory(self, sample_directory):
        state = finish_refresh(begin_refresh(ScannerState()), sample_directory)
        assert state.directory == sample_directory
        assert state.hub_count == 3
        assert state.loading is False

    def test_finish_replaces_not_merges(self, ready, north_hub):
        state = finish_refresh(begin_refresh(ready), {42: north_hub})
        assert state.directory == {42: north_hub}

    def test_finish_with_empty_directory(self, ready):
        state = finish_refresh(begin_refresh(ready), {})
        assert state.directory == {}

    def test_finish_clears_shown_result(self, ready):
        resolved = commit_scan(ready, '{"destination_hub_id": 42}')
        state = finish_refresh(begin_refresh(resolved), ready.directory)
        assert state.status == ScanStatus.IDLE
        assert state.record is None

    def test_finish_keeps_invalid_overlay(self, ready):
        invalid = commit_scan(ready, "oops")
        state = finish_refresh(begin_refresh(invalid), ready.directory)
        assert state.is_invalid

    def test_directory_copied(self, sample_directory):
        state = finish_refresh(ScannerState(), sample_directory)
        sample_directory.clear()
        assert state.hub_count == 3

    def test_abandon_keeps_directory(self, ready):
        state = abandon_refresh(begin_refresh(ready))
        assert state.directory == ready.directory
        assert state.loading is False

    def test_pending_never_negative(self):
        assert abandon_refresh(ScannerState()).pending_refreshes == 0
        assert finish_refresh(ScannerState(), {}).pending_refreshes == 0
