"""
Unit tests for the timing engine.

The engine runs on a ManualClock so every elapsed time is exact and
tests never sleep.
"""

from datetime import datetime

import pytest

from rowcoach.core.timing.clock import ManualClock
from rowcoach.core.timing.engine import TimingEngine
from rowcoach.core.timing.models import (
    BoatNotFoundError,
    InvalidConfigurationError,
    NonMonotonicSplitError,
    SessionConfig,
    SessionNotRunningError,
    SessionRunningError,
    SessionState,
    SplitLimitReachedError,
)


START = datetime(2026, 5, 3, 7, 30, 15)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=1000.0)


@pytest.fixture
def engine(clock) -> TimingEngine:
    """A 2000m session with 500m splits and two boats."""
    return TimingEngine(
        config=SessionConfig(number_of_boats=2, session_distance=2000, split_distance=500),
        clock=clock,
        wall_clock=lambda: START,
    )


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    """Tests for start/stop transitions."""

    def test_new_engine_creates_one_boat_per_slot(self, engine):
        assert [b.id for b in engine.boats] == [1, 2]
        assert [b.boat_name for b in engine.boats] == ["Boat 1", "Boat 2"]
        assert all(b.boat_class == "M1X" for b in engine.boats)

    def test_start_marks_session_and_boats_running(self, engine):
        engine.start_session()

        assert engine.session.state == SessionState.RUNNING
        assert engine.session.started_at == START
        assert all(b.is_running for b in engine.boats)

    def test_stop_returns_to_idle_and_keeps_splits(self, engine, clock):
        engine.start_session()
        clock.advance(60)
        engine.record_split(1)

        engine.stop_session()

        assert engine.session.state == SessionState.IDLE
        assert not any(b.is_running for b in engine.boats)
        assert engine.get_boat(1).split_count == 1

    def test_start_while_running_is_idempotent(self, engine, clock):
        """A second start must not move the origin or drop splits."""
        engine.start_session()
        clock.advance(60)
        engine.record_split(1)

        clock.advance(5)
        engine.start_session()

        assert engine.elapsed_seconds == 65
        assert engine.get_boat(1).split_count == 1

    def test_stop_while_idle_is_a_no_op(self, engine):
        engine.stop_session()

        assert engine.session.state == SessionState.IDLE
        assert engine.elapsed_seconds == 0

    def test_restart_after_stop_begins_a_new_piece(self, engine, clock):
        """Splits from the previous piece are cleared so times stay increasing."""
        engine.start_session()
        clock.advance(100)
        engine.record_split(1)
        engine.stop_session()

        clock.advance(300)
        engine.start_session()
        clock.advance(30)
        split = engine.record_split(1)

        assert split.index == 1
        assert split.cumulative_time_seconds == 30
        assert engine.get_boat(1).split_count == 1

    def test_restart_warns_about_discarded_splits(self, engine, clock, caplog):
        engine.start_session()
        clock.advance(100)
        engine.record_split(1)
        engine.stop_session()

        with caplog.at_level("WARNING", logger="rowcoach.core.timing.engine"):
            engine.start_session()

        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert [r.getMessage() for r in warnings] == ["Previous splits discarded on restart"]
        assert warnings[0].cleared_splits == 1

    def test_first_start_does_not_warn(self, engine, caplog):
        with caplog.at_level("WARNING", logger="rowcoach.core.timing.engine"):
            engine.start_session()

        assert not [r for r in caplog.records if r.levelname == "WARNING"]


class TestElapsed:
    """Tests for the pollable elapsed time."""

    def test_zero_before_start(self, engine, clock):
        clock.advance(50)

        assert engine.elapsed_seconds == 0

    def test_tracks_clock_while_running(self, engine, clock):
        engine.start_session()
        clock.advance(12.5)

        assert engine.elapsed_seconds == 12.5

    def test_frozen_after_stop(self, engine, clock):
        engine.start_session()
        clock.advance(42)
        engine.stop_session()
        clock.advance(100)

        assert engine.elapsed_seconds == 42


# ---------------------------------------------------------------------------
# Splits
# ---------------------------------------------------------------------------

class TestRecordSplit:
    """Tests for split recording and derived metrics."""

    def test_standard_2k_scenario(self, engine):
        """Four splits at 60, 125, 190, 250s give intervals 60, 65, 65, 60."""
        engine.start_session()

        for elapsed in (60, 125, 190, 250):
            engine.record_split(1, elapsed)

        boat = engine.get_boat(1)
        assert boat.interval_times == [60, 65, 65, 60]
        assert [s.index for s in boat.splits] == [1, 2, 3, 4]
        assert [s.distance for s in boat.splits] == [500, 1000, 1500, 2000]
        assert [s.pace for s in boat.splits] == ["1:00.00", "1:05.00", "1:05.00", "1:00.00"]

    def test_fifth_split_is_rejected_without_changing_history(self, engine):
        engine.start_session()
        for elapsed in (60, 125, 190, 250):
            engine.record_split(1, elapsed)
        before = list(engine.get_boat(1).splits)

        with pytest.raises(SplitLimitReachedError):
            engine.record_split(1, 300)

        assert engine.get_boat(1).splits == before

    def test_interval_diff_subtracts_previous_interval(self, engine):
        """Cumulative time minus the previous split's interval time."""
        engine.start_session()
        for elapsed in (60, 125, 190, 250):
            engine.record_split(1, elapsed)

        diffs = [s.interval_diff for s in engine.get_boat(1).splits]

        assert diffs == ["0.00s", "65.00s", "125.00s", "185.00s"]

    def test_reads_clock_when_elapsed_omitted(self, engine, clock):
        engine.start_session()
        clock.advance(95.25)

        split = engine.record_split(2)

        assert split.cumulative_time_seconds == 95.25
        assert split.interval_time_seconds == 95.25

    def test_boats_are_independent(self, engine):
        engine.start_session()
        engine.record_split(1, 60)
        engine.record_split(2, 62)
        engine.record_split(1, 121)

        assert engine.get_boat(1).interval_times == [60, 61]
        assert engine.get_boat(2).interval_times == [62]

    def test_pace_uses_split_distance(self, clock):
        engine = TimingEngine(
            config=SessionConfig(number_of_boats=1, session_distance=1000, split_distance=250),
            clock=clock,
        )
        engine.start_session()

        split = engine.record_split(1, 60)

        assert split.pace == "2:00.00"

    def test_rejected_while_idle(self, engine):
        with pytest.raises(SessionNotRunningError):
            engine.record_split(1, 60)

        assert engine.get_boat(1).split_count == 0

    def test_rejected_after_stop(self, engine):
        engine.start_session()
        engine.stop_session()

        with pytest.raises(SessionNotRunningError):
            engine.record_split(1, 60)

    def test_rejects_time_not_after_previous_split(self, engine):
        engine.start_session()
        engine.record_split(1, 60)

        with pytest.raises(NonMonotonicSplitError):
            engine.record_split(1, 60)
        with pytest.raises(NonMonotonicSplitError):
            engine.record_split(1, 59)

        assert engine.get_boat(1).split_count == 1

    def test_rejects_zero_elapsed(self, engine):
        engine.start_session()

        with pytest.raises(NonMonotonicSplitError):
            engine.record_split(1, 0)

    def test_unknown_boat(self, engine):
        engine.start_session()

        with pytest.raises(BoatNotFoundError):
            engine.record_split(99, 60)

    def test_uneven_distance_limits_splits(self, clock):
        """1000m in 300m splits allows three splits; the fourth would pass 1000m."""
        engine = TimingEngine(
            config=SessionConfig(number_of_boats=1, session_distance=1000, split_distance=300),
            clock=clock,
        )
        engine.start_session()
        for elapsed in (50, 100, 150):
            engine.record_split(1, elapsed)

        with pytest.raises(SplitLimitReachedError):
            engine.record_split(1, 200)


class TestCanRecordSplit:
    def test_false_while_idle(self, engine):
        assert not engine.can_record_split(1)

    def test_true_while_running_below_limit(self, engine):
        engine.start_session()

        assert engine.can_record_split(1)

    def test_false_at_limit(self, engine):
        engine.start_session()
        for elapsed in (60, 125, 190, 250):
            engine.record_split(1, elapsed)

        assert not engine.can_record_split(1)
        assert engine.can_record_split(2)


class TestSplitInvariants:
    """Properties that must hold for any sequence of accepted splits."""

    def test_indices_contiguous_and_times_increasing(self, clock):
        engine = TimingEngine(
            config=SessionConfig(number_of_boats=3, session_distance=5000, split_distance=100),
            clock=clock,
        )
        engine.start_session()

        steps = [7.3, 0.4, 12.0, 3.3, 9.9, 0.01, 5.5]
        for i in range(50):
            clock.advance(steps[i % len(steps)])
            engine.record_split(i % 3 + 1)

        for boat in engine.boats:
            indices = [s.index for s in boat.splits]
            times = [s.cumulative_time_seconds for s in boat.splits]
            assert indices == list(range(1, len(indices) + 1))
            assert all(a < b for a, b in zip(times, times[1:]))
            assert all(s.interval_time_seconds > 0 for s in boat.splits)


# ---------------------------------------------------------------------------
# Configuration and boat edits
# ---------------------------------------------------------------------------

class TestConfigure:
    def test_changing_boat_count_recreates_boats(self, engine):
        engine.set_boat_name(1, "Blue")
        engine.start_session()
        engine.record_split(1, 60)
        engine.stop_session()

        engine.configure(number_of_boats=3, session_distance=2000, split_distance=500)

        assert [b.id for b in engine.boats] == [1, 2, 3]
        assert engine.get_boat(1).boat_name == "Boat 1"
        assert engine.get_boat(1).split_count == 0

    def test_changing_distances_keeps_boats(self, engine):
        engine.set_boat_name(1, "Blue")

        engine.configure(number_of_boats=2, session_distance=1000, split_distance=250)

        assert engine.get_boat(1).boat_name == "Blue"
        assert engine.config.split_distance == 250

    def test_rejected_while_running(self, engine):
        engine.start_session()

        with pytest.raises(SessionRunningError):
            engine.configure(number_of_boats=1, session_distance=2000, split_distance=500)

    def test_invalid_configuration_leaves_previous_config(self, engine):
        with pytest.raises(InvalidConfigurationError):
            engine.configure(number_of_boats=5, session_distance=500, split_distance=1000)

        assert engine.config.number_of_boats == 2
        assert len(engine.boats) == 2


class TestBoatEdits:
    def test_set_class_while_idle(self, engine):
        boat = engine.set_boat_class(2, " W2X ")

        assert boat.boat_class == "W2X"

    def test_set_class_rejected_while_running(self, engine):
        engine.start_session()

        with pytest.raises(SessionRunningError):
            engine.set_boat_class(1, "W1X")

        assert engine.get_boat(1).boat_class == "M1X"

    def test_empty_class_rejected(self, engine):
        with pytest.raises(InvalidConfigurationError):
            engine.set_boat_class(1, "  ")

    def test_name_editable_while_running(self, engine):
        engine.start_session()

        engine.set_boat_name(1, "Green")

        assert engine.get_boat(1).boat_name == "Green"

    def test_boat_identity_survives_edits(self, engine):
        boat = engine.get_boat(1)

        engine.set_boat_class(1, "W8+")
        engine.set_boat_name(1, "Eight")

        assert engine.get_boat(1) is boat

    def test_unknown_boat(self, engine):
        with pytest.raises(BoatNotFoundError):
            engine.set_boat_name(7, "Ghost")
