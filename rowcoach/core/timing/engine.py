"""
The split-timing engine.

This is the only part of the application with real invariants:
- split indices run 1..n without gaps
- cumulative times strictly increase within a boat
- no boat records more splits than fit into the session distance

Every mutating method is synchronous and never awaits, so when the
engine is driven from an asyncio event loop each call completes before
the next one starts. No locking is needed for a single coach issuing
commands.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .clock import Clock, MonotonicClock
from .formatting import format_interval_diff, format_pace, pace_seconds
from .models import (
    Boat,
    BoatNotFoundError,
    DEFAULT_BOAT_CLASS,
    InvalidConfigurationError,
    NonMonotonicSplitError,
    Session,
    SessionConfig,
    SessionNotRunningError,
    SessionRunningError,
    SessionState,
    Split,
    SplitLimitReachedError,
)

logger = logging.getLogger(__name__)


class TimingEngine:
    """
    Owns one Session and applies every state change to it.

    The clock is read, never written: the engine remembers the reading
    taken at start and subtracts it from later readings.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        clock: Optional[Clock] = None,
        default_boat_class: str = DEFAULT_BOAT_CLASS,
        wall_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock or MonotonicClock()
        self._wall_clock = wall_clock
        self._default_boat_class = default_boat_class
        self._origin: Optional[float] = None
        self._frozen_elapsed = 0.0

        config = config or SessionConfig()
        self._session = Session(config=config, boats=self._create_boats(config.number_of_boats))

    # -----------------------------------------------------------------------
    # Read access
    # -----------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def config(self) -> SessionConfig:
        return self._session.config

    @property
    def boats(self) -> list[Boat]:
        return self._session.boats

    @property
    def is_running(self) -> bool:
        return self._session.is_running

    @property
    def elapsed_seconds(self) -> float:
        """
        Seconds since the session started.

        0 before the first start. While idle this is the value at the
        moment the session was stopped, like a paused stopwatch display.
        """
        if self.is_running and self._origin is not None:
            return self._clock.now() - self._origin
        return self._frozen_elapsed

    def get_boat(self, boat_id: int) -> Boat:
        for boat in self._session.boats:
            if boat.id == boat_id:
                return boat
        raise BoatNotFoundError(f"Boat {boat_id} not found")

    def can_record_split(self, boat_id: int) -> bool:
        """True when a split for this boat would currently be accepted."""
        boat = self.get_boat(boat_id)
        return self.is_running and not self._limit_reached(boat)

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------

    def configure(
        self,
        number_of_boats: int,
        session_distance: int,
        split_distance: int,
    ) -> SessionConfig:
        """
        Replace the session configuration.

        A new boat count recreates every boat. Changing only the
        distances keeps boats, names, classes and history.
        """
        if self.is_running:
            raise SessionRunningError("Stop the session before changing its configuration")

        config = SessionConfig(
            number_of_boats=number_of_boats,
            session_distance=session_distance,
            split_distance=split_distance,
        )

        if config.number_of_boats != self._session.config.number_of_boats:
            self._session.boats = self._create_boats(config.number_of_boats)
            logger.info(
                "Boats reset",
                extra={"number_of_boats": config.number_of_boats}
            )

        self._session.config = config
        logger.info(
            "Session configured",
            extra={
                "number_of_boats": config.number_of_boats,
                "session_distance": config.session_distance,
                "split_distance": config.split_distance,
            }
        )
        return config

    def set_boat_class(self, boat_id: int, boat_class: str) -> Boat:
        """Change a boat's class. Only allowed before the session starts."""
        boat = self.get_boat(boat_id)
        if self.is_running:
            raise SessionRunningError("Boat class cannot change while the session is running")

        boat_class = boat_class.strip()
        if not boat_class:
            raise InvalidConfigurationError("Boat class cannot be empty")

        boat.boat_class = boat_class
        logger.debug("Boat class set", extra={"boat_id": boat_id, "boat_class": boat_class})
        return boat

    def set_boat_name(self, boat_id: int, boat_name: str) -> Boat:
        boat = self.get_boat(boat_id)
        boat.boat_name = boat_name
        logger.debug("Boat name set", extra={"boat_id": boat_id, "boat_name": boat_name})
        return boat

    # -----------------------------------------------------------------------
    # Session lifecycle
    # -----------------------------------------------------------------------

    def start_session(self) -> None:
        """
        Start the stopwatch for every boat.

        Starting a running session does nothing. Starting again after a
        stop begins a new piece from zero, so the previous splits are
        cleared; keeping them would put old cumulative times after new
        ones.
        """
        if self.is_running:
            logger.debug("Start ignored, session already running")
            return

        cleared = 0
        for boat in self._session.boats:
            cleared += boat.split_count
            boat.splits = []
            boat.is_running = True

        self._origin = self._clock.now()
        self._frozen_elapsed = 0.0
        self._session.started_at = self._wall_clock()
        self._session.state = SessionState.RUNNING

        if cleared:
            logger.warning(
                "Previous splits discarded on restart",
                extra={"cleared_splits": cleared}
            )

        logger.info(
            "Session started",
            extra={
                "started_at": self._session.started_at.isoformat(),
                "boats": len(self._session.boats),
                "cleared_splits": cleared,
            }
        )

    def stop_session(self) -> None:
        """Stop the stopwatch. Split history is kept for export."""
        if not self.is_running:
            logger.debug("Stop ignored, session not running")
            return

        self._frozen_elapsed = self.elapsed_seconds
        self._session.state = SessionState.IDLE
        for boat in self._session.boats:
            boat.is_running = False

        logger.info("Session stopped", extra={"elapsed_seconds": self._frozen_elapsed})

    # -----------------------------------------------------------------------
    # Splits
    # -----------------------------------------------------------------------

    def record_split(self, boat_id: int, elapsed_seconds: Optional[float] = None) -> Split:
        """
        Record a split for a boat.

        When elapsed_seconds is omitted the clock is read now. A rejected
        split leaves the boat's history untouched.
        """
        boat = self.get_boat(boat_id)

        if not self.is_running:
            logger.warning("Split rejected, session not running", extra={"boat_id": boat_id})
            raise SessionNotRunningError("Start the session before recording splits")

        if self._limit_reached(boat):
            logger.warning(
                "Split rejected, split limit reached",
                extra={"boat_id": boat_id, "split_count": boat.split_count}
            )
            raise SplitLimitReachedError(
                f"Boat {boat_id} has reached the session distance of "
                f"{self.config.session_distance}m"
            )

        if elapsed_seconds is None:
            elapsed_seconds = self.elapsed_seconds

        last = boat.last_split
        previous_cumulative = last.cumulative_time_seconds if last else 0.0
        if elapsed_seconds <= previous_cumulative:
            raise NonMonotonicSplitError(
                f"Split at {elapsed_seconds:.2f}s is not after the previous "
                f"split at {previous_cumulative:.2f}s"
            )

        split = self._build_split(boat, elapsed_seconds)
        boat.splits.append(split)

        logger.debug(
            "Split recorded",
            extra={
                "boat_id": boat_id,
                "index": split.index,
                "cumulative": split.cumulative_time_seconds,
                "interval": split.interval_time_seconds,
                "pace": split.pace,
            }
        )
        return split

    def _build_split(self, boat: Boat, elapsed_seconds: float) -> Split:
        last = boat.last_split
        split_distance = self.config.split_distance

        if last is None:
            interval = elapsed_seconds
            interval_diff = 0.0
        else:
            interval = elapsed_seconds - last.cumulative_time_seconds
            # Cumulative time minus the previous interval, not minus the
            # previous cumulative time. Existing reports depend on this figure.
            interval_diff = elapsed_seconds - last.interval_time_seconds

        index = boat.split_count + 1
        return Split(
            index=index,
            cumulative_time_seconds=elapsed_seconds,
            interval_time_seconds=interval,
            pace=format_pace(pace_seconds(interval, split_distance)),
            interval_diff=format_interval_diff(interval_diff),
            distance=index * split_distance,
        )

    def _limit_reached(self, boat: Boat) -> bool:
        config = self.config
        return (boat.split_count + 1) * config.split_distance > config.session_distance

    def _create_boats(self, count: int) -> list[Boat]:
        return [
            Boat(id=i, boat_class=self._default_boat_class, boat_name=f"Boat {i}")
            for i in range(1, count + 1)
        ]
