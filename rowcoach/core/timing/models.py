"""
Domain models for rowing split timing.

These models represent the core business concepts. They have no dependencies
on external frameworks or APIs. A Split is a value: once recorded it never
changes. A Boat is an entity that accumulates splits over a running session.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


DEFAULT_NUMBER_OF_BOATS = 1
DEFAULT_SESSION_DISTANCE = 2000
DEFAULT_SPLIT_DISTANCE = 500
DEFAULT_BOAT_CLASS = "M1X"

MIN_NUMBER_OF_BOATS = 1
MIN_SESSION_DISTANCE = 100
MIN_SPLIT_DISTANCE = 50

PACE_DISTANCE = 500  # Pace is always expressed per 500m


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TimingError(Exception):
    """Base class for all timing engine errors."""
    pass


class InvalidConfigurationError(TimingError):
    """Raised when distances, boat count or boat class are not usable."""
    pass


class SessionRunningError(TimingError):
    """Raised when an operation requires an idle session."""
    pass


class SessionNotRunningError(TimingError):
    """Raised when a split is recorded while the session is idle."""
    pass


class SplitLimitReachedError(TimingError):
    """Raised when another split would go past the session distance."""
    pass


class NonMonotonicSplitError(TimingError):
    """Raised when a split is not strictly after the boat's last split."""
    pass


class BoatNotFoundError(TimingError):
    """Raised when a boat id does not exist in the session."""
    pass


class SessionNotStartedError(TimingError):
    """Raised when exporting a session that was never started."""
    pass


class SessionState(Enum):
    """The two states of the session stopwatch."""
    IDLE = "idle"
    RUNNING = "running"


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionConfig:
    """
    Distances and boat count for a session.

    Frozen because a configuration is replaced as a whole, never
    edited field by field. Validation happens at construction so an
    invalid config can never reach the engine.
    """
    number_of_boats: int = DEFAULT_NUMBER_OF_BOATS
    session_distance: int = DEFAULT_SESSION_DISTANCE
    split_distance: int = DEFAULT_SPLIT_DISTANCE

    def __post_init__(self) -> None:
        if self.number_of_boats < MIN_NUMBER_OF_BOATS:
            raise InvalidConfigurationError(
                f"Number of boats must be at least {MIN_NUMBER_OF_BOATS}"
            )
        if self.session_distance < MIN_SESSION_DISTANCE:
            raise InvalidConfigurationError(
                f"Session distance must be at least {MIN_SESSION_DISTANCE}m"
            )
        if self.split_distance < MIN_SPLIT_DISTANCE:
            raise InvalidConfigurationError(
                f"Split distance must be at least {MIN_SPLIT_DISTANCE}m"
            )
        if self.split_distance > self.session_distance:
            raise InvalidConfigurationError(
                "Split distance cannot exceed session distance"
            )

    @property
    def max_splits(self) -> int:
        """How many splits fit into the session distance."""
        return self.session_distance // self.split_distance


@dataclass(frozen=True)
class Split:
    """A recorded checkpoint with its derived interval and pace metrics."""
    index: int
    cumulative_time_seconds: float
    interval_time_seconds: float
    pace: str
    interval_diff: str
    distance: int


@dataclass(frozen=True)
class BoatClass:
    """A boat class from the benchmark catalogue."""
    name: str
    category: str = ""  # "Male" or "Female"


@dataclass(frozen=True)
class BenchmarkTime:
    """World best time for a boat class."""
    boat_class: str
    time_in_seconds: float

    @property
    def is_available(self) -> bool:
        return self.time_in_seconds > 0


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass
class Boat:
    """
    One boat slot in the session.

    The id is the slot number and never changes. Class and name are
    labels, and a blank name stays blank; splits are append-only while
    the session runs.
    """
    id: int
    boat_class: str = DEFAULT_BOAT_CLASS
    boat_name: str = ""
    splits: list[Split] = field(default_factory=list)
    is_running: bool = False

    @property
    def split_count(self) -> int:
        return len(self.splits)

    @property
    def last_split(self) -> Optional[Split]:
        return self.splits[-1] if self.splits else None

    @property
    def total_time_seconds(self) -> float:
        """Cumulative time of the last split, or 0 with no splits."""
        last = self.last_split
        return last.cumulative_time_seconds if last else 0.0

    @property
    def interval_times(self) -> list[float]:
        return [s.interval_time_seconds for s in self.splits]


@dataclass
class Session:
    """
    The aggregate root for a timing session.

    Owns every boat, and through them every split. There is no
    persistence: a session lives as long as the process.
    """
    config: SessionConfig = field(default_factory=SessionConfig)
    boats: list[Boat] = field(default_factory=list)
    state: SessionState = SessionState.IDLE
    started_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self.state == SessionState.RUNNING

    @property
    def is_started(self) -> bool:
        return self.started_at is not None

    @property
    def max_split_count(self) -> int:
        """Largest number of splits recorded by any boat."""
        return max((boat.split_count for boat in self.boats), default=0)
