"""Data models for the War Derive scoring system."""

from dataclasses import dataclass, field

from .points import (
    GOOD_SIGNAL_THRESHOLD, MANY_AREAS_THRESHOLD, POINTS_BY_TYPE, STRUCTURAL_POINTS,
)


# Seeds for the running signal stats. The minimum starts at 0, not +inf.
SIGNAL_FLOOR = -1000
SIGNAL_MIN_SEED = 0


@dataclass
class EventConfig:
    """Configuration for a single scoring run."""
    event_name: str = 'War Derive'
    points: dict = field(default_factory=lambda: dict(POINTS_BY_TYPE))
    good_signal_threshold: float = GOOD_SIGNAL_THRESHOLD
    many_areas_threshold: int = MANY_AREAS_THRESHOLD

    def __post_init__(self):
        # Structural categories always have a value; the table may override them
        self.points = {**STRUCTURAL_POINTS, **self.points}


@dataclass(frozen=True)
class Measurement:
    """A signal strength measurement parsed from a sheet row."""
    team_name: str
    supernode: str
    signal_strength: float
    block_group: str
    supernode_distance: float
    subjective_bonuses: tuple = ()


@dataclass
class TeamScore:
    """A team's score and the stats needed to compare it with other teams."""
    team_name: str
    total: float = 0
    n_measurements: int = 0
    block_groups: set = field(default_factory=set)
    max_supernode_distance: float = 0
    max_signal_strength: float = SIGNAL_FLOOR
    min_signal_strength: float = SIGNAL_MIN_SEED
    bonuses: list = field(default_factory=list)  # aggregate bonuses awarded, for reports


@dataclass
class Maximums:
    """Leaderboard-wide maximum (and minimum) values for one run."""
    n_block_groups: int = 0
    n_measurements: int = 0
    max_supernode_distance: float = 0
    max_signal_strength: float = SIGNAL_FLOOR
    min_signal_strength: float = SIGNAL_MIN_SEED
