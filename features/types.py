"""Obstacle, observation and lane-sequence records consumed by the evaluator.

Positions, velocities and accelerations are world-frame (x, y) tuples.
Any optional field left as None is treated as absent for the features it
would feed.
"""

from dataclasses import dataclass, field
from typing import Optional

# lane_turn_type values
LANE_TURN_STRAIGHT = 0
LANE_TURN_LEFT = 1
LANE_TURN_RIGHT = 2
LANE_TURN_U_TURN = 3

DEFAULT_MAX_HISTORY = 300


@dataclass
class LaneFeature:
    """Lane-relative attributes of one observation."""
    angle_diff: float = 0.0
    lane_l: float = 0.0
    dist_to_left_boundary: float = 0.0
    dist_to_right_boundary: float = 0.0
    lane_turn_type: int = LANE_TURN_STRAIGHT


@dataclass
class LanePoint:
    position: Optional[tuple] = None
    heading: float = 0.0
    kappa: float = 0.0


@dataclass
class LaneSegment:
    lane_id: str = ""
    lane_points: list = field(default_factory=list)


@dataclass
class NearbyObstacle:
    """Another obstacle projected onto a lane sequence (s along, l across)."""
    id: int
    s: float
    l: float


@dataclass
class LaneSequence:
    """One candidate path of consecutive lane segments.

    probability, time_to_lane_center and mlp_features are written by the
    evaluator; everything else is produced upstream.
    """
    lane_segments: list = field(default_factory=list)
    vehicle_on_lane: bool = False
    nearby_obstacles: list = field(default_factory=list)
    probability: Optional[float] = None
    time_to_lane_center: Optional[float] = None
    mlp_features: list = field(default_factory=list)


@dataclass
class LaneGraph:
    lane_sequences: list = field(default_factory=list)


@dataclass
class Observation:
    """A single timestamped snapshot of an obstacle."""
    timestamp: float
    position: Optional[tuple] = None
    velocity: Optional[tuple] = None
    acceleration: Optional[tuple] = None
    velocity_heading: Optional[float] = None
    speed: float = 0.0
    length: float = 0.0
    lane_feature: Optional[LaneFeature] = None
    lane_graph: Optional[LaneGraph] = None


@dataclass
class Obstacle:
    """An obstacle with its observation history, most recent first."""
    id: int
    history: list = field(default_factory=list)
    max_history: int = DEFAULT_MAX_HISTORY

    @property
    def latest_feature(self) -> Optional[Observation]:
        return self.history[0] if self.history else None

    @property
    def timestamp(self) -> float:
        latest = self.latest_feature
        return latest.timestamp if latest is not None else 0.0

    def history_size(self) -> int:
        return len(self.history)

    def add_feature(self, observation: Observation):
        """Prepend a new observation and drop the oldest beyond max_history."""
        if self.history and observation.timestamp <= self.history[0].timestamp:
            raise ValueError(
                f"Obstacle [{self.id}] got out-of-order timestamp "
                f"{observation.timestamp} <= {self.history[0].timestamp}"
            )
        self.history.insert(0, observation)
        del self.history[self.max_history:]
