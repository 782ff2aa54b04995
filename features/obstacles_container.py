"""In-memory store of obstacles for one prediction cycle, keyed by id."""

import logging

from features.types import DEFAULT_MAX_HISTORY, Obstacle

logger = logging.getLogger(__name__)


class ObstaclesContainer:
    """Obstacle store handed to the evaluator.

    Reads (get_obstacle, __contains__) are plain dict lookups and may be
    shared across threads as long as nobody inserts concurrently.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        self.max_history = max_history
        self._obstacles = {}

    def __len__(self):
        return len(self._obstacles)

    def __contains__(self, obstacle_id):
        return obstacle_id in self._obstacles

    def __iter__(self):
        return iter(self._obstacles.values())

    def insert_feature(self, obstacle_id, observation) -> Obstacle:
        """Record a new observation, creating the obstacle on first sight."""
        obstacle = self._obstacles.get(obstacle_id)
        if obstacle is None:
            obstacle = Obstacle(id=obstacle_id, max_history=self.max_history)
            self._obstacles[obstacle_id] = obstacle
        obstacle.add_feature(observation)
        return obstacle

    def add_obstacle(self, obstacle: Obstacle):
        self._obstacles[obstacle.id] = obstacle

    def get_obstacle(self, obstacle_id) -> Obstacle:
        """Look up an obstacle; a missing id raises KeyError."""
        try:
            return self._obstacles[obstacle_id]
        except KeyError:
            raise KeyError(f"Obstacle [{obstacle_id}] is not in the container") from None

    def clear(self):
        self._obstacles.clear()
