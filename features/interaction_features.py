"""Interaction feature block: nearest obstacles ahead and behind on a lane sequence.

Layout (8):
  forward:  s, l, length, speed
  backward: s, l, length, speed

Without a forward (s >= 0) or backward (s < 0) neighbor the block falls back
to (default_s, default_l, 0, 0) and (-default_s, default_l, 0, 0).
"""

import numpy as np

INTERACTION_FEATURE_SIZE = 8


def _nearest_neighbors(nearby_obstacles, default_s: float, default_l: float) -> tuple:
    """Pick the closest neighbor on each side.

    Returns:
        forward, backward: dicts with keys id (None if absent), s, l
    """
    forward = {"id": None, "s": default_s, "l": default_l}
    backward = {"id": None, "s": -default_s, "l": default_l}

    for nearby in nearby_obstacles:
        if nearby.s < 0.0:
            if nearby.s > backward["s"]:
                backward = {"id": nearby.id, "s": nearby.s, "l": nearby.l}
        elif nearby.s < forward["s"]:
            forward = {"id": nearby.id, "s": nearby.s, "l": nearby.l}

    return forward, backward


def _neighbor_values(neighbor: dict, obstacles_container) -> list:
    if neighbor["id"] is None:
        return [neighbor["s"], neighbor["l"], 0.0, 0.0]
    # KeyError propagates: ids come from this cycle's snapshot of the store
    latest = obstacles_container.get_obstacle(neighbor["id"]).latest_feature
    return [neighbor["s"], neighbor["l"], latest.length, latest.speed]


def extract_interaction_features(
    lane_sequence,
    obstacles_container,
    default_s: float = 1000.0,
    default_l: float = 10.0,
) -> np.ndarray:
    """Extract the (8,) interaction block for one lane sequence.

    Args:
        lane_sequence: LaneSequence with its nearby_obstacles populated
        obstacles_container: store resolving neighbor ids to Obstacles
        default_s: |s| used when there is no neighbor on a side
        default_l: l used when there is no neighbor on a side
    """
    forward, backward = _nearest_neighbors(lane_sequence.nearby_obstacles, default_s, default_l)
    values = _neighbor_values(forward, obstacles_container) + _neighbor_values(
        backward, obstacles_container,
    )
    return np.array(values, dtype=np.float64)
