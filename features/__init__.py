"""Feature extraction for the cruise MLP lane-sequence evaluator.

This module provides:
- Obstacle, observation and lane-sequence records
- Object-frame geometry transforms
- Obstacle, interaction and lane feature blocks
- Obstacle store and model-input matrix helpers
"""

from .types import (
    LaneFeature,
    LaneGraph,
    LanePoint,
    LaneSegment,
    LaneSequence,
    NearbyObstacle,
    Observation,
    Obstacle,
)
from .geometry import (
    normalize_angle,
    obj_coord_to_world_coord,
    world_angle_to_obj_angle,
    world_coord_to_obj_coord,
    world_vector_to_obj_vector,
)
from .obstacle_features import (
    compute_mean,
    extract_obstacle_features,
    obstacle_feature_size,
)
from .interaction_features import (
    INTERACTION_FEATURE_SIZE,
    extract_interaction_features,
)
from .lane_features import (
    SINGLE_LANE_FEATURE_SIZE,
    extract_lane_features,
)
from .obstacles_container import ObstaclesContainer
from .matrix import vector_to_matrix

__all__ = [
    # Constants
    "INTERACTION_FEATURE_SIZE",
    "SINGLE_LANE_FEATURE_SIZE",
    # Records
    "LaneFeature",
    "LaneGraph",
    "LanePoint",
    "LaneSegment",
    "LaneSequence",
    "NearbyObstacle",
    "Observation",
    "Obstacle",
    # Geometry
    "normalize_angle",
    "obj_coord_to_world_coord",
    "world_angle_to_obj_angle",
    "world_coord_to_obj_coord",
    "world_vector_to_obj_vector",
    # Feature blocks
    "compute_mean",
    "extract_obstacle_features",
    "obstacle_feature_size",
    "extract_interaction_features",
    "extract_lane_features",
    # Store and matrices
    "ObstaclesContainer",
    "vector_to_matrix",
]
