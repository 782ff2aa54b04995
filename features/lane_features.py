"""Lane feature block for the cruise MLP evaluator.

Samples up to `lane_points_size` points along a lane sequence, each with
4 values in the obstacle's frame:
  lateral(1) + longitudinal(1) + relative_heading(1) + kappa(1) = 4

Short lane sequences are padded by linear extrapolation of the last two
points; heading is repeated and curvature set to 0.
"""

import logging

import numpy as np

from features.geometry import world_angle_to_obj_angle, world_coord_to_obj_coord

logger = logging.getLogger(__name__)

SINGLE_LANE_FEATURE_SIZE = 4
# Padding starts only once at least this many values exist
MIN_EXTRAPOLATION_SIZE = 10


def extract_lane_features(obstacle, lane_sequence, lane_points_size: int = 20) -> np.ndarray:
    """Extract the lane block for one lane sequence.

    Args:
        obstacle: Obstacle whose latest observation defines the frame
        lane_sequence: LaneSequence to sample
        lane_points_size: number of points in the block

    Returns:
        (4 * lane_points_size,) float64 array, or a shorter array when the
        lane sequence has too few points to extrapolate from; callers must
        size-check the result.
    """
    target_size = SINGLE_LANE_FEATURE_SIZE * lane_points_size
    feature = obstacle.latest_feature
    if feature is None:
        logger.debug("Obstacle [%s] has no latest feature", obstacle.id)
        return np.zeros(0, dtype=np.float64)
    if feature.position is None or feature.velocity_heading is None:
        logger.debug("Obstacle [%s] has no position or heading", obstacle.id)
        return np.zeros(0, dtype=np.float64)

    heading = feature.velocity_heading
    values = []
    for lane_segment in lane_sequence.lane_segments:
        if len(values) >= target_size:
            break
        for lane_point in lane_segment.lane_points:
            if len(values) >= target_size:
                break
            if lane_point.position is None:
                logger.error("Lane point has no position")
                continue

            lon, lat = world_coord_to_obj_coord(lane_point.position, feature.position, heading)
            relative_heading = world_angle_to_obj_angle(lane_point.heading, heading)
            values.extend([lat, lon, relative_heading, lane_point.kappa])

    size = len(values)
    while MIN_EXTRAPOLATION_SIZE <= size < target_size:
        lat_new = 2.0 * values[size - 4] - values[size - 8]
        lon_new = 2.0 * values[size - 3] - values[size - 7]
        values.extend([lat_new, lon_new, values[size - 2], 0.0])
        size = len(values)

    return np.array(values, dtype=np.float64)
