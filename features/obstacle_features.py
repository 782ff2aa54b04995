"""Obstacle feature block for the cruise MLP evaluator.

Summarizes an obstacle's observation history into 23 + 9 * W values:

  Legacy lane-relative statistics (23):
    angle: filtered, mean, filtered - mean, delta, delta rate        (5)
    lane_l: filtered, mean, filtered - mean, delta, delta rate       (5)
    speed mean, acceleration, jerk                                   (3)
    left boundary: latest, rate (full history), rate (current)       (3)
    right boundary: latest, rate (full history), rate (current)      (3)
    lane turn type one-hot: straight / left / right / u-turn         (4)

  Relative-motion window, W frames x 9 values, most recent first:
    has_data, pos(2), vel(2), acc(2), heading, heading rate

All window quantities are expressed in the latest observation's frame.
"""

import logging

import numpy as np

from features.geometry import (
    world_angle_to_obj_angle,
    world_coord_to_obj_coord,
    world_vector_to_obj_vector,
)

logger = logging.getLogger(__name__)

LEGACY_FEATURE_SIZE = 23
FRAME_FEATURE_SIZE = 9
CURR_SIZE = 5
NUM_LANE_TURN_TYPES = 4


def obstacle_feature_size(historical_frame_length: int) -> int:
    return LEGACY_FEATURE_SIZE + FRAME_FEATURE_SIZE * historical_frame_length


def compute_mean(nums, start: int, end: int) -> float:
    """Mean of nums[start..end] (inclusive), clipped to the list; 0 if empty."""
    window = nums[start:end + 1]
    return float(np.mean(window)) if len(window) > 0 else 0.0


def _relative_motion_window(obstacle, historical_frame_length, trajectory_time_length, eps):
    """Build the (W, 9) relative-motion window.

    Returns:
        window: (W, 9) float64 array
        lane_samples: dict of per-sample lane statistics, most recent first
    """
    latest = obstacle.latest_feature
    obj_pos = latest.position
    obj_heading = latest.velocity_heading
    start_time = obstacle.timestamp - trajectory_time_length

    has_history = np.zeros(historical_frame_length, dtype=np.float64)
    pos_history = np.zeros((historical_frame_length, 2), dtype=np.float64)
    vel_history = np.zeros((historical_frame_length, 2), dtype=np.float64)
    acc_history = np.zeros((historical_frame_length, 2), dtype=np.float64)
    heading_history = np.zeros(historical_frame_length, dtype=np.float64)
    heading_rate_history = np.zeros(historical_frame_length, dtype=np.float64)

    lane_samples = {
        "thetas": [],
        "lane_ls": [],
        "dist_lbs": [],
        "dist_rbs": [],
        "lane_types": [],
        "timestamps": [],
        "speeds": [],
    }
    prev_timestamp = latest.timestamp

    for i, feature in enumerate(obstacle.history):
        if feature.timestamp < start_time:
            break

        lane = feature.lane_feature
        if lane is not None:
            lane_samples["thetas"].append(lane.angle_diff)
            lane_samples["lane_ls"].append(lane.lane_l)
            lane_samples["dist_lbs"].append(lane.dist_to_left_boundary)
            lane_samples["dist_rbs"].append(lane.dist_to_right_boundary)
            lane_samples["lane_types"].append(lane.lane_turn_type)
            lane_samples["timestamps"].append(feature.timestamp)
            lane_samples["speeds"].append(feature.speed)
        else:
            logger.debug("Obstacle [%s] frame %d has no lane feature", obstacle.id, i)

        if i >= historical_frame_length:
            continue
        # No gaps mid-window: once a frame is missing, the rest stay empty
        if i != 0 and has_history[i - 1] == 0.0:
            continue
        has_history[i] = 1.0

        if feature.position is not None:
            pos_history[i] = world_coord_to_obj_coord(feature.position, obj_pos, obj_heading)
        else:
            has_history[i] = 0.0

        if feature.velocity is not None:
            vel_history[i] = world_vector_to_obj_vector(feature.velocity, obj_pos, obj_heading)
        else:
            has_history[i] = 0.0

        if feature.acceleration is not None:
            acc_history[i] = world_vector_to_obj_vector(feature.acceleration, obj_pos, obj_heading)
        else:
            has_history[i] = 0.0

        if feature.velocity_heading is not None:
            heading_history[i] = world_angle_to_obj_angle(feature.velocity_heading, obj_heading)
            if i != 0:
                heading_rate_history[i] = (
                    (heading_history[i - 1] - heading_history[i])
                    / (eps + feature.timestamp - prev_timestamp)
                )
                prev_timestamp = feature.timestamp
        else:
            has_history[i] = 0.0

    window = np.concatenate([
        has_history[:, None],         # 1
        pos_history,                  # 2
        vel_history,                  # 2
        acc_history,                  # 2
        heading_history[:, None],     # 1
        heading_rate_history[:, None],  # 1
    ], axis=1)
    return window, lane_samples


def _legacy_features(lane_samples: dict, hist_size: int) -> np.ndarray:
    """The 23 lane-relative summary statistics."""
    thetas = lane_samples["thetas"]
    lane_ls = lane_samples["lane_ls"]
    dist_lbs = lane_samples["dist_lbs"]
    dist_rbs = lane_samples["dist_rbs"]
    lane_types = lane_samples["lane_types"]
    timestamps = lane_samples["timestamps"]
    speeds = lane_samples["speeds"]
    tiny = np.finfo(np.float64).eps
    n = CURR_SIZE

    theta_mean = compute_mean(thetas, 0, hist_size - 1)
    theta_filtered = compute_mean(thetas, 0, n - 1)
    lane_l_mean = compute_mean(lane_ls, 0, hist_size - 1)
    lane_l_filtered = compute_mean(lane_ls, 0, n - 1)
    speed_mean = compute_mean(speeds, 0, hist_size - 1)

    # timestamps are most recent first, so the span is positive
    time_diff = timestamps[0] - timestamps[-1]
    dist_lb_rate = 0.0
    dist_rb_rate = 0.0
    delta_t = 0.0
    if len(timestamps) > 1:
        if abs(time_diff) > tiny:
            dist_lb_rate = (dist_lbs[0] - dist_lbs[-1]) / time_diff
            dist_rb_rate = (dist_rbs[0] - dist_rbs[-1]) / time_diff
        delta_t = time_diff / (len(timestamps) - 1)

    has_prev_window = hist_size >= 2 * n

    angle_curr = compute_mean(thetas, 0, n - 1)
    angle_prev = compute_mean(thetas, n, 2 * n - 1)
    angle_diff = angle_curr - angle_prev if has_prev_window else 0.0

    lane_l_curr = compute_mean(lane_ls, 0, n - 1)
    lane_l_prev = compute_mean(lane_ls, n, 2 * n - 1)
    lane_l_diff = lane_l_curr - lane_l_prev if has_prev_window else 0.0

    angle_diff_rate = 0.0
    lane_l_diff_rate = 0.0
    if delta_t > tiny:
        angle_diff_rate = angle_diff / (delta_t * n)
        lane_l_diff_rate = lane_l_diff / (delta_t * n)

    acc = 0.0
    jerk = 0.0
    if len(speeds) >= 3 * n and delta_t > tiny:
        speed_1st = compute_mean(speeds, 0, n - 1)
        speed_2nd = compute_mean(speeds, n, 2 * n - 1)
        speed_3rd = compute_mean(speeds, 2 * n, 3 * n - 1)
        acc = (speed_1st - speed_2nd) / (n * delta_t)
        jerk = (speed_1st - 2.0 * speed_2nd + speed_3rd) / (n * n * delta_t * delta_t)

    dist_lb_rate_curr = 0.0
    dist_rb_rate_curr = 0.0
    if has_prev_window and delta_t > tiny:
        dist_lb_curr = compute_mean(dist_lbs, 0, n - 1)
        dist_lb_prev = compute_mean(dist_lbs, n, 2 * n - 1)
        dist_lb_rate_curr = (dist_lb_curr - dist_lb_prev) / (n * delta_t)
        dist_rb_curr = compute_mean(dist_rbs, 0, n - 1)
        dist_rb_prev = compute_mean(dist_rbs, n, 2 * n - 1)
        dist_rb_rate_curr = (dist_rb_curr - dist_rb_prev) / (n * delta_t)

    turn_onehot = np.zeros(NUM_LANE_TURN_TYPES, dtype=np.float64)
    if 0 <= lane_types[0] < NUM_LANE_TURN_TYPES:
        turn_onehot[lane_types[0]] = 1.0

    return np.concatenate([
        [theta_filtered, theta_mean, theta_filtered - theta_mean, angle_diff, angle_diff_rate],
        [lane_l_filtered, lane_l_mean, lane_l_filtered - lane_l_mean, lane_l_diff, lane_l_diff_rate],
        [speed_mean, acc, jerk],
        [dist_lbs[0], dist_lb_rate, dist_lb_rate_curr],
        [dist_rbs[0], dist_rb_rate, dist_rb_rate_curr],
        turn_onehot,
    ]).astype(np.float64)


def extract_obstacle_features(
    obstacle,
    historical_frame_length: int = 5,
    trajectory_time_length: float = 8.0,
    double_precision: float = 1e-6,
) -> np.ndarray:
    """Extract the obstacle feature block.

    Args:
        obstacle: Obstacle whose latest observation has position and velocity heading
        historical_frame_length: W, number of frames in the relative-motion window
        trajectory_time_length: T, history older than latest - T is ignored
        double_precision: epsilon added to the heading-rate time difference

    Returns:
        (23 + 9 * W,) float64 array, or an empty array when no observation
        within the horizon carries a lane feature
    """
    latest = obstacle.latest_feature
    if latest is None or latest.position is None or latest.velocity_heading is None:
        logger.debug("Obstacle [%s] has no usable latest observation", obstacle.id)
        return np.zeros(0, dtype=np.float64)

    window, lane_samples = _relative_motion_window(
        obstacle, historical_frame_length, trajectory_time_length, double_precision,
    )
    if not lane_samples["thetas"]:
        logger.debug("Obstacle [%s] has no observation with lane info", obstacle.id)
        return np.zeros(0, dtype=np.float64)

    legacy = _legacy_features(lane_samples, obstacle.history_size())
    return np.concatenate([legacy, window.reshape(-1)])
