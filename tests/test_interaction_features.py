"""Tests for the interaction feature block and the obstacle store."""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from features.interaction_features import INTERACTION_FEATURE_SIZE, extract_interaction_features
from features.obstacles_container import ObstaclesContainer
from synthetic import make_lane_sequence, make_nearby, make_observation

DEFAULT_S = 1000.0
DEFAULT_L = 10.0


def _container_with(*specs) -> ObstaclesContainer:
    """specs: (id, length, speed) tuples."""
    container = ObstaclesContainer()
    for obstacle_id, length, speed in specs:
        container.insert_feature(obstacle_id, make_observation(1.0, speed=speed, length=length))
    return container


class TestInteractionFeatures:
    def test_no_nearby_obstacles_uses_defaults(self):
        lane_sequence = make_lane_sequence()
        features = extract_interaction_features(
            lane_sequence, ObstaclesContainer(), DEFAULT_S, DEFAULT_L,
        )
        assert features.shape == (INTERACTION_FEATURE_SIZE,)
        np.testing.assert_array_equal(
            features, [DEFAULT_S, DEFAULT_L, 0.0, 0.0, -DEFAULT_S, DEFAULT_L, 0.0, 0.0],
        )

    def test_nearest_on_each_side(self):
        container = _container_with((2, 4.0, 8.0), (3, 5.0, 9.0), (4, 12.0, 6.0), (5, 3.0, 11.0))
        lane_sequence = make_lane_sequence(nearby_obstacles=[
            make_nearby(2, s=30.0, l=0.5),
            make_nearby(3, s=12.0, l=-0.3),
            make_nearby(4, s=-25.0, l=1.0),
            make_nearby(5, s=-8.0, l=0.2),
        ])
        features = extract_interaction_features(lane_sequence, container, DEFAULT_S, DEFAULT_L)
        np.testing.assert_allclose(features, [12.0, -0.3, 5.0, 9.0, -8.0, 0.2, 3.0, 11.0])

    def test_zero_s_is_forward(self):
        container = _container_with((2, 4.0, 8.0))
        lane_sequence = make_lane_sequence(nearby_obstacles=[make_nearby(2, s=0.0, l=0.1)])
        features = extract_interaction_features(lane_sequence, container, DEFAULT_S, DEFAULT_L)
        np.testing.assert_allclose(
            features, [0.0, 0.1, 4.0, 8.0, -DEFAULT_S, DEFAULT_L, 0.0, 0.0],
        )

    def test_only_backward(self):
        container = _container_with((9, 4.5, 7.0))
        lane_sequence = make_lane_sequence(nearby_obstacles=[make_nearby(9, s=-3.0, l=0.0)])
        features = extract_interaction_features(lane_sequence, container, DEFAULT_S, DEFAULT_L)
        np.testing.assert_allclose(
            features, [DEFAULT_S, DEFAULT_L, 0.0, 0.0, -3.0, 0.0, 4.5, 7.0],
        )

    def test_beyond_default_range_is_ignored(self):
        lane_sequence = make_lane_sequence(nearby_obstacles=[
            make_nearby(2, s=DEFAULT_S + 1.0),
            make_nearby(3, s=-DEFAULT_S - 1.0),
        ])
        features = extract_interaction_features(
            lane_sequence, ObstaclesContainer(), DEFAULT_S, DEFAULT_L,
        )
        np.testing.assert_array_equal(
            features, [DEFAULT_S, DEFAULT_L, 0.0, 0.0, -DEFAULT_S, DEFAULT_L, 0.0, 0.0],
        )

    def test_unknown_id_is_fatal(self):
        lane_sequence = make_lane_sequence(nearby_obstacles=[make_nearby(42, s=5.0)])
        with pytest.raises(KeyError):
            extract_interaction_features(lane_sequence, ObstaclesContainer(), DEFAULT_S, DEFAULT_L)


class TestObstaclesContainer:
    def test_insert_and_lookup(self):
        container = ObstaclesContainer(max_history=3)
        for t in range(5):
            container.insert_feature(1, make_observation(float(t)))
        obstacle = container.get_obstacle(1)
        assert 1 in container
        assert len(container) == 1
        assert obstacle.history_size() == 3
        assert [obs.timestamp for obs in obstacle.history] == [4.0, 3.0, 2.0]

    def test_out_of_order_rejected(self):
        container = ObstaclesContainer()
        container.insert_feature(1, make_observation(2.0))
        with pytest.raises(ValueError):
            container.insert_feature(1, make_observation(1.0))

    def test_missing_obstacle(self):
        with pytest.raises(KeyError):
            ObstaclesContainer().get_obstacle(3)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
