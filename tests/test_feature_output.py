"""Tests for the offline feature-output sink and evaluator configuration."""

import os
import sys
import threading

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from evaluator.config import CruiseConfig
from evaluator.feature_output import FeatureOutput, load_features, stack_lane_sequence_features
from features.types import LaneGraph
from synthetic import make_lane_sequence, make_observation


def _record(num_vectors: int, feature_size: int, on_lane: bool = True):
    lane_sequence = make_lane_sequence(vehicle_on_lane=on_lane)
    lane_sequence.mlp_features = [float(v) for v in range(num_vectors * feature_size)]
    return make_observation(1.0, lane_graph=LaneGraph(lane_sequences=[lane_sequence]))


class TestFeatureOutput:
    def test_insert_snapshots(self):
        sink = FeatureOutput()
        obs = make_observation(1.0, speed=5.0)
        sink.insert(obs)
        obs.speed = 99.0
        assert sink.size() == 1
        assert sink.records()[0].speed == 5.0

    def test_concurrent_inserts(self):
        sink = FeatureOutput()

        def worker(offset):
            for i in range(50):
                sink.insert(make_observation(offset + i))

        threads = [threading.Thread(target=worker, args=(k * 100.0,)) for k in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert sink.size() == 400

    def test_write_and_load(self, tmp_path):
        sink = FeatureOutput()
        sink.insert(_record(1, 6))
        sink.insert(_record(2, 6, on_lane=False))
        path = str(tmp_path / "out" / "features.pkl")

        assert sink.write_to_file(path) == 2
        records = load_features(path)
        assert len(records) == 2
        assert records[1].lane_graph.lane_sequences[0].mlp_features == [float(v) for v in range(12)]

        sink.clear()
        assert sink.size() == 0

    def test_stack_lane_sequence_features(self):
        records = [_record(1, 6), _record(2, 6, on_lane=False), make_observation(2.0)]
        features, on_lane = stack_lane_sequence_features(records, 6)
        assert features.shape == (3, 6)
        assert features.dtype == np.float32
        np.testing.assert_array_equal(features[2], [6, 7, 8, 9, 10, 11])
        np.testing.assert_array_equal(on_lane, [True, False, False])

    def test_stack_empty(self):
        features, on_lane = stack_lane_sequence_features([], 6)
        assert features.shape == (0, 6)
        assert on_lane.shape == (0,)


class TestCruiseConfig:
    def test_defaults(self):
        cfg = CruiseConfig()
        assert cfg.obstacle_feature_size == 68
        assert cfg.interaction_feature_size == 8
        assert cfg.lane_feature_size == 80
        assert cfg.total_feature_size == 156

    def test_sizes_follow_window(self):
        cfg = CruiseConfig(historical_frame_length=10, lane_points_size=30)
        assert cfg.obstacle_feature_size == 23 + 90
        assert cfg.total_feature_size == 113 + 8 + 120

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("evaluator:\n  historical_frame_length: 3\n  offline_mode: true\n")
        cfg = CruiseConfig.from_yaml(str(path))
        assert cfg.historical_frame_length == 3
        assert cfg.offline_mode is True
        assert cfg.lane_points_size == 20

    def test_repo_config_loads(self):
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        cfg = CruiseConfig.from_yaml(os.path.join(root, "configs", "cruise_mlp.yaml"))
        assert cfg.historical_frame_length == 5
        assert cfg.double_precision == pytest.approx(1e-6)

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            CruiseConfig.from_dict({"historical_frame_len": 5})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
