"""Configuration for the cruise MLP evaluator.

Usage:
    cfg = CruiseConfig.from_yaml("configs/cruise_mlp.yaml")
"""

from dataclasses import dataclass, fields

import yaml

from features.interaction_features import INTERACTION_FEATURE_SIZE
from features.lane_features import SINGLE_LANE_FEATURE_SIZE
from features.obstacle_features import obstacle_feature_size


def load_config(config_path: str) -> dict:
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


@dataclass
class CruiseConfig:
    """Evaluator settings.

    Attributes:
        historical_frame_length: W, frames in the relative-motion window
        trajectory_time_length: T, history older than latest - T is ignored (s)
        lane_points_size: lane points in the lane block
        default_s_if_no_obstacle: interaction s when a side has no neighbor
        default_l_if_no_obstacle: interaction l when a side has no neighbor
        double_precision: epsilon guarding time differences
        offline_mode: capture feature vectors instead of running the models
        go_model_file: follow-lane model parameter file
        cutin_model_file: cut-in model parameter file
        device: torch device for the models
        feature_output_file: where offline features are written
    """
    historical_frame_length: int = 5
    trajectory_time_length: float = 8.0
    lane_points_size: int = 20
    default_s_if_no_obstacle: float = 1000.0
    default_l_if_no_obstacle: float = 10.0
    double_precision: float = 1e-6
    offline_mode: bool = False
    go_model_file: str = "checkpoints/cruise_go_model.pt"
    cutin_model_file: str = "checkpoints/cruise_cutin_model.pt"
    device: str = "cpu"
    feature_output_file: str = "output/cruise_features.pkl"

    @classmethod
    def from_dict(cls, cfg: dict) -> "CruiseConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(cfg) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**cfg)

    @classmethod
    def from_yaml(cls, config_path: str) -> "CruiseConfig":
        return cls.from_dict(load_config(config_path).get("evaluator", {}))

    @property
    def obstacle_feature_size(self) -> int:
        return obstacle_feature_size(self.historical_frame_length)

    @property
    def interaction_feature_size(self) -> int:
        return INTERACTION_FEATURE_SIZE

    @property
    def single_lane_feature_size(self) -> int:
        return SINGLE_LANE_FEATURE_SIZE

    @property
    def lane_feature_size(self) -> int:
        return SINGLE_LANE_FEATURE_SIZE * self.lane_points_size

    @property
    def total_feature_size(self) -> int:
        return self.obstacle_feature_size + INTERACTION_FEATURE_SIZE + self.lane_feature_size
