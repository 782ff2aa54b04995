"""Lane-sequence evaluation: configuration, orchestrator and offline sink."""

from .config import CruiseConfig, load_config
from .cruise_mlp_evaluator import CruiseMLPEvaluator, LaneSequenceResult
from .feature_output import FeatureOutput, load_features, stack_lane_sequence_features

__all__ = [
    "CruiseConfig",
    "load_config",
    "CruiseMLPEvaluator",
    "LaneSequenceResult",
    "FeatureOutput",
    "load_features",
    "stack_lane_sequence_features",
]
