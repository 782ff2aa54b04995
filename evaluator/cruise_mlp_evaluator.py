"""Cruise MLP evaluator: scores every candidate lane sequence of an obstacle.

Per obstacle:
  1. Obstacle block (23 + 9 * W) from the observation history, once
  2. Per lane sequence: interaction block (8) + lane block (4 * P)
  3. feature vector = obstacle ++ interaction ++ lane
  4. Online: obstacle row (1, D_obs) and lane matrix (P, 4) go to the
     follow-lane model if the obstacle is on the lane, else the cut-in model;
     output column 0 is the probability, column 1 the time to lane center.
     Offline: the feature vector is captured instead.

evaluate() returns results keyed by lane sequence index without touching
the obstacle; apply_results() merges them; run() does both.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from evaluator.config import CruiseConfig
from evaluator.feature_output import FeatureOutput
from features.interaction_features import INTERACTION_FEATURE_SIZE, extract_interaction_features
from features.lane_features import SINGLE_LANE_FEATURE_SIZE, extract_lane_features
from features.matrix import vector_to_matrix
from features.obstacle_features import extract_obstacle_features
from model.cruise_model import Behavior
from model.model_loader import load_cruise_models

logger = logging.getLogger(__name__)


@dataclass
class LaneSequenceResult:
    """Evaluation output for one lane sequence; None fields are left untouched."""
    probability: Optional[float] = None
    time_to_lane_center: Optional[float] = None
    features: Optional[np.ndarray] = None


class CruiseMLPEvaluator:
    """Lane-sequence evaluator backed by a follow-lane and a cut-in model.

    Args:
        obstacles_container: store resolving nearby-obstacle ids
        models: dict mapping Behavior -> model exposing run(lane_matrix, obstacle_matrix)
        config: CruiseConfig, defaults if None
        feature_output: offline sink; created on demand in offline mode
    """

    def __init__(self, obstacles_container, models: dict = None, config: CruiseConfig = None,
                 feature_output: FeatureOutput = None):
        self.config = config or CruiseConfig()
        self.obstacles_container = obstacles_container
        self.models = models or {}

        if not self.config.offline_mode:
            missing = [b.name for b in Behavior if b not in self.models]
            if missing:
                raise ValueError(f"Missing cruise models for {missing}")

        if feature_output is None and self.config.offline_mode:
            feature_output = FeatureOutput()
        self.feature_output = feature_output

    @classmethod
    def from_config(cls, config: CruiseConfig, obstacles_container,
                    feature_output: FeatureOutput = None) -> "CruiseMLPEvaluator":
        """Build an evaluator, loading both models unless running offline."""
        models = None
        if not config.offline_mode:
            models = load_cruise_models(
                config.go_model_file, config.cutin_model_file, device=config.device,
                expected_sizes={
                    "obstacle_feat_dim": config.obstacle_feature_size,
                    "lane_feat_dim": SINGLE_LANE_FEATURE_SIZE,
                    "lane_points": config.lane_points_size,
                },
            )
        return cls(obstacles_container, models, config, feature_output)

    def extract_obstacle_features(self, obstacle) -> np.ndarray:
        cfg = self.config
        return extract_obstacle_features(
            obstacle,
            historical_frame_length=cfg.historical_frame_length,
            trajectory_time_length=cfg.trajectory_time_length,
            double_precision=cfg.double_precision,
        )

    def extract_feature_values(self, obstacle, lane_sequence,
                               obstacle_features: np.ndarray = None) -> np.ndarray:
        """Concatenate obstacle, interaction and lane blocks for one lane sequence.

        Stops at the first block of the wrong size, so a short result means
        extraction failed for this lane sequence.
        """
        if obstacle is None or lane_sequence is None:
            raise ValueError("obstacle and lane_sequence must not be None")
        cfg = self.config

        if obstacle_features is None:
            obstacle_features = self.extract_obstacle_features(obstacle)
        if len(obstacle_features) != cfg.obstacle_feature_size:
            logger.debug(
                "Obstacle [%s] has %d obstacle feature values, expected %d",
                obstacle.id, len(obstacle_features), cfg.obstacle_feature_size,
            )
            return np.zeros(0, dtype=np.float64)

        interaction_features = extract_interaction_features(
            lane_sequence,
            self.obstacles_container,
            default_s=cfg.default_s_if_no_obstacle,
            default_l=cfg.default_l_if_no_obstacle,
        )
        if len(interaction_features) != INTERACTION_FEATURE_SIZE:
            logger.debug(
                "Obstacle [%s] has %d interaction feature values",
                obstacle.id, len(interaction_features),
            )
            return obstacle_features

        lane_features = extract_lane_features(obstacle, lane_sequence, cfg.lane_points_size)
        if len(lane_features) != cfg.lane_feature_size:
            logger.debug(
                "Obstacle [%s] has %d lane feature values, expected %d",
                obstacle.id, len(lane_features), cfg.lane_feature_size,
            )
            return np.concatenate([obstacle_features, interaction_features])

        return np.concatenate([obstacle_features, interaction_features, lane_features])

    def _score(self, lane_sequence, feature_values: np.ndarray) -> LaneSequenceResult:
        cfg = self.config
        obs_size = cfg.obstacle_feature_size
        lane_start = obs_size + INTERACTION_FEATURE_SIZE

        obstacle_matrix = vector_to_matrix(feature_values, 0, obs_size)
        lane_matrix = vector_to_matrix(
            feature_values, lane_start, len(feature_values),
            cfg.lane_points_size, SINGLE_LANE_FEATURE_SIZE,
        )

        behavior = Behavior.for_lane_sequence(lane_sequence)
        output = np.asarray(self.models[behavior].run(lane_matrix, obstacle_matrix))
        return LaneSequenceResult(
            probability=float(output[0, 0]),
            time_to_lane_center=float(output[0, 1]),
        )

    def evaluate(self, obstacle) -> dict:
        """Evaluate every lane sequence of an obstacle.

        Returns:
            dict lane sequence index -> LaneSequenceResult; empty when the
            obstacle is skipped for this cycle
        """
        if obstacle is None:
            raise ValueError("obstacle must not be None")

        latest = obstacle.latest_feature
        if latest is None:
            logger.error("Obstacle [%s] has no latest feature.", obstacle.id)
            return {}
        if latest.lane_graph is None:
            logger.debug("Obstacle [%s] has no lane graph.", obstacle.id)
            return {}
        lane_sequences = latest.lane_graph.lane_sequences
        if not lane_sequences:
            logger.error("Obstacle [%s] has no lane sequences.", obstacle.id)
            return {}

        obstacle_features = self.extract_obstacle_features(obstacle)
        if len(obstacle_features) == 0:
            logger.debug("Skip obstacle [%s]: no lane-attributed history.", obstacle.id)
            return {}

        logger.debug("Obstacle [%s] has %d lane sequences", obstacle.id, len(lane_sequences))
        results = {}
        for i, lane_sequence in enumerate(lane_sequences):
            feature_values = self.extract_feature_values(obstacle, lane_sequence, obstacle_features)
            if len(feature_values) != self.config.total_feature_size:
                logger.debug(
                    "Skip lane sequence %d of obstacle [%s] due to incorrect feature size %d",
                    i, obstacle.id, len(feature_values),
                )
                results[i] = LaneSequenceResult(probability=0.0)
                continue

            if self.config.offline_mode:
                results[i] = LaneSequenceResult(features=feature_values)
            else:
                results[i] = self._score(lane_sequence, feature_values)

        return results

    @staticmethod
    def apply_results(obstacle, results: dict):
        """Write results back onto the obstacle's lane sequences."""
        lane_sequences = obstacle.latest_feature.lane_graph.lane_sequences
        for i, result in results.items():
            lane_sequence = lane_sequences[i]
            if result.probability is not None:
                lane_sequence.probability = result.probability
            if result.time_to_lane_center is not None:
                lane_sequence.time_to_lane_center = result.time_to_lane_center
            if result.features is not None:
                lane_sequence.mlp_features.extend(float(v) for v in result.features)

    def run(self, obstacle) -> dict:
        """Evaluate, write back, and in offline mode capture the latest observation."""
        results = self.evaluate(obstacle)
        if not results:
            return results

        self.apply_results(obstacle, results)
        if self.config.offline_mode:
            self.feature_output.insert(obstacle.latest_feature)
            logger.debug("Insert cruise feature of obstacle [%s] into feature output", obstacle.id)
        return results
