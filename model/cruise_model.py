"""Cruise model: scores one lane sequence for one obstacle.

Architecture:
  lane matrix (P, 4) -> Conv1d(4 -> 10 -> 16) over points
    -> max_pool + avg_pool over points -> lane encoding (32)
  obstacle row (1, D_obs) -> MLP(D_obs -> 64 -> 32) -> obstacle encoding (32)
  concat -> MLP(64 -> 32) shared encoding
    -> classify head: Linear(32 -> 1) + sigmoid  (probability)
    -> regress head:  Linear(32 -> 1) + ReLU     (time to lane center, s)

Two instances are used at runtime, one per Behavior.
"""

from enum import Enum

import numpy as np
import torch
import torch.nn as nn


class Behavior(Enum):
    """Which model scores a lane sequence."""
    FOLLOW_LANE = "go"
    CUT_IN = "cutin"

    @staticmethod
    def for_lane_sequence(lane_sequence) -> "Behavior":
        return Behavior.FOLLOW_LANE if lane_sequence.vehicle_on_lane else Behavior.CUT_IN


class CruiseModel(nn.Module):
    """Lane-sequence scorer with probability and time-to-lane-center heads.

    Args:
        obstacle_feat_dim: obstacle block length (23 + 9 * W, 68 for W=5)
        lane_feat_dim: per-point lane feature dimension (4)
        lane_points: number of lane points (20)
        lane_channels: Conv1d channel sizes
        hidden_dim: obstacle / shared encoding width
    """

    def __init__(
        self,
        obstacle_feat_dim: int = 68,
        lane_feat_dim: int = 4,
        lane_points: int = 20,
        lane_channels: tuple = (10, 16),
        hidden_dim: int = 32,
    ):
        super().__init__()
        self.obstacle_feat_dim = obstacle_feat_dim
        self.lane_feat_dim = lane_feat_dim
        self.lane_points = lane_points

        layers = []
        in_ch = lane_feat_dim
        for out_ch in lane_channels:
            layers.extend([nn.Conv1d(in_ch, out_ch, kernel_size=3, padding=1), nn.ReLU()])
            in_ch = out_ch
        self.lane_conv = nn.Sequential(*layers)
        lane_enc_dim = 2 * in_ch

        self.obstacle_mlp = nn.Sequential(
            nn.Linear(obstacle_feat_dim, 2 * hidden_dim),
            nn.ReLU(),
            nn.Linear(2 * hidden_dim, hidden_dim),
            nn.ReLU(),
        )

        self.encoding = nn.Sequential(
            nn.Linear(lane_enc_dim + hidden_dim, hidden_dim),
            nn.ReLU(),
        )
        self.classify = nn.Linear(hidden_dim, 1)
        self.regress = nn.Linear(hidden_dim, 1)

    def forward(self, lane_features: torch.Tensor, obstacle_features: torch.Tensor) -> torch.Tensor:
        """
        Args:
            lane_features: (B, P, 4)
            obstacle_features: (B, D_obs)

        Returns:
            (B, 2): [probability, time_to_lane_center]
        """
        x = self.lane_conv(lane_features.transpose(1, 2))  # (B, C, P)
        lane_enc = torch.cat([x.max(dim=2).values, x.mean(dim=2)], dim=-1)
        obs_enc = self.obstacle_mlp(obstacle_features)

        h = self.encoding(torch.cat([lane_enc, obs_enc], dim=-1))
        probability = torch.sigmoid(self.classify(h))
        finish_time = torch.relu(self.regress(h))
        return torch.cat([probability, finish_time], dim=-1)

    @torch.no_grad()
    def run(self, lane_matrix: np.ndarray, obstacle_matrix: np.ndarray) -> np.ndarray:
        """Score one lane sequence.

        Args:
            lane_matrix: (P, 4) float32
            obstacle_matrix: (1, D_obs) float32

        Returns:
            (1, 2) float32 array: column 0 probability, column 1 time (s)
        """
        device = next(self.parameters()).device
        lane = torch.as_tensor(lane_matrix, dtype=torch.float32, device=device).unsqueeze(0)
        obs = torch.as_tensor(obstacle_matrix, dtype=torch.float32, device=device)
        return self.forward(lane, obs).cpu().numpy()

    def config(self) -> dict:
        """Constructor arguments, stored alongside weights in parameter files."""
        return {
            "obstacle_feat_dim": self.obstacle_feat_dim,
            "lane_feat_dim": self.lane_feat_dim,
            "lane_points": self.lane_points,
            "lane_channels": [m.out_channels for m in self.lane_conv if isinstance(m, nn.Conv1d)],
            "hidden_dim": self.classify.in_features,
        }
