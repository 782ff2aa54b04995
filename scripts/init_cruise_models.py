"""Write freshly initialized follow-lane and cut-in model parameter files.

Useful to bootstrap a deployment or smoke test before trained weights exist.

Usage:
    python scripts/init_cruise_models.py --config configs/cruise_mlp.yaml --seed 42
"""

import argparse
import os
import sys

import torch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from evaluator.config import CruiseConfig
from model.cruise_model import CruiseModel
from model.model_loader import save_cruise_model


def main():
    parser = argparse.ArgumentParser(description="Initialize cruise model parameter files")
    parser.add_argument(
        "--config", type=str, default="configs/cruise_mlp.yaml",
        help="Path to config YAML",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    cfg = CruiseConfig.from_yaml(args.config)
    torch.manual_seed(args.seed)

    for path in (cfg.go_model_file, cfg.cutin_model_file):
        model = CruiseModel(
            obstacle_feat_dim=cfg.obstacle_feature_size,
            lane_feat_dim=cfg.single_lane_feature_size,
            lane_points=cfg.lane_points_size,
        )
        save_cruise_model(model, path)
        print(f"Saved to {path}")


if __name__ == "__main__":
    main()
