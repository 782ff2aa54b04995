"""Convert captured offline features into training arrays.

Usage:
    python scripts/export_offline_features.py \
        --config configs/cruise_mlp.yaml \
        --output output/cruise_features.npz
"""

import argparse
import os
import sys

import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from evaluator.config import CruiseConfig
from evaluator.feature_output import load_features, stack_lane_sequence_features


def main():
    parser = argparse.ArgumentParser(description="Export offline cruise features to .npz")
    parser.add_argument(
        "--config", type=str, default="configs/cruise_mlp.yaml",
        help="Path to config YAML",
    )
    parser.add_argument(
        "--features", type=str, default=None,
        help="Feature pickle (default: feature_output_file from config)",
    )
    parser.add_argument("--output", type=str, required=True, help="Output .npz path")
    args = parser.parse_args()

    cfg = CruiseConfig.from_yaml(args.config)
    records = load_features(args.features or cfg.feature_output_file)
    print(f"Loaded {len(records)} feature records")

    features, on_lane = stack_lane_sequence_features(records, cfg.total_feature_size)
    print(f"Collected {len(features)} lane sequence feature vectors "
          f"({int(on_lane.sum())} on lane, {int((~on_lane).sum())} cut-in)")

    dirname = os.path.dirname(args.output)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    np.savez(
        args.output,
        features=features,
        vehicle_on_lane=on_lane,
        obstacle_feature_size=cfg.obstacle_feature_size,
        lane_points_size=cfg.lane_points_size,
    )
    print(f"Saved to {args.output}")


if __name__ == "__main__":
    main()
