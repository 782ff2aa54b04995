"""Run the cruise MLP evaluator over a pickled set of obstacles.

Usage:
    python run_cruise_eval.py --config configs/cruise_mlp.yaml --obstacles obstacles.pkl
    python run_cruise_eval.py --config configs/cruise_mlp.yaml --obstacles obstacles.pkl --offline

The obstacles pickle holds a list of features.types.Obstacle. Online mode
writes per-lane-sequence probabilities to a JSON file; offline mode writes
the captured feature records to the configured feature_output_file.
"""

import argparse
import json
import logging
import os
import pickle
import sys
import time

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from evaluator.config import CruiseConfig
from evaluator.cruise_mlp_evaluator import CruiseMLPEvaluator
from features.obstacles_container import ObstaclesContainer

logger = logging.getLogger(__name__)


def load_obstacles(path: str) -> ObstaclesContainer:
    with open(path, "rb") as f:
        obstacles = pickle.load(f)
    container = ObstaclesContainer()
    for obstacle in obstacles:
        container.add_obstacle(obstacle)
    return container


def run_cruise_evaluation(config: CruiseConfig, obstacles_path: str, output_json: str = None) -> dict:
    """Evaluate every obstacle and collect results.

    Returns:
        dict obstacle id -> {lane sequence index -> {probability, time_to_lane_center}}
    """
    container = load_obstacles(obstacles_path)
    logger.info("Loaded %d obstacles from %s", len(container), obstacles_path)

    evaluator = CruiseMLPEvaluator.from_config(config, container)

    t0 = time.time()
    all_results = {}
    skipped = 0
    for obstacle in container:
        results = evaluator.run(obstacle)
        if not results:
            skipped += 1
            continue
        all_results[str(obstacle.id)] = {
            str(i): {
                "probability": r.probability,
                "time_to_lane_center": r.time_to_lane_center,
            }
            for i, r in results.items()
        }
    logger.info(
        "Evaluated %d obstacles (%d skipped) in %.2fs",
        len(all_results), skipped, time.time() - t0,
    )

    if config.offline_mode:
        evaluator.feature_output.write_to_file(config.feature_output_file)
    elif output_json:
        dirname = os.path.dirname(output_json)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with open(output_json, "w") as f:
            json.dump(all_results, f, indent=2)
        logger.info("Results saved to %s", output_json)

    return all_results


def main():
    parser = argparse.ArgumentParser(description="Cruise MLP lane-sequence evaluation")
    parser.add_argument(
        "--config", type=str, default="configs/cruise_mlp.yaml",
        help="Path to config YAML",
    )
    parser.add_argument("--obstacles", type=str, required=True, help="Pickled list of obstacles")
    parser.add_argument("--offline", action="store_true", help="Capture features instead of running models")
    parser.add_argument("--output", type=str, default="cruise_eval_results.json", help="Output JSON file")
    parser.add_argument("--device", type=str, default=None, help="Override model device")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logger.info("Loading config from %s", args.config)
    config = CruiseConfig.from_yaml(args.config)
    if args.offline:
        config.offline_mode = True
    if args.device is not None:
        config.device = args.device

    run_cruise_evaluation(config, args.obstacles, output_json=args.output)


if __name__ == "__main__":
    main()
