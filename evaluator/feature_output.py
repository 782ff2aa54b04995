"""Offline feature-output sink.

Collects latest observations (with their lane sequences' captured
mlp_features) for training-set generation. Appends from concurrent
evaluations are serialized by a lock.
"""

import copy
import logging
import os
import pickle
import threading

import numpy as np

logger = logging.getLogger(__name__)


class FeatureOutput:
    def __init__(self):
        self._lock = threading.Lock()
        self._records = []

    def insert(self, observation):
        """Append a snapshot of an observation."""
        record = copy.deepcopy(observation)
        with self._lock:
            self._records.append(record)

    def size(self) -> int:
        with self._lock:
            return len(self._records)

    def records(self) -> list:
        with self._lock:
            return list(self._records)

    def clear(self):
        with self._lock:
            self._records.clear()

    def write_to_file(self, output_path: str) -> int:
        """Pickle all records to output_path and return how many were written."""
        records = self.records()
        dirname = os.path.dirname(output_path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with open(output_path, "wb") as f:
            pickle.dump(records, f)
        logger.info("Wrote %d feature records to %s", len(records), output_path)
        return len(records)


def load_features(path: str) -> list:
    with open(path, "rb") as f:
        return pickle.load(f)


def stack_lane_sequence_features(records: list, feature_size: int) -> tuple:
    """Collect captured feature vectors into training arrays.

    Each lane sequence's mlp_features may hold several concatenated vectors
    (one per evaluation); each full-length chunk becomes one row.

    Returns:
        features: (N, feature_size) float32
        on_lane: (N,) bool, the lane sequence's vehicle_on_lane flag
    """
    rows = []
    on_lane = []
    for record in records:
        if record.lane_graph is None:
            continue
        for lane_sequence in record.lane_graph.lane_sequences:
            values = lane_sequence.mlp_features
            for start in range(0, len(values) - feature_size + 1, feature_size):
                rows.append(values[start:start + feature_size])
                on_lane.append(bool(lane_sequence.vehicle_on_lane))

    if not rows:
        return np.zeros((0, feature_size), dtype=np.float32), np.zeros(0, dtype=bool)
    return np.array(rows, dtype=np.float32), np.array(on_lane, dtype=bool)
