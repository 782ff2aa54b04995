"""Loading and saving cruise model parameter files.

A parameter file is a torch checkpoint:
    {"model_cfg": {...CruiseModel kwargs...}, "state_dict": {...}}
A bare state dict is also accepted when the caller supplies model_cfg.
"""

import logging
import os

import torch

from model.cruise_model import Behavior, CruiseModel

logger = logging.getLogger(__name__)


def save_cruise_model(model: CruiseModel, path: str):
    """Write a model's config and weights to a parameter file."""
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    torch.save({"model_cfg": model.config(), "state_dict": model.state_dict()}, path)


def load_cruise_model(path: str, model_cfg: dict = None, device: str = "cpu") -> CruiseModel:
    """Build a CruiseModel from a parameter file.

    Raises:
        FileNotFoundError: path does not exist
        RuntimeError: file cannot be parsed or does not match the model
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Unable to load model file: {path}")

    try:
        checkpoint = torch.load(path, map_location=device, weights_only=True)
    except Exception as e:
        raise RuntimeError(f"Unable to parse model file {path}: {e}") from e

    if isinstance(checkpoint, dict) and "state_dict" in checkpoint:
        state_dict = checkpoint["state_dict"]
        cfg = dict(checkpoint.get("model_cfg", {}))
        cfg.update(model_cfg or {})
    else:
        state_dict = checkpoint
        cfg = dict(model_cfg or {})

    model = CruiseModel(**cfg)
    try:
        model.load_state_dict(state_dict)
    except (RuntimeError, TypeError, AttributeError) as e:
        raise RuntimeError(f"Model file {path} does not match CruiseModel: {e}") from e

    model.to(device)
    model.eval()
    return model


def check_model_sizes(model: CruiseModel, path: str, expected_sizes: dict):
    """Raise RuntimeError if a loaded model was built for other input sizes.

    expected_sizes maps CruiseModel attributes (obstacle_feat_dim,
    lane_feat_dim, lane_points) to the sizes the evaluator will feed it.
    """
    for name, expected in expected_sizes.items():
        trained = getattr(model, name)
        if trained != expected:
            raise RuntimeError(
                f"Model file {path} was trained for {name}={trained}, config expects {expected}"
            )


def load_cruise_models(
    go_model_file: str,
    cutin_model_file: str,
    device: str = "cpu",
    expected_sizes: dict = None,
) -> dict:
    """Load the follow-lane and cut-in models.

    Args:
        expected_sizes: optional {attribute: size} checked against each model

    Returns:
        dict mapping Behavior -> CruiseModel
    """
    logger.info("Start loading cruise models")
    models = {}
    for behavior, path in (
        (Behavior.FOLLOW_LANE, go_model_file),
        (Behavior.CUT_IN, cutin_model_file),
    ):
        models[behavior] = load_cruise_model(path, device=device)
        if expected_sizes:
            check_model_sizes(models[behavior], path, expected_sizes)
        logger.info("Succeeded in loading %s model: %s", behavior.value, path)
    return models
