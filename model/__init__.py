"""Cruise model and its parameter-file bootstrap."""

from .cruise_model import Behavior, CruiseModel
from .model_loader import check_model_sizes, load_cruise_model, load_cruise_models, save_cruise_model

__all__ = [
    "Behavior",
    "CruiseModel",
    "load_cruise_model",
    "check_model_sizes",
    "load_cruise_models",
    "save_cruise_model",
]
