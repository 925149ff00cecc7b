"""Pass/fail predictor: CSV loading, min-max scaling, a small PyTorch net and its session."""

from .data import FeatureRange, NormalizedRecord, Record, load_data, normalize_data
from .errors import (
    InvalidConfigError,
    InvalidRangeError,
    LoadError,
    NotTrainedError,
    PassPredictorError,
    TrainingError,
    TrainingInProgressError,
)
from .model import ModelConfig, PassNet, build_model
from .predict import PredictionInput, predict, predict_many
from .session import TrainingSession
from .train import EpochMetric, iter_epochs, train_model

__all__ = [
    "EpochMetric",
    "FeatureRange",
    "InvalidConfigError",
    "InvalidRangeError",
    "LoadError",
    "ModelConfig",
    "NormalizedRecord",
    "NotTrainedError",
    "PassNet",
    "PassPredictorError",
    "PredictionInput",
    "Record",
    "TrainingError",
    "TrainingInProgressError",
    "TrainingSession",
    "build_model",
    "iter_epochs",
    "load_data",
    "normalize_data",
    "predict",
    "predict_many",
    "train_model",
]
