# pass_predictor/predict.py
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping

import torch

from .config import ATTENDANCE_FEATURE, ATTENDANCE_LIMITS, HOURS_FEATURE, HOURS_LIMITS
from .data import FeatureRange
from .model import PassNet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionInput:
    hours_studied: float
    attendance_rate: float


def _in_limits(value: float, limits) -> bool:
    lo, hi = limits
    return lo <= value <= hi


def predict(model: PassNet, features: PredictionInput, ranges: Mapping[str, FeatureRange]) -> float:
    """
    Pass probability in [0, 1] for one raw input.

    Implausible inputs (hours outside 0..40, attendance outside 0..100) and
    anything that does not normalize to a finite value give 0.0 instead of
    raising. Reads the model only; its parameters and mode are left untouched.
    """
    hours, attendance = features.hours_studied, features.attendance_rate
    if not _in_limits(hours, HOURS_LIMITS) or not _in_limits(attendance, ATTENDANCE_LIMITS):
        logger.warning("input out of plausible range: hours=%s attendance=%s", hours, attendance)
        return 0.0

    hours_range = ranges[HOURS_FEATURE]
    attendance_range = ranges[ATTENDANCE_FEATURE]
    with torch.no_grad():
        # numpy-style division so a zero-width range yields inf/nan, not an exception
        normalized = torch.tensor(
            [[hours - hours_range.min, attendance - attendance_range.min]], dtype=torch.float64
        ) / torch.tensor([[hours_range.span, attendance_range.span]], dtype=torch.float64)
        if not torch.isfinite(normalized).all():
            logger.error("normalized input is not finite (degenerate ranges?): %s", normalized.tolist())
            return 0.0

        dtype = next(model.parameters()).dtype
        result = model(normalized.to(dtype)).view(-1)[0].item()

    if not math.isfinite(result):
        return 0.0
    return max(0.0, min(1.0, result))


def predict_many(
    model: PassNet, inputs: Iterable[PredictionInput], ranges: Mapping[str, FeatureRange]
) -> List[float]:
    return [predict(model, features, ranges) for features in inputs]
