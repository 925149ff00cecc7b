# pass_predictor/data.py
"""
Dataset loading and min-max normalization.

- load_data: reads the exam CSV with pandas, validates each row into a Record
  (or a Rejected tag) and fails with LoadError if nothing usable remains.
- normalize_data: scans each feature for min/max and rescales it into [0, 1].
  Degenerate or non-finite columns raise InvalidRangeError.
- prepare_arrays: normalized records -> float32 arrays for the trainer.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .config import (
    ATTENDANCE_COLUMN,
    ATTENDANCE_FEATURE,
    DATA_PATH,
    HOURS_COLUMN,
    HOURS_FEATURE,
    PASSED_COLUMN,
)
from .errors import InvalidRangeError, LoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    hours_studied: float
    attendance_rate: float
    passed: int


@dataclass(frozen=True)
class Rejected:
    row_index: int
    reason: str


@dataclass(frozen=True)
class NormalizedRecord:
    hours_studied: float
    attendance_rate: float
    passed: int


@dataclass(frozen=True)
class FeatureRange:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def normalize(self, value: float) -> float:
        return (value - self.min) / (self.max - self.min)

    def denormalize(self, value: float) -> float:
        return self.min + value * (self.max - self.min)


Ranges = Dict[str, FeatureRange]


def _to_float(value: Any) -> Optional[float]:
    # pandas fills missing cells with NaN, so NaN means "absent" here
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def parse_row(index: int, row: Mapping[str, Any]) -> Union[Record, Rejected]:
    """Validate one raw CSV row. Bad rows are tagged, never defaulted."""
    hours = _to_float(row.get(HOURS_COLUMN))
    if hours is None:
        return Rejected(index, f"{HOURS_COLUMN} missing or not numeric")
    attendance = _to_float(row.get(ATTENDANCE_COLUMN))
    if attendance is None:
        return Rejected(index, f"{ATTENDANCE_COLUMN} missing or not numeric")
    passed = _to_float(row.get(PASSED_COLUMN))
    if passed is None:
        return Rejected(index, f"{PASSED_COLUMN} missing or not numeric")
    if passed not in (0.0, 1.0):
        return Rejected(index, f"{PASSED_COLUMN} must be 0 or 1, got {passed!r}")
    return Record(hours_studied=hours, attendance_rate=attendance, passed=int(passed))


def load_data(source=DATA_PATH) -> List[Record]:
    """
    Read the dataset from `source` (path, URL or file-like object).
    One attempt only; the caller decides whether to retry.
    """
    try:
        df = pd.read_csv(source, skip_blank_lines=True)
    except FileNotFoundError as e:
        raise LoadError(f"data source not found: {source}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise LoadError(f"could not parse data source {source}: {e}") from e
    except OSError as e:
        raise LoadError(f"could not read data source {source}: {e}") from e

    records: List[Record] = []
    rejected: List[Rejected] = []
    for index, row in enumerate(df.to_dict(orient="records")):
        result = parse_row(index, row)
        if isinstance(result, Rejected):
            rejected.append(result)
        else:
            records.append(result)

    for r in rejected:
        logger.debug("dropping row %d: %s", r.row_index, r.reason)
    logger.info("loaded %d records (%d rows dropped) from %s", len(records), len(rejected), source)

    if not records:
        raise LoadError(f"no valid training records in {source}")
    return records


def _column_range(name: str, values: Sequence[float]) -> FeatureRange:
    column = np.asarray(values, dtype=np.float64)
    if not np.isfinite(column).all():
        raise InvalidRangeError(f"{name} contains non-finite values")
    lo = float(column.min())
    hi = float(column.max())
    if lo == hi:
        raise InvalidRangeError(f"{name} has a zero-width range ({lo} .. {hi})")
    return FeatureRange(min=lo, max=hi)


def normalize_data(records: Sequence[Record]) -> Tuple[List[NormalizedRecord], Ranges]:
    if not records:
        raise InvalidRangeError("no records to normalize")

    hours = _column_range(HOURS_FEATURE, [r.hours_studied for r in records])
    attendance = _column_range(ATTENDANCE_FEATURE, [r.attendance_rate for r in records])
    ranges = {HOURS_FEATURE: hours, ATTENDANCE_FEATURE: attendance}
    logger.info(
        "feature ranges: hours=[%g, %g] attendance=[%g, %g]",
        hours.min, hours.max, attendance.min, attendance.max,
    )

    normalized = [
        NormalizedRecord(
            hours_studied=hours.normalize(r.hours_studied),
            attendance_rate=attendance.normalize(r.attendance_rate),
            passed=r.passed,
        )
        for r in records
    ]
    return normalized, ranges


def prepare_arrays(normalized: Sequence[NormalizedRecord]) -> Tuple[np.ndarray, np.ndarray]:
    xs = np.array([[r.hours_studied, r.attendance_rate] for r in normalized], dtype=np.float32).reshape(-1, 2)
    ys = np.array([r.passed for r in normalized], dtype=np.float32).reshape(-1, 1)
    return xs, ys
