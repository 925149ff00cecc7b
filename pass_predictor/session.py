# pass_predictor/session.py
"""
One training session: the dataset, the live model and the ranges it was
trained with, plus the metric history of the current run.

Model and ranges are replaced together; a model is never kept next to
ranges from a different run. Only one run may be active at a time.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from .config import DATA_PATH, DEFAULT_EPOCHS
from .data import FeatureRange, Record, load_data, normalize_data, prepare_arrays
from .errors import NotTrainedError, TrainingInProgressError
from .model import ModelConfig, PassNet, build_model
from .predict import PredictionInput, predict, predict_many
from .train import EpochCallback, EpochMetric, train_model
from .visualization import NetworkSnapshot, network_snapshot

logger = logging.getLogger(__name__)


class TrainingSession:
    def __init__(self, data_path=DATA_PATH, config: Optional[ModelConfig] = None, epochs: int = DEFAULT_EPOCHS):
        self.data_path = data_path
        self.config = config or ModelConfig()
        self.epochs = epochs
        self.seed: Optional[int] = None

        self._records: Optional[List[Record]] = None
        # (model, ranges) swapped as one attribute so readers never see a mixed pair
        self._trained: Optional[Tuple[PassNet, Dict[str, FeatureRange]]] = None
        self._history: List[EpochMetric] = []
        self._lock = threading.Lock()

    @property
    def model(self) -> Optional[PassNet]:
        trained = self._trained
        return trained[0] if trained is not None else None

    @property
    def ranges(self) -> Optional[Dict[str, FeatureRange]]:
        trained = self._trained
        return dict(trained[1]) if trained is not None else None

    @property
    def history(self) -> List[EpochMetric]:
        return list(self._history)

    @property
    def is_training(self) -> bool:
        return self._lock.locked()

    @property
    def is_trained(self) -> bool:
        return self._trained is not None

    def load(self, reload: bool = False) -> List[Record]:
        if self._records is None or reload:
            self._records = load_data(self.data_path)
        return self._records

    def _discard(self):
        self._trained = None

    def train(
        self,
        on_epoch: Optional[EpochCallback] = None,
        config: Optional[ModelConfig] = None,
        epochs: Optional[int] = None,
    ) -> List[EpochMetric]:
        if not self._lock.acquire(blocking=False):
            raise TrainingInProgressError("a training run is already in progress")
        try:
            self._history = []
            self._discard()

            run_config = config if config is not None else self.config
            records = self.load()
            normalized, ranges = normalize_data(records)
            xs, ys = prepare_arrays(normalized)
            model = build_model(run_config)

            self.config = run_config
            if epochs is not None:
                self.epochs = epochs

            # from here on the model is paired with its ranges, even if training aborts
            self._trained = (model, ranges)

            def record(metric: EpochMetric):
                self._history.append(metric)
                if on_epoch is not None:
                    on_epoch(metric)

            logger.info(
                "training %s for %d epochs on %d records",
                self.config.layer_sizes, self.epochs, len(records),
            )
            train_model(model, xs, ys, self.epochs, record, seed=self.seed)
            logger.info("training finished after %d epochs", len(self._history))
            return self.history
        except Exception as e:
            logger.warning("training stopped after %d epochs: %s", len(self._history), e)
            raise
        finally:
            self._lock.release()

    def _trained_pair(self) -> Tuple[PassNet, Dict[str, FeatureRange]]:
        if self.is_training:
            raise TrainingInProgressError("cannot predict while training is running")
        trained = self._trained
        if trained is None:
            raise NotTrainedError("model has not been trained")
        return trained

    def predict(self, features: PredictionInput) -> float:
        model, ranges = self._trained_pair()
        return predict(model, features, ranges)

    def predict_many(self, inputs: List[PredictionInput]) -> List[float]:
        model, ranges = self._trained_pair()
        return predict_many(model, inputs, ranges)

    def snapshot(self) -> NetworkSnapshot:
        return network_snapshot(self.model, self.config)
