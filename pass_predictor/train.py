# pass_predictor/train.py
import dataclasses
import logging
import numbers
from contextlib import closing
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np
import torch
import torch.nn.functional as F
from sklearn.metrics import accuracy_score
from torch.utils.data import DataLoader, TensorDataset

from .config import BATCH_SIZE, VALIDATION_SPLIT
from .errors import TrainingError
from .model import INPUT_DIM, PassNet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpochMetric:
    epoch: int
    loss: float
    accuracy: float
    val_loss: Optional[float] = None
    val_accuracy: Optional[float] = None

    def to_dict(self):
        return dataclasses.asdict(self)


EpochCallback = Callable[[EpochMetric], None]


def _check_shapes(xs, ys) -> Tuple[np.ndarray, np.ndarray]:
    try:
        x = np.asarray(xs, dtype=np.float32)
        y = np.asarray(ys, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise TrainingError(f"training data is not a numeric array: {e}") from e

    if x.ndim != 2 or x.shape[1] != INPUT_DIM:
        raise TrainingError(f"xs must have shape [n, {INPUT_DIM}], got {list(x.shape)}")
    if y.ndim == 1:
        y = y.reshape(-1, 1)
    if y.ndim != 2 or y.shape[1] != 1:
        raise TrainingError(f"ys must have shape [n] or [n, 1], got {list(y.shape)}")
    if x.shape[0] != y.shape[0]:
        raise TrainingError(f"xs has {x.shape[0]} rows but ys has {y.shape[0]}")
    if x.shape[0] == 0:
        raise TrainingError("no training rows")
    if not np.isin(y, (0.0, 1.0)).all():
        raise TrainingError("ys must only contain 0 or 1 labels")
    return x, y


def validation_split_index(n: int) -> int:
    """Rows [0, index) train, rows [index, n) validate. Falls back to n when nothing would train."""
    split_at = int(n * (1 - VALIDATION_SPLIT))
    return split_at if split_at > 0 else n


def _accuracy(preds: torch.Tensor, targets: torch.Tensor) -> float:
    predicted = (preds >= 0.5).float().view(-1).tolist()
    return float(accuracy_score(targets.view(-1).tolist(), predicted))


def iter_epochs(
    model: PassNet,
    xs,
    ys,
    epochs: int,
    *,
    batch_size: int = BATCH_SIZE,
    seed: Optional[int] = None,
) -> Iterator[EpochMetric]:
    """
    Train `model` in place, yielding one EpochMetric after each epoch.

    The last 20% of the rows (in the given order) are held out for the
    val_* metrics and never used for updates. Shapes, labels and epochs
    are checked before the generator is returned, so a TrainingError
    surfaces at the call.
    """
    x, y = _check_shapes(xs, ys)
    if isinstance(epochs, bool) or not isinstance(epochs, numbers.Integral) or epochs < 0:
        raise TrainingError(f"epochs must be a non-negative integer, got {epochs!r}")
    if model.optimizer is None:
        raise TrainingError("model has no optimizer attached; create it with build_model")
    return _run_epochs(model, x, y, epochs, batch_size, seed)


def _run_epochs(model, x, y, epochs, batch_size, seed):
    n = x.shape[0]
    split_at = validation_split_index(n)
    optimizer = model.optimizer
    generator = torch.Generator().manual_seed(seed) if seed is not None else None

    x_t, y_t = torch.as_tensor(x), torch.as_tensor(y)
    train_loader = DataLoader(
        TensorDataset(x_t[:split_at], y_t[:split_at]),
        batch_size=batch_size,
        shuffle=True,
        generator=generator,
    )
    x_val, y_val = x_t[split_at:], y_t[split_at:]

    try:
        for epoch in range(epochs):
            model.train()
            total_loss = 0.0
            batch_preds, batch_targets = [], []
            for xb, yb in train_loader:
                optimizer.zero_grad()
                preds = model(xb)
                loss = F.binary_cross_entropy(preds, yb)
                loss.backward()
                optimizer.step()
                total_loss += loss.item() * xb.shape[0]
                batch_preds.append(preds.detach())
                batch_targets.append(yb)

            train_loss = total_loss / split_at
            train_acc = _accuracy(torch.cat(batch_preds), torch.cat(batch_targets))

            val_loss = val_acc = None
            if split_at < n:
                model.eval()
                with torch.no_grad():
                    preds = model(x_val)
                    val_loss = F.binary_cross_entropy(preds, y_val).item()
                    val_acc = _accuracy(preds, y_val)

            metric = EpochMetric(
                epoch=epoch,
                loss=train_loss,
                accuracy=train_acc,
                val_loss=val_loss,
                val_accuracy=val_acc,
            )
            if val_loss is None:
                logger.info("Epoch %d/%d loss=%.4f acc=%.4f", epoch + 1, epochs, train_loss, train_acc)
            else:
                logger.info(
                    "Epoch %d/%d loss=%.4f acc=%.4f val_loss=%.4f val_acc=%.4f",
                    epoch + 1, epochs, train_loss, train_acc, val_loss, val_acc,
                )
            yield metric
    finally:
        model.eval()
        # the loader and the slices keep the input tensors alive otherwise
        del train_loader, x_t, y_t, x_val, y_val
        logger.debug("released training tensors")


def train_model(
    model: PassNet,
    xs,
    ys,
    epochs: int,
    on_epoch: Optional[EpochCallback] = None,
    *,
    batch_size: int = BATCH_SIZE,
    seed: Optional[int] = None,
) -> List[EpochMetric]:
    """
    Run exactly `epochs` epochs, calling `on_epoch` after each one before the
    next starts. An exception raised by `on_epoch` aborts the run and
    propagates; weights from the completed epochs are kept.
    """
    history: List[EpochMetric] = []
    with closing(iter_epochs(model, xs, ys, epochs, batch_size=batch_size, seed=seed)) as metrics:
        for metric in metrics:
            history.append(metric)
            if on_epoch is not None:
                on_epoch(metric)
    return history
