# pass_predictor/model.py
import math
import numbers
from dataclasses import dataclass
from typing import List, Optional, Tuple

import torch
import torch.nn as nn

from .config import DEFAULT_HIDDEN_LAYERS, DEFAULT_LEARNING_RATE, FEATURES, MAX_LAYER_WIDTH
from .errors import InvalidConfigError

INPUT_DIM = len(FEATURES)


@dataclass(frozen=True)
class ModelConfig:
    hidden_layers: Tuple[int, ...] = DEFAULT_HIDDEN_LAYERS
    learning_rate: float = DEFAULT_LEARNING_RATE

    def __post_init__(self):
        try:
            hidden = tuple(self.hidden_layers)
        except TypeError as e:
            raise InvalidConfigError(f"hidden_layers must be a sequence, got {self.hidden_layers!r}") from e
        object.__setattr__(self, "hidden_layers", hidden)

    @property
    def layer_sizes(self) -> List[int]:
        return [INPUT_DIM, *self.hidden_layers, 1]


def validate_config(config: ModelConfig) -> None:
    if len(config.hidden_layers) == 0:
        raise InvalidConfigError("hidden_layers must contain at least one layer")
    for width in config.hidden_layers:
        if isinstance(width, bool) or not isinstance(width, numbers.Integral):
            raise InvalidConfigError(f"layer width must be an integer, got {width!r}")
        if not 1 <= width <= MAX_LAYER_WIDTH:
            raise InvalidConfigError(f"layer width must be between 1 and {MAX_LAYER_WIDTH}, got {width}")
    lr = config.learning_rate
    if isinstance(lr, bool) or not isinstance(lr, numbers.Real) or not math.isfinite(lr) or lr <= 0:
        raise InvalidConfigError(f"learning_rate must be a positive number, got {lr!r}")


class PassNet(nn.Module):
    """
    Feed-forward binary classifier: 2 inputs -> ReLU hidden layers -> 1 sigmoid output.
    The output is already a pass probability.
    """
    def __init__(self, config: ModelConfig):
        super().__init__()
        self.config = config
        layers = []
        in_dim = INPUT_DIM
        for width in config.hidden_layers:
            layers.append(nn.Linear(in_dim, width))
            layers.append(nn.ReLU())
            in_dim = width
        layers.append(nn.Linear(in_dim, 1))
        layers.append(nn.Sigmoid())
        self.net = nn.Sequential(*layers)
        # set by build_model
        self.optimizer: Optional[torch.optim.Optimizer] = None

    @property
    def dense_layers(self) -> List[nn.Linear]:
        return [m for m in self.net if isinstance(m, nn.Linear)]

    def forward(self, x):
        return self.net(x)


def build_model(config: ModelConfig) -> PassNet:
    # reject before any parameter tensors exist
    validate_config(config)
    model = PassNet(config)
    # weight init is left to PyTorch's nn.Linear defaults
    model.optimizer = torch.optim.Adam(model.parameters(), lr=config.learning_rate)
    return model
