import dataclasses

import pytest
import torch
import torch.nn as nn

from .errors import InvalidConfigError
from .model import ModelConfig, PassNet, build_model


def test_build_model_topology():
    model = build_model(ModelConfig(hidden_layers=[8, 4], learning_rate=0.01))

    dense = model.dense_layers
    assert len(dense) == 3
    assert [(layer.in_features, layer.out_features) for layer in dense] == [(2, 8), (8, 4), (4, 1)]
    assert model.config.layer_sizes == [2, 8, 4, 1]
    assert isinstance(model.net[1], nn.ReLU)
    assert isinstance(model.net[3], nn.ReLU)
    assert isinstance(model.net[-1], nn.Sigmoid)


def test_build_model_attaches_optimizer():
    model = build_model(ModelConfig(hidden_layers=(3,), learning_rate=0.05))
    assert isinstance(model.optimizer, torch.optim.Adam)
    assert model.optimizer.param_groups[0]["lr"] == 0.05


def test_forward_outputs_probabilities():
    model = build_model(ModelConfig())
    out = model(torch.rand(5, 2))
    assert out.shape == (5, 1)
    assert ((out >= 0) & (out <= 1)).all()


def test_config_is_frozen_tuple():
    config = ModelConfig(hidden_layers=[8, 4])
    assert config.hidden_layers == (8, 4)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.learning_rate = 1.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"hidden_layers": []},
        {"hidden_layers": [8, 0]},
        {"hidden_layers": [-1]},
        {"hidden_layers": [2.5]},
        {"hidden_layers": [True]},
        {"hidden_layers": [9]},
        {"hidden_layers": [4, 10**12]},
        {"learning_rate": 0},
        {"learning_rate": -0.1},
        {"learning_rate": float("nan")},
        {"learning_rate": "fast"},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(InvalidConfigError):
        build_model(ModelConfig(**kwargs))


def test_non_sequence_hidden_layers_rejected():
    with pytest.raises(InvalidConfigError):
        ModelConfig(hidden_layers=8)


def test_passnet_without_builder_has_no_optimizer():
    assert PassNet(ModelConfig()).optimizer is None
