import torch

from .model import ModelConfig, build_model
from .visualization import UNTRAINED_EDGE, edge_style, network_snapshot


def test_untrained_snapshot_uses_neutral_style():
    snap = network_snapshot(None, ModelConfig(hidden_layers=[8, 4]))

    assert snap.layer_sizes == [2, 8, 4, 1]
    assert snap.labels == ["Input layer", "Hidden layer 1", "Hidden layer 2", "Output layer"]
    assert not snap.trained
    assert [c.weights for c in snap.connections] == [None, None, None]
    assert len(snap.connections[0].styles) == 2
    assert len(snap.connections[0].styles[0]) == 8
    assert all(s == UNTRAINED_EDGE for row in snap.connections[1].styles for s in row)


def test_trained_snapshot_exposes_in_out_weights():
    torch.manual_seed(0)
    model = build_model(ModelConfig(hidden_layers=[3]))
    snap = network_snapshot(model, ModelConfig(hidden_layers=[5]))

    assert snap.layer_sizes == [2, 3, 1]
    first = snap.connections[0].weights
    assert len(first) == 2 and len(first[0]) == 3
    assert first[1][2] == model.dense_layers[0].weight[2, 1].item()


def test_edge_style():
    assert edge_style(0.25).color == "#4CAF50"
    assert edge_style(-2.0).color == "#f44336"
    assert edge_style(-2.0).width == 4.0
    assert edge_style(-2.0).opacity == 1.0
    assert edge_style(0.25).opacity == 0.25
    assert edge_style(None) == UNTRAINED_EDGE


def test_to_dict_is_json_ready():
    data = network_snapshot(None, ModelConfig(hidden_layers=[2])).to_dict()
    assert data["layer_sizes"] == [2, 2, 1]
    assert data["connections"][0]["styles"][0][0] == {"color": "#999", "width": 1.0, "opacity": 0.3}


def test_node_labels_name_inputs_and_output():
    snap = network_snapshot(None, ModelConfig(hidden_layers=[3, 2]))
    assert snap.node_labels == [
        ["Hours studied", "Attendance rate"],
        [None, None, None],
        [None, None],
        ["Pass probability"],
    ]
    assert snap.to_dict()["node_labels"][-1] == ["Pass probability"]
