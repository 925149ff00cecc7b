# pass_predictor/visualization.py
"""Read-only view of the network for drawing a diagram."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import torch

from .model import ModelConfig, PassNet

POSITIVE_COLOR = "#4CAF50"
NEGATIVE_COLOR = "#f44336"
UNTRAINED_COLOR = "#999"

INPUT_NODE_LABELS = ("Hours studied", "Attendance rate")
OUTPUT_NODE_LABEL = "Pass probability"


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    width: float
    opacity: float


UNTRAINED_EDGE = EdgeStyle(color=UNTRAINED_COLOR, width=1.0, opacity=0.3)


def edge_style(weight: Optional[float]) -> EdgeStyle:
    if weight is None:
        return UNTRAINED_EDGE
    magnitude = abs(weight)
    return EdgeStyle(
        color=POSITIVE_COLOR if weight > 0 else NEGATIVE_COLOR,
        width=magnitude * 2,
        opacity=min(magnitude, 1.0),
    )


def layer_label(index: int, n_layers: int) -> str:
    if index == 0:
        return "Input layer"
    if index == n_layers - 1:
        return "Output layer"
    return f"Hidden layer {index}"


def node_labels(layer_sizes: List[int]) -> List[List[Optional[str]]]:
    """Feature names on the input nodes, the prediction on the output node, nothing on hidden ones."""
    labels: List[List[Optional[str]]] = []
    for index, size in enumerate(layer_sizes):
        if index == 0:
            labels.append([
                INPUT_NODE_LABELS[i] if i < len(INPUT_NODE_LABELS) else f"Input {i + 1}"
                for i in range(size)
            ])
        elif index == len(layer_sizes) - 1:
            labels.append([OUTPUT_NODE_LABEL] * size)
        else:
            labels.append([None] * size)
    return labels


@dataclass
class ConnectionLayer:
    """Edges from node layer `index` to `index + 1`. weights[i][j] links input i to output j."""
    index: int
    weights: Optional[List[List[float]]]
    styles: List[List[EdgeStyle]] = field(default_factory=list)


@dataclass
class NetworkSnapshot:
    layer_sizes: List[int]
    labels: List[str]
    node_labels: List[List[Optional[str]]]
    connections: List[ConnectionLayer]
    trained: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer_sizes": self.layer_sizes,
            "labels": self.labels,
            "node_labels": self.node_labels,
            "trained": self.trained,
            "connections": [
                {
                    "index": c.index,
                    "weights": c.weights,
                    "styles": [[vars(s) for s in row] for row in c.styles],
                }
                for c in self.connections
            ],
        }


def network_snapshot(model: Optional[PassNet], config: ModelConfig) -> NetworkSnapshot:
    """
    Layer widths, labels and weights for a diagram. With no model every edge
    gets the neutral untrained style and weights are None.
    """
    if model is not None:
        config = model.config
    sizes = config.layer_sizes

    weight_matrices: List[Optional[List[List[float]]]] = [None] * (len(sizes) - 1)
    if model is not None:
        with torch.no_grad():
            # nn.Linear stores [out, in]; transpose to [in][out]
            weight_matrices = [layer.weight.detach().t().tolist() for layer in model.dense_layers]

    connections = []
    for i, weights in enumerate(weight_matrices):
        if weights is None:
            styles = [[UNTRAINED_EDGE] * sizes[i + 1] for _ in range(sizes[i])]
        else:
            styles = [[edge_style(w) for w in row] for row in weights]
        connections.append(ConnectionLayer(index=i, weights=weights, styles=styles))

    return NetworkSnapshot(
        layer_sizes=list(sizes),
        labels=[layer_label(i, len(sizes)) for i in range(len(sizes))],
        node_labels=node_labels(sizes),
        connections=connections,
        trained=model is not None,
    )
