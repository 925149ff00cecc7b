# app/main.py
"""
Flask host for the pass predictor.

Holds one TrainingSession; the display layer trains it, polls the history,
asks for predictions and reads the network snapshot.
Run with `python -m app.main`.
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from pass_predictor.config import DATA_PATH
from pass_predictor.errors import (
    InvalidConfigError,
    InvalidRangeError,
    LoadError,
    NotTrainedError,
    TrainingError,
    TrainingInProgressError,
)
from pass_predictor.model import ModelConfig
from pass_predictor.predict import PredictionInput
from pass_predictor.session import TrainingSession


def parse_features(features: Dict[str, Any]) -> PredictionInput:
    # raises KeyError / TypeError / ValueError on a malformed dict
    return PredictionInput(
        hours_studied=float(features["hours_studied"]),
        attendance_rate=float(features["attendance_rate"]),
    )


def parse_config(payload: Dict[str, Any], current: ModelConfig) -> ModelConfig:
    return ModelConfig(
        hidden_layers=payload.get("hidden_layers", current.hidden_layers),
        learning_rate=payload.get("learning_rate", current.learning_rate),
    )


def create_app(session: Optional[TrainingSession] = None) -> Flask:
    app = Flask(__name__)
    app.config["TRAINING_SESSION"] = session if session is not None else TrainingSession(DATA_PATH)

    def current_session() -> TrainingSession:
        return app.config["TRAINING_SESSION"]

    @app.route("/health", methods=["GET"])
    def health():
        s = current_session()
        return jsonify({
            "status": "ok",
            "trained": s.is_trained,
            "training": s.is_training,
            "layer_sizes": s.config.layer_sizes,
        })

    @app.route("/train", methods=["POST"])
    def train():
        s = current_session()
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return jsonify({"error": "Send a JSON object."}), 400
        epochs = payload.get("epochs")
        if epochs is not None and (isinstance(epochs, bool) or not isinstance(epochs, int) or epochs < 1):
            return jsonify({"error": "'epochs' must be a positive integer."}), 400
        try:
            config = parse_config(payload, s.config)
            history = s.train(config=config, epochs=epochs)
        except TrainingInProgressError as e:
            return jsonify({"error": str(e)}), 409
        except (InvalidConfigError, InvalidRangeError, LoadError, TrainingError) as e:
            app.logger.warning("training request rejected: %s", e)
            return jsonify({"error": str(e)}), 400
        return jsonify({
            "epochs": len(history),
            "history": [m.to_dict() for m in history],
            "layer_sizes": s.config.layer_sizes,
        })

    @app.route("/history", methods=["GET"])
    def history():
        return jsonify({"history": [m.to_dict() for m in current_session().history]})

    @app.route("/predict", methods=["POST"])
    def predict():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or "features" not in payload:
            return jsonify({"error": "Send JSON with key 'features' mapping to a feature dict."}), 400
        try:
            features = parse_features(payload["features"])
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"error": f"invalid features: {e}"}), 400
        try:
            probability = current_session().predict(features)
        except (NotTrainedError, TrainingInProgressError) as e:
            return jsonify({"error": str(e)}), 409
        return jsonify({"probability": probability, "percent": f"{probability * 100:.2f}%"})

    @app.route("/predict_batch", methods=["POST"])
    def predict_batch():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or "rows" not in payload:
            return jsonify({"error": "Send JSON with key 'rows' (list of feature dicts)."}), 400
        try:
            inputs = [parse_features(row) for row in payload["rows"]]
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"error": f"invalid rows: {e}"}), 400
        try:
            probabilities = current_session().predict_many(inputs)
        except (NotTrainedError, TrainingInProgressError) as e:
            return jsonify({"error": str(e)}), 409
        return jsonify({"predictions": [{"probability": p} for p in probabilities]})

    @app.route("/network", methods=["GET"])
    def network():
        return jsonify(current_session().snapshot().to_dict())

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    app.logger.info("Starting Flask app. data: %s (exists: %s)", DATA_PATH, DATA_PATH.exists())
    app.run(host="0.0.0.0", port=5000, debug=True)
