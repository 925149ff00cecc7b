import threading

import pytest

from .data import FeatureRange
from .errors import InvalidConfigError, InvalidRangeError, LoadError, NotTrainedError, TrainingInProgressError
from .model import ModelConfig
from .predict import PredictionInput
from .session import TrainingSession

CSV = """hours_studied_per_week,attendance_rate_percent,passed_exam
5,50,0
35,95,1
20,70,1
8,55,0
30,90,1
12,60,0
25,85,1
3,45,0
18,75,1
10,58,0
"""


@pytest.fixture
def data_path(tmp_path):
    path = tmp_path / "exam_results.csv"
    path.write_text(CSV)
    return path


@pytest.fixture
def session(data_path):
    s = TrainingSession(data_path, ModelConfig(hidden_layers=[8, 4], learning_rate=0.01), epochs=3)
    s.seed = 0
    return s


def test_train_pairs_model_and_ranges(session):
    history = session.train()

    assert [m.epoch for m in history] == [0, 1, 2]
    assert session.history == history
    assert session.is_trained
    assert session.ranges == {
        "hours_studied": FeatureRange(3.0, 35.0),
        "attendance_rate": FeatureRange(45.0, 95.0),
    }
    assert 0.0 <= session.predict(PredictionInput(20, 80)) <= 1.0
    assert session.predict(PredictionInput(-1, 80)) == 0.0


def test_history_resets_each_run(session):
    session.train()
    seen = []
    session.train(on_epoch=seen.append, epochs=2)
    assert [m.epoch for m in session.history] == [0, 1]
    assert seen == session.history


def test_retraining_replaces_model(session):
    session.train()
    first = session.model
    session.train(config=ModelConfig(hidden_layers=[3], learning_rate=0.05))
    assert session.model is not first
    assert session.config.layer_sizes == [2, 3, 1]


def test_predict_before_training_raises(session):
    with pytest.raises(NotTrainedError):
        session.predict(PredictionInput(20, 80))


def test_invalid_config_leaves_no_model(session):
    session.train()
    with pytest.raises(InvalidConfigError):
        session.train(config=ModelConfig(hidden_layers=[]))
    assert session.model is None
    assert session.ranges is None
    assert session.config.hidden_layers == (8, 4)


def test_degenerate_dataset_leaves_no_model(tmp_path):
    path = tmp_path / "flat.csv"
    path.write_text("hours_studied_per_week,attendance_rate_percent,passed_exam\n10,50,0\n10,90,1\n")
    session = TrainingSession(path, epochs=1)
    with pytest.raises(InvalidRangeError):
        session.train()
    assert not session.is_trained


def test_missing_dataset_raises_load_error(tmp_path):
    session = TrainingSession(tmp_path / "nope.csv")
    with pytest.raises(LoadError):
        session.train()
    assert not session.is_training


def test_abort_keeps_partially_trained_model(session):
    def abort(metric):
        raise RuntimeError("halt")

    with pytest.raises(RuntimeError):
        session.train(on_epoch=abort)
    assert session.is_trained
    assert len(session.history) == 1
    assert not session.is_training


def test_concurrent_training_rejected(session):
    errors = []

    def nested(metric):
        try:
            session.train()
        except TrainingInProgressError as e:
            errors.append(e)
        try:
            session.predict(PredictionInput(20, 80))
        except TrainingInProgressError as e:
            errors.append(e)

    session.train(on_epoch=nested, epochs=1)
    assert len(errors) == 2
    assert session.is_trained


def test_snapshot_tracks_model(session):
    untrained = session.snapshot()
    assert not untrained.trained
    assert untrained.layer_sizes == [2, 8, 4, 1]

    session.train()
    trained = session.snapshot()
    assert trained.trained
    assert len(trained.connections) == 3


def test_predict_during_retraining_sees_whole_pair_or_errors(session):
    session.train()
    failures = []

    def retrain():
        for _ in range(3):
            session.train(epochs=1)

    worker = threading.Thread(target=retrain)
    worker.start()
    while worker.is_alive():
        try:
            result = session.predict(PredictionInput(20, 80))
        except (NotTrainedError, TrainingInProgressError):
            continue
        except Exception as e:  # anything else means a half-swapped model/ranges pair
            failures.append(e)
        else:
            if not 0.0 <= result <= 1.0:
                failures.append(result)
    worker.join()

    assert failures == []
    assert session.is_trained
    assert session.model is not None and session.ranges is not None
