# pass_predictor/errors.py


class PassPredictorError(Exception):
    """Base class for pipeline errors."""


class LoadError(PassPredictorError):
    """Dataset source unreachable, unparseable, or empty after filtering."""


class InvalidRangeError(PassPredictorError):
    """Non-finite values or a zero-width feature range."""


class InvalidConfigError(PassPredictorError):
    """Malformed model configuration."""


class TrainingError(PassPredictorError):
    """Inputs and labels do not have the shapes the model expects."""


class TrainingInProgressError(PassPredictorError):
    pass


class NotTrainedError(PassPredictorError):
    pass
