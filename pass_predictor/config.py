# pass_predictor/config.py
import os
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
DATA_PATH = Path(os.environ.get("PASS_PREDICTOR_DATA", ROOT / "data" / "raw" / "exam_results.csv"))

# CSV columns -> record fields
HOURS_COLUMN = "hours_studied_per_week"
ATTENDANCE_COLUMN = "attendance_rate_percent"
PASSED_COLUMN = "passed_exam"
REQUIRED_COLUMNS = (HOURS_COLUMN, ATTENDANCE_COLUMN, PASSED_COLUMN)

# feature names used as keys of the ranges mapping
HOURS_FEATURE = "hours_studied"
ATTENDANCE_FEATURE = "attendance_rate"
FEATURES = (HOURS_FEATURE, ATTENDANCE_FEATURE)

# plausible human input, independent of the training data
HOURS_LIMITS = (0.0, 40.0)
ATTENDANCE_LIMITS = (0.0, 100.0)

DEFAULT_HIDDEN_LAYERS = (8, 4)
# the diagram has room for at most 8 nodes per hidden layer
MAX_LAYER_WIDTH = 8
DEFAULT_LEARNING_RATE = 0.01
DEFAULT_EPOCHS = 50
BATCH_SIZE = 32
VALIDATION_SPLIT = 0.2
