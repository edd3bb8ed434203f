"""Shared constants: colors, chart options, model defaults, environment overrides."""
import os

SERIES_COLORS = [
    "#E63946", "#2A9D8F", "#264653", "#F4A261",
    "#7209B7", "#FB8500", "#2E86C1", "#6C757D",
]

DIRECTION_COLORS = {
    "up": "#2A9D8F",
    "down": "#E63946",
    "flat": "#6C757D",
}

# plot_type -> bar layout and y-axis label for crosstab plots
XTAB_PLOT_TYPES = {
    "side": {"barmode": "group", "barnorm": None, "y_label": "Count"},
    "stack": {"barmode": "stack", "barnorm": None, "y_label": "Count"},
    "percent": {"barmode": "stack", "barnorm": "percent", "y_label": "Percent"},
}

# Excel refuses sheet names longer than this
MAX_SHEET_NAME = 31
SHEET_NAME_FORBIDDEN = '[]:*?/\\'

CHAID_TUNING_PARAMS = ("alpha_merge", "max_depth", "min_parent_node_size", "min_child_node_size")

CHAID_DEFAULT_GRID = {
    "alpha_merge": [0.01, 0.05],
    "max_depth": [2, 3, 4],
    "min_parent_node_size": [30, 60],
    "min_child_node_size": [10],
}

CV_FOLDS = 5
RANDOM_SEED = 42

DATA_DIR = os.getenv(
    "STATBLOG_DATA_DIR",
    os.path.join(os.path.dirname(os.path.dirname(__file__)), "data"),
)
LOG_LEVEL = os.getenv("STATBLOG_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("STATBLOG_LOG_FILE")

SURVEY_COLUMNS = ["gender", "age_group", "region", "education", "satisfaction", "recommend"]

ATTRITION_CATEGORICAL = ["department", "overtime", "travel", "job_level"]
ATTRITION_NUMERIC = ["age", "monthly_income", "years_at_company", "satisfaction_score"]

POST_TITLES = {
    1: "Slopegraphs",
    2: "Plotting Crosstabs",
    3: "CHAID Decision Trees",
    4: "Tuning CHAID with Cross-Validation",
    5: "Random Forest vs Gradient Boosting",
}
