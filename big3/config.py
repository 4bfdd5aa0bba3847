"""
BIG3 Tracker — Configuration

Data source, gviz wire constants and per-field chart settings.
The sheet ID is only a default: everything that fetches takes it as an argument.
"""
import os

# ── Data Source ──────────────────────────────────────────────────────
SPREADSHEET_ID = os.environ.get(
    "BIG3_SPREADSHEET_ID", "1hpUEOWQJ4bofox-do8eRF7fNlVknVyNK8kHsUiTOmAk"
)
GVIZ_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:json"
REQUEST_TIMEOUT = float(os.environ.get("BIG3_REQUEST_TIMEOUT", "15"))

# gviz wraps the JSON as: /*O_o*/\ngoogle.visualization.Query.setResponse( ... );
GVIZ_PREFIX_LEN = 47
GVIZ_SUFFIX_LEN = 2

# ── Timestamps ───────────────────────────────────────────────────────
# Numbers in [EPOCH_MIN, EPOCH_MAX) are Unix epochs: seconds below
# EPOCH_MS_THRESHOLD (10 digits), milliseconds above it (13 digits).
EPOCH_MIN = 1e9
EPOCH_MAX = 1e15
EPOCH_MS_THRESHOLD = 1e12

# ── Fields ───────────────────────────────────────────────────────────
# Sheet columns: A date, B bench press, C squat, D deadlift, E body weight
COLUMNS = ("timestamp", "bp", "sq", "dl", "body_weight")
LIFTS = ("bp", "sq", "dl")
RATIO_FIELDS = ("total", "bp", "sq", "dl")

FIELD_CONFIG = {
    "total": {"label": "Total (BIG3)", "color": "#27ae60", "padding": 5.0},
    "bp": {"label": "BP (Bench Press)", "color": "#e74c3c", "padding": 2.5},
    "sq": {"label": "SQ (Squat)", "color": "#3498db", "padding": 2.5},
    "dl": {"label": "DL (Deadlift)", "color": "#9b59b6", "padding": 2.5},
    "body_weight": {"label": "Body Weight", "color": "#27ae60", "padding": 1.0},
}

# Ratios are multiples of body weight, so the axis margin is much smaller
RATIO_PADDING = 0.05
DEFAULT_DOMAIN = (0, 100)
Y_TICK_COUNT = 5

UNIT_KG = "kg"
UNIT_RATIO = "×BW"
