"""
BIG3 Tracker — Pandas Analytics Engine

Chart series (sorted, forward-filled, per-point totals and body-weight ratios)
and headline stats (all-time bests, latest body weight) from decoded LogRows.
Everything is recomputed from the full row list on each fetch.
"""
from dataclasses import asdict

import numpy as np
import pandas as pd

from big3.config import (
    COLUMNS,
    LIFTS,
    RATIO_FIELDS,
    FIELD_CONFIG,
    RATIO_PADDING,
    DEFAULT_DOMAIN,
)
from big3.sheet_client import LogRow
from big3.timestamps import parse_timestamp


def round_half_up(value, decimals: int = 0):
    """Round half up: 1.125 → 1.13, 5.625 → 5.63 (numpy/round() would give 1.12, 5.62)."""
    scale = 10 ** decimals
    return np.floor(value * scale + 0.5) / scale


def rows_to_dataframe(rows: list[LogRow]) -> pd.DataFrame:
    """
    LogRows as a DataFrame in source order: NaN for empty cells, plus a
    parsed UTC `date` column (NaT where the timestamp can't be parsed).
    """
    df = pd.DataFrame([asdict(r) for r in rows], columns=list(COLUMNS))
    for col in COLUMNS[1:]:
        df[col] = df[col].astype(float)
    df["date"] = pd.to_datetime(
        pd.Series([parse_timestamp(t) for t in df["timestamp"]], index=df.index, dtype=object),
        utc=True,
    )
    return df


# ═══════════════════════════════════════════════════════════════════════
# 1. CHART SERIES
# ═══════════════════════════════════════════════════════════════════════

def build_series(rows: list[LogRow], field: str | None = None, ratio: bool = False) -> pd.DataFrame:
    """
    Oldest → newest series for charting.

    - Rows with unparseable timestamps go last (stable within each group).
    - bp/sq/dl are forward-filled independently with the last value seen.
    - total = bp + sq + dl (1 decimal), only where all three are known.
    - body_weight is left as reported: it is plotted as its own raw series.
    - ratio=True adds `<field>_ratio` = filled value / that row's own body
      weight (2 decimals), NaN when the row has no positive body weight.
      Ignored for body_weight.
    """
    df = rows_to_dataframe(rows)
    df = df.sort_values("date", na_position="last", kind="stable").reset_index(drop=True)

    lifts = list(LIFTS)
    df[lifts] = df[lifts].ffill()
    df["total"] = round_half_up(df["bp"] + df["sq"] + df["dl"], 1)

    if ratio and field in RATIO_FIELDS:
        bw = df["body_weight"]
        df[f"{field}_ratio"] = round_half_up((df[field] / bw).where(bw > 0), 2)
    return df


def display_column(field: str, ratio: bool = False) -> str:
    """Column a chart of `field` should plot."""
    return f"{field}_ratio" if ratio and field in RATIO_FIELDS else field


def axis_domain(values, padding: float) -> tuple[float, float]:
    """[min - padding, max + padding] over the finite values; (0, 100) if none."""
    arr = np.asarray(list(values), dtype=float)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return DEFAULT_DOMAIN
    return float(finite.min() - padding), float(finite.max() + padding)


def series_domain(series: pd.DataFrame, field: str, ratio: bool = False) -> tuple[float, float]:
    col = display_column(field, ratio)
    padding = RATIO_PADDING if col != field else FIELD_CONFIG[field]["padding"]
    values = series[col] if col in series.columns else []
    return axis_domain(values, padding)


# ═══════════════════════════════════════════════════════════════════════
# 2. HEADLINE STATS — personal bests
# ═══════════════════════════════════════════════════════════════════════

def best_lifts(rows: list[LogRow]) -> dict:
    """
    All-time max per lift and the BIG3 total of those maxima.

    The total is best BP + best SQ + best DL, not the best single-day total:
    the three bests rarely happen on the same day.
    """
    df = rows_to_dataframe(rows)
    best = {}
    for lift in LIFTS:
        top = df[lift].max()
        best[lift] = float(top) if pd.notna(top) else None
    if all(best[lift] is not None for lift in LIFTS):
        best["total"] = float(round_half_up(sum(best[lift] for lift in LIFTS), 1))
    else:
        best["total"] = None
    return best


def latest_body_weight(rows: list[LogRow]) -> float | None:
    """Most recent positive body weight; rows without a parseable date are ignored."""
    df = rows_to_dataframe(rows)
    dated = df.dropna(subset=["date"]).sort_values("date", ascending=False, kind="stable")
    weights = dated.loc[dated["body_weight"] > 0, "body_weight"]
    return float(weights.iloc[0]) if not weights.empty else None


def best_ratios(best: dict, body_weight: float | None) -> dict:
    """Each best divided by body weight (2 decimals); all None without a usable body weight."""
    keys = ("bp", "sq", "dl", "total")
    if body_weight is None or not body_weight > 0:
        return {k: None for k in keys}
    return {
        k: float(round_half_up(best[k] / body_weight, 2)) if best.get(k) is not None else None
        for k in keys
    }


def latest_row(rows: list[LogRow]) -> LogRow | None:
    """Row with the newest parseable timestamp (last in source order on ties)."""
    df = rows_to_dataframe(rows)
    dated = df.dropna(subset=["date"]).sort_values("date", kind="stable")
    if dated.empty:
        return None
    return rows[dated.index[-1]]


def summarize(rows: list[LogRow]) -> dict:
    best = best_lifts(rows)
    bw = latest_body_weight(rows)
    latest = latest_row(rows)
    return {
        **best,
        "latest_body_weight": bw,
        "ratios": best_ratios(best, bw),
        "latest_row": latest,
        "latest_date": parse_timestamp(latest.timestamp) if latest else None,
        "n_rows": len(rows),
    }


# ═══════════════════════════════════════════════════════════════════════
# 3. FORMATTING
# ═══════════════════════════════════════════════════════════════════════

def format_value(value, unit: str = "", decimals: int = 1) -> str:
    if value is None or not np.isfinite(value):
        return "—"
    text = f"{value:.{decimals}f}"
    return f"{text} {unit}" if unit else text
