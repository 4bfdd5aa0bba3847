"""
BIG3 Tracker — Timestamp normalization

The sheet's date column is filled both by hand ("2024/06/01 21:30") and by
scripts (Unix seconds or milliseconds), so there is no single format to expect.
Everything is normalized to tz-aware UTC pandas Timestamps.
"""
import pandas as pd

from big3.config import EPOCH_MIN, EPOCH_MAX, EPOCH_MS_THRESHOLD

# pandas resolves these to the current time; a log cell never means "whenever it is read"
RELATIVE_WORDS = ("now", "today")


def epoch_millis(value) -> float | None:
    """Milliseconds since epoch if value looks like a Unix epoch (s or ms), else None."""
    if isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if not EPOCH_MIN <= num < EPOCH_MAX:
        return None
    return num * 1000 if num < EPOCH_MS_THRESHOLD else num


def _to_utc(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")


def _parse_generic(text: str) -> pd.Timestamp | None:
    if text.lower() in RELATIVE_WORDS:
        return None
    try:
        ts = pd.Timestamp(text)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return _to_utc(ts)


def from_epoch_millis(ms: float) -> pd.Timestamp | None:
    try:
        return pd.Timestamp(ms, unit="ms", tz="UTC")
    except (ValueError, OverflowError):
        # Past the datetime64[ns] range (year 2262)
        return None


def parse_timestamp(raw) -> pd.Timestamp | None:
    """
    Parse a sheet timestamp string into a UTC Timestamp.

    Tried in order, first match wins:
    1. empty / non-string → None
    2. numeric epoch in [1e9, 1e15): seconds below 1e12, milliseconds above
    3. generic parse (ISO-8601 and whatever dateutil understands)
    4. generic parse again with "/" replaced by "-" ("2024/06/01 10:00")

    Naive results are taken as UTC. Returns None if nothing matches.
    """
    if not isinstance(raw, str):
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None

    ms = epoch_millis(trimmed)
    if ms is not None:
        return from_epoch_millis(ms)

    ts = _parse_generic(trimmed)
    if ts is not None:
        return ts
    return _parse_generic(trimmed.replace("/", "-"))


def to_iso(ts: pd.Timestamp) -> str:
    """UTC ISO-8601 at millisecond precision, e.g. 2024-06-01T00:00:00.000Z."""
    return _to_utc(ts).tz_localize(None).isoformat(timespec="milliseconds") + "Z"
