"""
BIG3 Tracker — Google Sheets (gviz) Client

Fetches the training log through the public gviz query endpoint and decodes
each row (A: date, B: BP, C: SQ, D: DL, E: body weight) into a LogRow.
The first table row is the header and is always skipped.
"""
import json
from dataclasses import dataclass

import numpy as np
import requests

from big3.config import (
    SPREADSHEET_ID,
    GVIZ_URL,
    GVIZ_PREFIX_LEN,
    GVIZ_SUFFIX_LEN,
    REQUEST_TIMEOUT,
)
from big3.timestamps import epoch_millis, from_epoch_millis, to_iso


class SheetError(Exception):
    """Base class for failures that abort a fetch."""


class SourceUnavailable(SheetError):
    """Transport failure, non-success HTTP status or a gviz error response."""


class MalformedPayload(SheetError, ValueError):
    """Response body is not the expected wrapped gviz JSON."""


@dataclass(frozen=True)
class LogRow:
    """One decoded sheet row. None means the cell was empty, not zero."""

    timestamp: str
    bp: float | None = None
    sq: float | None = None
    dl: float | None = None
    body_weight: float | None = None


# ═════════════════════════════════════════════════════════════════════
# CELL DECODING
# ═════════════════════════════════════════════════════════════════════

def _display(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def cell_number(cell: dict | None) -> float | None:
    """Numeric cell value, or None when empty / not a finite number."""
    if not isinstance(cell, dict):
        return None
    v = cell.get("v")
    if v is None or v == "":
        return None
    try:
        num = float(v)
    except (TypeError, ValueError):
        return None
    return num if np.isfinite(num) else None


def cell_timestamp(cell: dict | None) -> str:
    """
    Date cell as a string.

    Epoch numbers (seconds or milliseconds) become ISO-8601 at millisecond
    precision. Anything else ("2024/06/01", gviz "Date(2024,5,1)" with a
    formatted "f") is kept as the display string for parse_timestamp later.
    """
    if not isinstance(cell, dict):
        return ""
    raw = cell.get("v") if cell.get("v") is not None else cell.get("f")
    if raw is None or raw == "":
        return ""
    ms = epoch_millis(raw)
    if ms is not None:
        ts = from_epoch_millis(ms)
        if ts is not None:
            return to_iso(ts)
    shown = cell.get("f") if cell.get("f") is not None else cell.get("v")
    return _display(shown)


def decode_row(cells: list) -> LogRow:
    """Build a LogRow from up to 5 gviz cells; short rows leave trailing fields empty."""
    cells = list(cells or [])
    cells += [None] * (5 - len(cells))
    return LogRow(
        timestamp=cell_timestamp(cells[0]),
        bp=cell_number(cells[1]),
        sq=cell_number(cells[2]),
        dl=cell_number(cells[3]),
        body_weight=cell_number(cells[4]),
    )


def decode_table(payload: dict) -> list[LogRow]:
    """Decode every data row of a gviz response, skipping the header row."""
    table = payload.get("table")
    if not isinstance(table, dict):
        return []
    rows = table.get("rows") or []
    decoded = []
    for row in rows[1:]:
        cells = row.get("c") if isinstance(row, dict) else None
        decoded.append(decode_row(cells or []))
    return decoded


# ═════════════════════════════════════════════════════════════════════
# FETCH
# ═════════════════════════════════════════════════════════════════════

def unwrap_payload(text: str) -> dict:
    """Strip the gviz JS wrapper and parse the JSON inside."""
    if not isinstance(text, str) or len(text) < GVIZ_PREFIX_LEN + GVIZ_SUFFIX_LEN:
        raise MalformedPayload("Response too short to be a gviz payload")
    body = text[GVIZ_PREFIX_LEN:len(text) - GVIZ_SUFFIX_LEN]
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedPayload(f"Invalid gviz JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedPayload("gviz payload is not a JSON object")

    if payload.get("status") == "error":
        errors = payload.get("errors") or [{}]
        first = errors[0] if isinstance(errors[0], dict) else {}
        detail = first.get("detailed_message") or first.get("message") or "unknown error"
        raise SourceUnavailable(f"gviz error: {detail}")
    return payload


def fetch_log_rows(
    sheet_id: str = SPREADSHEET_ID,
    session: requests.Session | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> list[LogRow]:
    """
    Fetch and decode the whole log in one request.

    Raises SourceUnavailable on network / HTTP failures and MalformedPayload
    when the body can't be parsed. No retries: the caller decides.
    """
    http = session or requests
    url = GVIZ_URL.format(sheet_id=sheet_id)
    try:
        r = http.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise SourceUnavailable(str(e)) from e
    if not r.ok:
        raise SourceUnavailable(f"HTTP {r.status_code}: {r.reason}")
    return decode_table(unwrap_payload(r.text))


class LogLoader:
    """
    Holds the rows of the latest completed fetch for one view.

    Every load gets a ticket; results arriving with a ticket that is no longer
    current (superseded by a newer load, or cancelled on teardown) are dropped.
    Rows are replaced all at once, never partially.
    """

    def __init__(
        self,
        sheet_id: str = SPREADSHEET_ID,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.sheet_id = sheet_id
        self.session = session
        self.timeout = timeout
        self.rows: list[LogRow] = []
        self.error: str | None = None
        self.loading = False
        self._ticket = 0

    def start(self) -> int:
        self._ticket += 1
        self.loading = True
        self.error = None
        return self._ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._ticket

    def resolve(self, ticket: int, rows: list[LogRow]) -> bool:
        if not self.is_current(ticket):
            return False
        self.rows = list(rows)
        self.loading = False
        return True

    def fail(self, ticket: int, error: Exception) -> bool:
        if not self.is_current(ticket):
            return False
        self.error = str(error)
        self.loading = False
        return True

    def cancel(self):
        """Invalidate any pending load (view torn down)."""
        self._ticket += 1
        self.loading = False

    def load(self) -> bool:
        """Fetch once. Returns True if the result (rows or error) was applied."""
        ticket = self.start()
        try:
            rows = fetch_log_rows(self.sheet_id, session=self.session, timeout=self.timeout)
        except SheetError as e:
            return self.fail(ticket, e)
        return self.resolve(ticket, rows)
