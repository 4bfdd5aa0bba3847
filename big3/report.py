"""
BIG3 Tracker — Terminal Report
Run manually: python -m big3.report [--ratio] [--sheet SHEET_ID]
"""
import sys
from datetime import datetime

from big3.analytics import summarize, build_series, format_value
from big3.config import SPREADSHEET_ID, FIELD_CONFIG, UNIT_KG, UNIT_RATIO
from big3.sheet_client import fetch_log_rows, SheetError


def run_report(sheet_id: str = SPREADSHEET_ID, ratio: bool = False) -> dict:
    """
    1. Fetch the log sheet
    2. Summarize personal bests
    3. Print bests (kg or ×BW) and the latest series point
    """
    print("🏋️ BIG3 Report — Starting...")
    print(f"   {datetime.now().isoformat()}")

    print("\n📥 Fetching log from Google Sheets...")
    rows = fetch_log_rows(sheet_id)
    print(f"   Found {len(rows)} rows")

    if not rows:
        print("   Nothing logged yet. Done.")
        return {"rows": 0}

    summary = summarize(rows)
    latest_date = summary["latest_date"]
    as_of = latest_date.strftime("%Y-%m-%d") if latest_date is not None else "—"

    print(f"\n{'='*50}")
    print(f"🏆 Personal bests (as of {as_of}):")
    for key in ("bp", "sq", "dl", "total"):
        label = FIELD_CONFIG[key]["label"]
        if ratio:
            value = format_value(summary["ratios"][key], UNIT_RATIO, decimals=2)
        else:
            value = format_value(summary[key], UNIT_KG)
        print(f"   {label}: {value}")
    print(f"   Body weight: {format_value(summary['latest_body_weight'], UNIT_KG)}")

    # Undated rows sort to the end of the series; they are never "latest"
    series = build_series(rows)
    dated = series.dropna(subset=["date"])
    if not dated.empty:
        last = dated.iloc[-1]
        print(f"\n📈 Latest point ({last['date'].strftime('%Y-%m-%d')}):")
        for key in ("bp", "sq", "dl", "total"):
            print(f"   {FIELD_CONFIG[key]['label']}: {format_value(last[key], UNIT_KG)}")

    return {"rows": len(rows), "summary": summary}


if __name__ == "__main__":
    args = sys.argv[1:]
    sheet = SPREADSHEET_ID
    if "--sheet" in args:
        idx = args.index("--sheet")
        if idx + 1 >= len(args):
            print("❌ --sheet needs a spreadsheet ID")
            sys.exit(2)
        sheet = args[idx + 1]

    try:
        run_report(sheet_id=sheet, ratio="--ratio" in args)
    except SheetError as e:
        print(f"\n❌ Report FAILED: {e}")
        sys.exit(1)
