"""
🏋️ BIG3 Tracker — Streamlit Dashboard
Run: streamlit run app.py
"""
import streamlit as st
import plotly.graph_objects as go

from big3.sheet_client import LogLoader
from big3.analytics import (
    build_series, display_column, series_domain, summarize, format_value,
    rows_to_dataframe,
)
from big3.config import (
    SPREADSHEET_ID, FIELD_CONFIG, RATIO_FIELDS, Y_TICK_COUNT, UNIT_KG, UNIT_RATIO,
)

# ── Page Config ──────────────────────────────────────────────────────
st.set_page_config(page_title="BIG3 Tracker", page_icon="🏋️", layout="centered")

PL = dict(
    template="plotly_white", paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=8, r=8, t=8, b=8), height=220, showlegend=False,
)

# ── Data Loading ─────────────────────────────────────────────────────
# One loader per browser session; a new load replaces the previous rows wholesale.
if "loader" not in st.session_state:
    st.session_state.loader = LogLoader(SPREADSHEET_ID)
    with st.spinner("Loading…"):
        st.session_state.loader.load()
loader = st.session_state.loader

with st.sidebar:
    st.markdown("# 🏋️ BIG3 Tracker")
    if st.button("🔄 Reload", use_container_width=True):
        loader.load()
        st.rerun()
    mode = st.radio("Chart values", ["Weight (kg)", "Body-weight ratio"])

if loader.error:
    st.error(f"Error loading data: {loader.error}")
    st.stop()

rows = loader.rows
ratio_mode = mode == "Body-weight ratio"
summary = summarize(rows)

st.markdown("## Training log (BIG3)")

# ── Personal bests ───────────────────────────────────────────────────
if summary["latest_row"] is not None:
    latest_date = summary["latest_date"]
    st.markdown(f"### 🏆 Personal bests ({latest_date.strftime('%Y-%m-%d')})")
    cols = st.columns(4)
    for col, key in zip(cols, ("bp", "sq", "dl", "total")):
        if ratio_mode:
            value = format_value(summary["ratios"][key], UNIT_RATIO, decimals=2)
        else:
            value = format_value(summary[key], UNIT_KG)
        col.metric(FIELD_CONFIG[key]["label"], value)

# ── Charts ───────────────────────────────────────────────────────────
for field in ("total", "bp", "sq", "dl", "body_weight"):
    use_ratio = ratio_mode and field in RATIO_FIELDS
    series = build_series(rows, field, use_ratio)
    y_col = display_column(field, use_ratio)
    title = FIELD_CONFIG[field]["label"]
    unit = UNIT_RATIO if use_ratio else UNIT_KG
    st.markdown(f"#### {title} ({unit})")

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=series["date"], y=series[y_col], mode="lines", name=title,
        line=dict(color=FIELD_CONFIG[field]["color"], width=2), connectgaps=True,
    ))
    fig.update_layout(**PL)
    fig.update_yaxes(
        range=list(series_domain(series, field, use_ratio)), nticks=Y_TICK_COUNT,
        tickformat=".2f" if use_ratio else ".1f",
    )
    fig.update_xaxes(tickformat="%Y/%m/%d")
    st.plotly_chart(fig, use_container_width=True, key=f"chart_{field}")

    undated = series["date"].isna().sum()
    if undated:
        st.caption(f"{undated} row(s) without a readable date are not plotted")

with st.expander("Raw rows"):
    st.dataframe(rows_to_dataframe(rows), hide_index=True, use_container_width=True)
