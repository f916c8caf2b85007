from __future__ import annotations

import pandas as pd
import plotly.express as px
import streamlit as st

from .models import FAIRLY_VALUED, INSUFFICIENT_DATA, OVERVALUED, UNDERVALUED

VERDICT_LABELS = {
    UNDERVALUED: "Undervalued",
    OVERVALUED: "Overvalued",
    FAIRLY_VALUED: "Fairly valued",
    INSUFFICIENT_DATA: "Insufficient data",
}

VERDICT_COLORS = {
    UNDERVALUED: "#0d9488",
    FAIRLY_VALUED: "#2563eb",
    OVERVALUED: "#dc2626",
}


def _badge(verdict: str) -> str:
    label = VERDICT_LABELS.get(verdict, verdict)
    return f'<span class="badge badge-{verdict}">{label}</span>'


def _fmt_number(value: float | None) -> str:
    if value is None or pd.isna(value):
        return "-"
    return f"{float(value):,.0f}"


def render_hero(title: str, subtitle: str) -> None:
    st.markdown(
        f"""
<div class="hero">
  <h2 style="margin:0">{title}</h2>
  <p style="margin:.3rem 0 0 0">{subtitle}</p>
</div>
""",
        unsafe_allow_html=True,
    )


def render_overall_verdict(result: dict) -> None:
    overall = result.get("overall") or {}
    verdict = overall.get("verdict") or INSUFFICIENT_DATA
    name = result.get("companyName") or result.get("ticker") or "-"
    st.markdown(
        f"""
<div class="verdict-card">
  <div>{name} ({result.get("ticker") or "-"}) · {result.get("sector") or "Unknown"}</div>
  <h3 style="margin:.4rem 0">{_badge(verdict)} {overall.get("confidence", 0)}% confidence</h3>
  <div>{overall.get("reasoning") or ""}</div>
</div>
""",
        unsafe_allow_html=True,
    )


def render_metric_table(metrics: list[dict]) -> None:
    st.subheader("Valuation metrics")
    if not metrics:
        st.info("No valuation metric could be computed from the available data.")
        return

    show = pd.DataFrame(metrics)
    show["verdict"] = show["verdict"].map(VERDICT_LABELS).fillna(show["verdict"])
    show = show.rename(columns={"name": "Metric", "display": "Value", "verdict": "Verdict", "weight": "Weight"})
    st.dataframe(show[["Metric", "Value", "Verdict", "Weight"]], use_container_width=True, hide_index=True)


def render_weight_chart(shares: dict[str, float]) -> None:
    if not shares or sum(shares.values()) <= 0:
        return
    chart_df = pd.DataFrame(
        {
            "verdict": [VERDICT_LABELS[k] for k in shares],
            "share": [v * 100.0 for v in shares.values()],
            "key": list(shares.keys()),
        }
    )
    fig = px.bar(
        chart_df,
        x="share",
        y="verdict",
        orientation="h",
        color="key",
        color_discrete_map=VERDICT_COLORS,
        labels={"share": "Weight share (%)", "verdict": ""},
    )
    fig.add_vline(x=50.0, line_dash="dash", line_color="#64748b")
    fig.update_layout(margin=dict(t=10, l=0, r=0, b=0), height=240, showlegend=False, xaxis_range=[0, 100])
    st.plotly_chart(fig, use_container_width=True)


def render_raw_data(result: dict) -> None:
    raw = result.get("rawData") or {}
    if not raw:
        return
    currency = result.get("currency") or "N/A"
    parts = [
        f"Market cap: {_fmt_number(raw.get('marketCap'))}",
        f"EV: {_fmt_number(raw.get('enterpriseValue'))}",
        f"EBITDA: {_fmt_number(raw.get('ebitda'))}",
        f"Net income: {_fmt_number(raw.get('netIncome'))}",
        f"Revenue: {_fmt_number(raw.get('revenue'))}",
        f"Operating cash flow: {_fmt_number(raw.get('operatingCashFlow'))}",
        f"Total assets: {_fmt_number(raw.get('totalAssets'))}",
        f"Total liabilities: {_fmt_number(raw.get('totalLiabilities'))}",
    ]
    st.caption(f"Latest annual figures ({currency}) | " + " | ".join(parts))


def render_valuation_result(result: dict | None) -> None:
    if result is None:
        st.info("Enter a ticker or company name in the sidebar to value it.")
        return

    if result.get("error") and not result.get("metrics"):
        st.error(result["error"])
        render_raw_data(result)
        return

    render_overall_verdict(result)
    left, right = st.columns([3, 2])
    with left:
        render_metric_table(result.get("metrics") or [])
    with right:
        st.subheader("Weight by verdict")
        render_weight_chart(result.get("weightShares") or {})
    render_raw_data(result)


def render_watchlist_table(df: pd.DataFrame) -> None:
    st.subheader("Watchlist")
    if df is None or df.empty:
        st.info("No cached watchlist results yet. Refresh to value the list.")
        return

    show = df.copy()
    show["verdict"] = show["verdict"].map(VERDICT_LABELS).fillna(show["verdict"])
    c1, c2, c3 = st.columns(3)
    c1.metric("Undervalued", int((df["verdict"] == UNDERVALUED).sum()))
    c2.metric("Overvalued", int((df["verdict"] == OVERVALUED).sum()))
    c3.metric("Failed lookups", int((df["error"] != "").sum()))
    st.dataframe(show, use_container_width=True, hide_index=True)
    st.download_button(
        "Download CSV",
        data=show.to_csv(index=False).encode("utf-8-sig"),
        file_name="valuation_watchlist.csv",
        mime="text/csv",
    )
