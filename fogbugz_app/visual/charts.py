"""Chart builders (Altair) for alert severity."""

from __future__ import annotations

import altair as alt
import pandas as pd

from fogbugz_app.core.config import ALERT_CLASS_ORDER

SEVERITY_COLORS: dict[str, str] = {
    "danger": "#d62728",
    "warning": "#ff7f0e",
    "success": "#2ca02c",
}


def severity_chart(counts: pd.DataFrame):
    if counts.empty:
        return None
    chart_df = pd.DataFrame({"alert_class": list(ALERT_CLASS_ORDER)}).merge(counts, on="alert_class", how="left")
    chart_df["count"] = chart_df["count"].fillna(0).astype(int)
    return (
        alt.Chart(chart_df)
        .mark_bar()
        .encode(
            x=alt.X("alert_class:N", title="Severity", sort=list(ALERT_CLASS_ORDER)),
            y=alt.Y("count:Q", title="Active Alerts"),
            color=alt.Color(
                "alert_class:N",
                scale=alt.Scale(
                    domain=list(ALERT_CLASS_ORDER),
                    range=[SEVERITY_COLORS[c] for c in ALERT_CLASS_ORDER],
                ),
                legend=None,
            ),
            tooltip=[
                alt.Tooltip("alert_class:N", title="Severity"),
                alt.Tooltip("count:Q", title="Alerts"),
            ],
        )
        .properties(height=220)
    )
