"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import html
import re

import pandas as pd
import streamlit as st

from fogbugz_app.core.column_config import get_columns

_TAG_RE = re.compile(r"<[^>]+>")
_BREAK_RE = re.compile(r"<\s*(br|/p|/div|/li)\b[^>]*>", re.IGNORECASE)

# alert_class -> Streamlit-friendly marker shown in the severity column
SEVERITY_MARKERS: dict[str, str] = {
    "danger": "🔴 danger",
    "warning": "🟠 warning",
    "success": "🟢 success",
}


def case_url(server: str, case_id) -> str:
    if case_id is None or str(case_id) in ("", "nan"):
        return ""
    return f"{server.rstrip('/')}/default.asp?{case_id}"


def add_case_link(df: pd.DataFrame, server: str, id_col: str = "case_id", label: str = "Case"):
    if df.empty or id_col not in df.columns:
        return df, {}
    out = df.copy()
    out[label] = out[id_col].apply(lambda k: case_url(server, k))
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"default\.asp\?(\d+)$",
            help="Open in FogBugz",
            width="small",
        )
    }
    return out, cfg


def prepare_alert_table(df: pd.DataFrame, server: str) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}
    table, cfg = add_case_link(df, server)
    if "alert_class" in table.columns:
        table["alert_class"] = table["alert_class"].map(lambda c: SEVERITY_MARKERS.get(c, c))
    display_cols = [col for col in get_columns("alerts") if col in table.columns]
    if not display_cols:
        display_cols = [col for col in table.columns if col != "case_id"]
    cfg["alert_class"] = st.column_config.TextColumn("Severity", width="small")
    cfg["date_opened"] = st.column_config.DatetimeColumn("Opened", format="YYYY-MM-DD HH:mm")
    return table, display_cols, cfg


def render_event_table(df: pd.DataFrame):
    if df.empty:
        st.info("No matching events.")
        return
    cols = [c for c in get_columns("events") if c in df.columns]
    st.dataframe(
        df[cols],
        hide_index=True,
        column_config={"date": st.column_config.DatetimeColumn("Date", format="YYYY-MM-DD HH:mm")},
    )


def summary_text(summary: str | None) -> str:
    """Reduce an event's HTML body to plain text for display.

    Markup in case bodies comes from outside correspondents, so it is never
    rendered as HTML.
    """
    if not summary:
        return ""
    text = _BREAK_RE.sub("\n", summary)
    text = _TAG_RE.sub("", text)
    return html.unescape(text).strip()
