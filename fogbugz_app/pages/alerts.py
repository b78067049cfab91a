"""Active alerts page.

Lists open FogBugz cases flagged for alert display, most recent first, with
a severity breakdown.
"""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from fogbugz_app.app import register_page
from fogbugz_app.core.config import SETTINGS, FogBugzSettings
from fogbugz_app.core.errors import ConfigurationError
from fogbugz_app.core.service import AlertService, open_service
from fogbugz_app.visual.charts import severity_chart
from fogbugz_app.visual.tables import prepare_alert_table

logger = logging.getLogger(__name__)


def alerts_cache_key(link_only: bool) -> str:
    """Session-state slot for fetched alerts; each query variant keeps its own frame."""
    return "alerts_df_link" if link_only else "alerts_df_all"


@register_page("Active Alerts")
def alerts_page():
    st.title("Active Alerts")
    st.caption("Open FogBugz cases flagged for alert display.")
    settings: FogBugzSettings | None = st.session_state.get("fogbugz_settings")
    if settings is None:
        st.warning("FogBugz connection is not configured. Check the FogBugz secrets.")
        return

    link_only = st.toggle("Only alerts linked from the catalogue tab", value=False)
    if st.button("Fetch Alerts", type="primary"):
        with st.spinner("Searching FogBugz for active alerts"):
            try:
                with open_service(settings) as service:
                    st.session_state[alerts_cache_key(link_only)] = service.fetch_alerts(link_only=link_only)
            except ConfigurationError as exc:
                logger.error("FogBugz configuration error: %s", exc)
                st.error(str(exc))
                return

    alerts = st.session_state.get(alerts_cache_key(link_only), pd.DataFrame())
    if alerts.empty:
        st.info("No active alerts.")
        return

    chart = severity_chart(AlertService.severity_counts(alerts))
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    prepared, display_cols, cfg = prepare_alert_table(alerts, settings.server)
    st.markdown("---")
    st.dataframe(prepared[display_cols].head(SETTINGS.max_table_rows), hide_index=True, column_config=cfg)
    csv = prepared[display_cols].to_csv(index=False).encode(SETTINGS.download_encoding)
    st.download_button(
        "Download CSV",
        data=csv,
        file_name="fogbugz_alerts.csv",
        mime="text/csv",
    )
