"""Single case page: header, opening summary and filtered history."""

from __future__ import annotations

import logging

import streamlit as st

from fogbugz_app.app import register_page
from fogbugz_app.core.config import DEFAULT_EVENT_ACTIONS, FogBugzSettings
from fogbugz_app.core.errors import ConfigurationError
from fogbugz_app.core.service import open_service
from fogbugz_app.visual.tables import SEVERITY_MARKERS, case_url, render_event_table, summary_text

logger = logging.getLogger(__name__)


@register_page("Case Lookup")
def case_lookup_page():
    st.title("Case Lookup")
    settings: FogBugzSettings | None = st.session_state.get("fogbugz_settings")
    if settings is None:
        st.warning("FogBugz connection is not configured. Check the FogBugz secrets.")
        return

    case_id = st.number_input("Case number", min_value=1, step=1, value=1)
    actions = st.multiselect(
        "Event actions",
        sorted(DEFAULT_EVENT_ACTIONS | {"Opened", "Assigned", "Forwarded", "Replied"}),
        default=sorted(DEFAULT_EVENT_ACTIONS),
    )
    if not st.button("Look up", type="primary"):
        return

    try:
        with open_service(settings) as service:
            case = service.fetch_case(int(case_id))
            events = service.case_events(case, actions) if case is not None else None
    except ConfigurationError as exc:
        logger.error("FogBugz configuration error: %s", exc)
        st.error(str(exc))
        return

    if case is None:
        st.info(f"Case {int(case_id)} not found.")
        return

    st.subheader(f"[{case.case_id}]({case_url(settings.server, case.case_id)}) {case.title}")
    cols = st.columns(4)
    cols[0].metric("Status", case.status or "-")
    cols[1].metric("Project", case.project or "-")
    cols[2].metric("Priority", case.priority or "-")
    cols[3].metric("Severity", SEVERITY_MARKERS.get(case.alert_class(), case.alert_class()))
    if case.alert_header:
        st.markdown(f"**{case.alert_header}**")
    if any(t.strip() for t in case.tags):
        st.caption("Tags: " + ", ".join(t for t in case.tags if t.strip()))

    summary = case.case_summary()
    if summary:
        st.text(summary_text(summary))

    st.markdown("---")
    render_event_table(events)
