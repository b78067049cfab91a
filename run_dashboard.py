"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``fogbugz_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
import os
from importlib import import_module
from pathlib import Path

import streamlit as st

from fogbugz_app.app import main
from fogbugz_app.core.config import FogBugzSettings
from fogbugz_app.core.errors import ConfigurationError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(layout="wide")


def _auto_init_settings():
    """Load FogBugz settings from Streamlit secrets / environment if available."""
    if "fogbugz_settings" in st.session_state:
        return
    try:
        secrets = dict(st.secrets)
    except Exception as e:  # pragma: no cover - no secrets.toml present
        logger.info("No Streamlit secrets available (%s); using environment", e)
        secrets = {}
    try:
        settings = FogBugzSettings.from_sources(secrets, os.environ)
    except ConfigurationError as e:
        st.sidebar.warning(f"FogBugz settings not found: {e}")
        return
    st.session_state["fogbugz_settings"] = settings
    st.sidebar.info(f"FogBugz: {settings.server}")


_auto_init_settings()

PAGES_DIR = Path(__file__).parent / "fogbugz_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"fogbugz_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
