"""Dashboard shell: pages register themselves here and the sidebar routes to them."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import streamlit as st

from fogbugz_app.core.config import PAGE_ORDER

PAGES: dict[str, Callable[[], None]] = {}


def register_page(label: str):
    """Decorator adding a page function to the sidebar under ``label``."""

    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def ordered_pages(labels: Iterable[str], order: Iterable[str] = PAGE_ORDER) -> list[str]:
    """Known pages in ``order`` first, anything else alphabetically after."""
    labels = set(labels)
    known = [name for name in order if name in labels]
    return known + sorted(labels.difference(known))


def main():
    st.sidebar.title("FogBugz Alerts")
    pages = ordered_pages(PAGES)
    if not pages:
        st.write("No pages registered yet.")
        return
    if "fogbugz_settings" not in st.session_state:
        st.sidebar.caption("FogBugz is not configured; pages will show setup hints.")
    page = st.sidebar.selectbox("Page", pages, index=0)
    PAGES[page]()


if __name__ == "__main__":
    main()
