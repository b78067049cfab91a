from contextlib import contextmanager, nullcontext

import pandas as pd

from fogbugz_app.core.config import FogBugzSettings
from fogbugz_app.pages import alerts as alerts_page

SETTINGS = FogBugzSettings(server="https://support.example.org", username="u", password="p")


class FakeStreamlit:
    """Records widget calls; toggle/button answers are set per run."""

    def __init__(self, session_state):
        self.session_state = session_state
        self.link_only = False
        self.pressed = False
        self.calls = []

    def toggle(self, *args, **kwargs):
        return self.link_only

    def button(self, *args, **kwargs):
        return self.pressed

    def spinner(self, *args, **kwargs):
        return nullcontext()

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args))

        return record

    def called(self, name):
        return [args for called, args in self.calls if called == name]


def _run(monkeypatch, fake_st, fetched):
    class Service:
        def fetch_alerts(self, *, link_only=False):
            fetched.append(link_only)
            return pd.DataFrame([{"case_id": 1, "title": "Down", "alert_class": "danger"}])

    @contextmanager
    def fake_open(settings):
        yield Service()

    monkeypatch.setattr(alerts_page, "st", fake_st)
    monkeypatch.setattr(alerts_page, "open_service", fake_open)
    fake_st.calls.clear()
    alerts_page.alerts_page()


def test_cache_keys_differ_per_query():
    assert alerts_page.alerts_cache_key(True) != alerts_page.alerts_cache_key(False)


def test_toggling_link_only_does_not_show_other_query_results(monkeypatch):
    state = {"fogbugz_settings": SETTINGS}
    fake_st = FakeStreamlit(state)
    fetched = []

    fake_st.pressed = True
    _run(monkeypatch, fake_st, fetched)
    assert fetched == [False]
    assert fake_st.called("dataframe")

    fake_st.pressed = False
    fake_st.link_only = True
    _run(monkeypatch, fake_st, fetched)
    assert fetched == [False]
    assert not fake_st.called("dataframe")
    assert fake_st.called("info") == [("No active alerts.",)]

    fake_st.link_only = False
    _run(monkeypatch, fake_st, fetched)
    assert fake_st.called("dataframe")
