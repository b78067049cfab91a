from fogbugz_app import app


def test_ordered_pages_known_first_then_alphabetical():
    labels = ["Debug", "Case Lookup", "Archive", "Active Alerts"]
    assert app.ordered_pages(labels) == ["Active Alerts", "Case Lookup", "Archive", "Debug"]


def test_ordered_pages_skips_unregistered_names():
    assert app.ordered_pages(["Case Lookup"]) == ["Case Lookup"]
    assert app.ordered_pages([]) == []


def test_register_page_adds_to_registry(monkeypatch):
    monkeypatch.setattr(app, "PAGES", {})

    @app.register_page("Scratch")
    def scratch():
        return None

    assert app.PAGES == {"Scratch": scratch}
    assert app.ordered_pages(app.PAGES, order=("Scratch",)) == ["Scratch"]
