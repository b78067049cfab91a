import pandas as pd

from fogbugz_app.visual.tables import case_url, prepare_alert_table, summary_text


def test_case_url():
    assert case_url("https://support.example.org/", 42) == "https://support.example.org/default.asp?42"
    assert case_url("https://support.example.org", None) == ""


def test_prepare_alert_table_adds_link_and_severity():
    df = pd.DataFrame(
        [
            {"case_id": 1, "title": "Down", "alert_class": "danger", "status": "Active"},
            {"case_id": 2, "title": "Slow", "alert_class": "warning", "status": "Active"},
        ]
    )
    table, cols, cfg = prepare_alert_table(df, "https://support.example.org")
    assert cols[0] == "Case"
    assert "title" in cols and "case_id" not in cols
    assert table.loc[0, "Case"].endswith("default.asp?1")
    assert table.loc[1, "alert_class"].endswith("warning")
    assert "Case" in cfg


def test_prepare_alert_table_empty():
    table, cols, cfg = prepare_alert_table(pd.DataFrame(), "https://x")
    assert table.empty and cols == [] and cfg == {}


def test_summary_text_drops_markup():
    body = '<p>Search fails</p><script>alert("x")</script><img src=x onerror="steal()">Tom &amp; Jerry<br/>done'
    text = summary_text(body)
    assert "<" not in text and ">" not in text
    assert "onerror" not in text
    assert text.startswith("Search fails\n")
    assert text.endswith("Tom & Jerry\ndone")
    assert summary_text(None) == ""
    assert summary_text("") == ""
