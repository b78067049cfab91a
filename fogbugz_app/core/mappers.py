"""Mapping FogBugz XML ``<case>`` fragments into CaseModel instances."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from datetime import datetime

import pandas as pd

from .config import CUSTOM_FIELD_IDS
from .errors import CaseDecodeError
from .models import CaseModel, EventModel

logger = logging.getLogger(__name__)

# Optional groups: id element -> (id attribute, name element, name attribute)
OPTIONAL_GROUPS: dict[str, tuple[str, str | None, str | None]] = {
    "ixCategory": ("category_id", "sCategory", "category"),
    "ixProject": ("project_id", "sProject", "project"),
    "ixPriority": ("priority_id", "sPriority", "priority"),
    "ixMailbox": ("mailbox_id", None, None),
}


def parse_dt(val: str | None) -> datetime | None:
    val = (val or "").strip()
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _text(element: ET.Element, tag: str) -> str:
    return element.findtext(tag) or ""


def _positive_int(text: str | None) -> int | None:
    if not text:
        return None
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def _children(element: ET.Element, tag: str) -> list[ET.Element]:
    container = element.find(tag)
    return list(container) if container is not None else []


def _decode_event(element: ET.Element) -> EventModel:
    return EventModel(
        date=parse_dt(_text(element, "dt")),
        action=_text(element, "sVerb"),
        summary=element.findtext("sHtml") or "",
        changes=element.findtext("sChanges") or "",
    )


def decode_case(element: ET.Element) -> CaseModel:
    """Decode one ``<case>`` element in a single validated pass.

    Raises
    ------
    CaseDecodeError
        If the case number (``ixBug`` attribute or element) or the opened
        date is missing or unusable.
    """
    case_id = _positive_int(element.get("ixBug") or element.findtext("ixBug"))
    if case_id is None:
        raise CaseDecodeError("case fragment has no ixBug", field="ixBug")

    opened_raw = _text(element, "dtOpened")
    date_opened = parse_dt(opened_raw)
    if date_opened is None:
        raise CaseDecodeError(f"case {case_id} has no usable dtOpened ({opened_raw!r})", field="dtOpened")

    optional: dict[str, object] = {}
    for id_tag, (id_attr, name_tag, name_attr) in OPTIONAL_GROUPS.items():
        group_id = _positive_int(element.findtext(id_tag))
        if group_id is None:
            continue
        optional[id_attr] = group_id
        if name_tag and name_attr:
            optional[name_attr] = _text(element, name_tag)

    custom = {name: _text(element, column) for name, column in CUSTOM_FIELD_IDS.items()}

    return CaseModel(
        case_id=case_id,
        title=_text(element, "sTitle"),
        is_open=_text(element, "fOpen") == "true",
        customer_email=_text(element, "sCustomerEmail"),
        date_opened=date_opened,
        status=_text(element, "sStatus"),
        date_closed=parse_dt(_text(element, "dtClosed")),
        events=tuple(_decode_event(e) for e in _children(element, "events")),
        tags=tuple(t.text or "" for t in _children(element, "tags")),
        custom_fields=custom,
        **optional,
    )


def case_from_xml(element: ET.Element | None) -> CaseModel | None:
    """Build a CaseModel from a fragment; None for empty or invalid fragments."""
    if element is None or len(element) == 0:
        return None
    try:
        return decode_case(element)
    except CaseDecodeError as exc:
        logger.debug("Discarding case fragment: %s", exc)
        return None


def cases_to_dataframe(cases: Iterable[CaseModel]) -> pd.DataFrame:
    rows = []
    for c in cases:
        rows.append(
            {
                "case_id": c.case_id,
                "title": c.title,
                "status": c.status,
                "is_open": c.is_open,
                "date_opened": c.date_opened,
                "date_closed": c.date_closed,
                "project": c.project or "",
                "category": c.category or "",
                "priority": c.priority or "",
                "customer_email": c.customer_email,
                "tags": ", ".join(t for t in c.tags if t.strip()),
                "alert_status": c.alert_status or "",
                "alert_header": c.alert_header,
                "alert_class": c.alert_class(),
                "nature": c.nature,
            }
        )
    df = pd.DataFrame(rows)
    for col in ("date_opened", "date_closed"):
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    return df


def events_to_dataframe(events: Iterable[EventModel]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"date": e.date, "action": e.action, "summary": e.summary, "changes": e.changes} for e in events],
        columns=["date", "action", "summary", "changes"],
    )
    df["date"] = pd.to_datetime(df["date"], utc=True, errors="coerce")
    return df
