"""AlertService: turns FogBugz search results into display-ready frames."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import pandas as pd
import pytz
import requests

from .config import TIMEZONE, FogBugzSettings
from .fogbugz_client import FogBugzAPI
from .mappers import cases_to_dataframe, events_to_dataframe
from .models import CaseModel

logger = logging.getLogger(__name__)


class AlertService:
    def __init__(self, api: FogBugzAPI):
        self.api = api
        self._tz = pytz.timezone(TIMEZONE)

    def _localize(self, df: pd.DataFrame, columns: tuple[str, ...]) -> pd.DataFrame:
        for col in columns:
            if col in df.columns and isinstance(df[col].dtype, pd.DatetimeTZDtype):
                df[col] = df[col].dt.tz_convert(self._tz)
        return df

    def fetch_alerts(self, *, link_only: bool = False) -> pd.DataFrame:
        alerts = self.api.get_active_alerts(link_only=link_only)
        logger.info("Fetched %s active alert(s) (link_only=%s)", len(alerts), link_only)
        return self._localize(cases_to_dataframe(alerts), ("date_opened", "date_closed"))

    def fetch_case(self, case_id: int) -> CaseModel | None:
        return self.api.get_case(case_id)

    def case_events(self, case: CaseModel, actions: list[str] | None = None) -> pd.DataFrame:
        return self._localize(events_to_dataframe(case.filtered_events(actions)), ("date",))

    @staticmethod
    def severity_counts(alerts: pd.DataFrame) -> pd.DataFrame:
        if alerts.empty or "alert_class" not in alerts.columns:
            return pd.DataFrame(columns=["alert_class", "count"])
        return alerts.groupby("alert_class").size().reset_index(name="count")


@contextmanager
def open_service(settings: FogBugzSettings, *, session: requests.Session | None = None) -> Iterator[AlertService]:
    """Log on for the duration of a block; the token is released on exit.

    Raises ConfigurationError when the settings or credentials are unusable.
    """
    api = FogBugzAPI(settings.server, settings.credentials, session=session, email_from=settings.email_from)
    try:
        yield AlertService(api)
    finally:
        api.close()
