"""Central configuration, wire constants, and connection settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# =============================================================================
# FogBugz Connection Settings
# =============================================================================
TIMEZONE = "America/Halifax"
API_PATH = "api.asp"

# Commands the adapter is allowed to send. Anything else is rejected before
# a request is made.
COMMANDS: frozenset[str] = frozenset({"logon", "logoff", "forward", "new", "search"})

# =============================================================================
# Custom Fields
# Plugin-qualified column names, keyed by the short name used in CaseModel.
# =============================================================================
CUSTOM_FIELD_IDS: dict[str, str] = {
    "nature": "plugin_customfields_at_fogcreek_com_natureg119",
    "alert_status": "plugin_customfields_at_fogcreek_com_alertxstatusw51d",
    "alert_header": "plugin_customfields_at_fogcreek_com_alertxheaderv51b",
}

# Columns requested by a search when the caller does not pass any. Must cover
# every CaseModel field.
DEFAULT_SEARCH_COLUMNS = ",".join(
    [
        "sTitle",
        "fOpen",
        "dtOpened",
        "dtClosed",
        "sStatus",
        "ixProject",
        "sProject",
        "ixCategory",
        "sCategory",
        "ixPriority",
        "sPriority",
        "ixMailbox",
        "sCustomerEmail",
        "events",
        "tags",
        *CUSTOM_FIELD_IDS.values(),
    ]
)

# =============================================================================
# Alerts
# =============================================================================
ALERT_QUERY = 'alertxdisplay:"yes" -status:"closed"'
ALERT_LINK_QUERY = 'alertxdisplay:"Yes and include link in catalogue tab" -status:"closed"'

# alert_status custom field value -> CSS-style severity label
ALERT_CLASSES: dict[str, str] = {
    "Warning": "warning",
    "Fail": "danger",
}
DEFAULT_ALERT_CLASS = "success"

# Display order for severity charts
ALERT_CLASS_ORDER: tuple[str, ...] = ("danger", "warning", "success")

# =============================================================================
# Events
# =============================================================================
DEFAULT_EVENT_ACTIONS: frozenset[str] = frozenset({"Edited", "Resolved", "Reactivated", "Closed", "Reopened"})
OPENED_ACTION = "Opened"
# Audit-log noise hidden from filtered event lists
CORRESPONDENT_CHANGE_PATTERN = r"Correspondent changed from"

# =============================================================================
# Dashboard
# =============================================================================
# Sidebar order; unlisted pages follow alphabetically
PAGE_ORDER: tuple[str, ...] = ("Active Alerts", "Case Lookup")

# =============================================================================
# Table columns
# =============================================================================
ALERT_TABLE_COLUMNS: tuple[str, ...] = (
    "Case",
    "alert_class",
    "alert_header",
    "title",
    "status",
    "date_opened",
    "project",
    "category",
    "priority",
)

EVENT_TABLE_COLUMNS: tuple[str, ...] = (
    "date",
    "action",
    "changes",
)


# =============================================================================
# Credentials / settings
# =============================================================================
@dataclass(frozen=True, slots=True)
class Credentials:
    username: str
    password: str


CredentialSource = Callable[[], Credentials | None]

SETTING_KEYS: dict[str, str] = {
    "server": "FOGBUGZ_URL",
    "email_from": "FOGBUGZ_EMAIL_FROM",
    "username": "FOGBUGZ_USERNAME",
    "password": "FOGBUGZ_PASSWORD",
}


@dataclass(frozen=True, slots=True)
class FogBugzSettings:
    """Host-supplied settings: installation URL, sender email and credentials.

    Load from Streamlit secrets (a ``[fogbugz]`` section or top-level keys)
    with environment variables as fallback:

        settings = FogBugzSettings.from_sources(st.secrets, os.environ)
    """

    server: str = ""
    email_from: str = ""
    username: str = ""
    password: str = ""

    @classmethod
    def from_sources(
        cls,
        secrets: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> FogBugzSettings:
        secrets = secrets or {}
        environ = os.environ if environ is None else environ
        section = secrets.get("fogbugz", {}) or {}

        values: dict[str, str] = {}
        for attr, key in SETTING_KEYS.items():
            value = section.get(key) or secrets.get(key) or environ.get(key) or ""
            values[attr] = str(value).strip()

        if not values["server"]:
            raise ConfigurationError(
                "FogBugz installation URL is not configured - set FOGBUGZ_URL in secrets or the environment."
            )
        return cls(**values)

    def credentials(self) -> Credentials | None:
        """Credential source for FogBugzAPI; None when either half is missing."""
        if not (self.username and self.password):
            logger.warning("FogBugz credentials are incomplete")
            return None
        return Credentials(self.username, self.password)


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()
