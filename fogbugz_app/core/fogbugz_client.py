"""FogBugz XML API client wrapper (session token lifecycle + command transport)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import (
    ALERT_LINK_QUERY,
    ALERT_QUERY,
    API_PATH,
    COMMANDS,
    DEFAULT_SEARCH_COLUMNS,
    CredentialSource,
)
from .errors import ConfigurationError, ParseFailure, TransportFailure
from .mappers import case_from_xml
from .models import CaseModel
from .params import FormPart, close_parts, form_value, map_params

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    """Outcome of a search: ``ok`` is False when the request itself failed."""

    cases: list[CaseModel] = field(default_factory=list)
    ok: bool = True
    error: str | None = None


class FogBugzAPI:
    """Authenticated session against one FogBugz installation.

    Logs on as soon as it is constructed and holds the session token until
    ``close()``. Use it as a context manager so the token is released on
    every exit path::

        with FogBugzAPI(settings.server, settings.credentials) as api:
            alerts = api.get_active_alerts()
    """

    def __init__(
        self,
        server: str,
        credentials: CredentialSource,
        *,
        session: requests.Session | None = None,
        log: logging.Logger | None = None,
        email_from: str = "",
    ):
        self.log = log or logger
        self.server = (server or "").strip().rstrip("/")
        if not self.server:
            raise ConfigurationError(
                "Could not retrieve FogBugz settings - the installation URL is not configured."
            )
        self.url = f"{self.server}/{API_PATH}"
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.email_from = email_from
        self.token: str | None = None

        try:
            creds = credentials()
        except Exception as exc:
            self.log.warning("Failed to read FogBugz credentials: %s", exc)
            creds = None
        if creds is None or not creds.username:
            self._release_session()
            raise ConfigurationError("Could not find FogBugz authentication info - configure the FogBugz credentials.")

        self.token = self._logon(creds.username, creds.password)
        if not self.token:
            self._release_session()
            raise ConfigurationError("Could not obtain FogBugz token - check the FogBugz settings and credentials.")
        self.log.info("Created FogBugz token %s...", self.token[:4])

    def __enter__(self) -> FogBugzAPI:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------ Session ------------------
    def _logon(self, email: str, password: str) -> str | None:
        xml = self.send_request("logon", {"email": email, "password": password})
        if xml is None:
            self.log.warning("Unable to fetch FogBugz token")
            return None
        token = (xml.findtext("token") or "").strip()
        return token or None

    def close(self) -> None:
        """Log off, forget the token and release an owned session. Safe to call more than once."""
        if self.token is None:
            self._release_session()
            return
        try:
            self.send_request("logoff", {})
        finally:
            self.log.info("Invalidated FogBugz token %s...", self.token[:4])
            self.token = None
            self._release_session()

    def _release_session(self) -> None:
        # Injected sessions belong to the caller
        if self._owns_session:
            self.session.close()
            self._owns_session = False

    @property
    def is_connected(self) -> bool:
        return self.token is not None

    # ------------------ Commands ------------------
    def create_case(self, params: Mapping[str, Any]) -> CaseModel | None:
        """Create a case; returns the new CaseModel or None on failure."""
        xml = self.send_request("new", params)
        if xml is None:
            return None
        case = case_from_xml(xml.find("case"))
        if case is None:
            self.log.warning("FogBugz 'new' reply did not contain a usable case")
        return case

    def add_forward_event(self, params: Mapping[str, Any]) -> bool:
        """Add a forwarded-message event to an existing case."""
        params = dict(params)
        if self.email_from and "from" not in params:
            params["from"] = self.email_from
        return self.send_request("forward", params) is not None

    def search(self, query: str, columns: str | None = None) -> SearchResult:
        xml = self.send_request("search", {"q": query, "cols": columns or DEFAULT_SEARCH_COLUMNS})
        if xml is None:
            return SearchResult(ok=False, error=f"search failed for query {query!r}")

        container = xml.find("cases")
        fragments = list(container) if container is not None else []
        cases: list[CaseModel] = []
        for fragment in fragments:
            case = case_from_xml(fragment)
            if case is None:
                self.log.warning("Skipping undecodable case in search results for %r", query)
                continue
            cases.append(case)
        return SearchResult(cases=cases)

    def search_cases(self, query: str, columns: str | None = None) -> list[CaseModel]:
        """Search cases; an empty list covers both no matches and failure."""
        return self.search(query, columns).cases

    def get_case(self, case_id: int) -> CaseModel | None:
        cases = self.search_cases(str(int(case_id)))
        return cases[0] if cases else None

    def get_active_alerts(self, link_only: bool = False) -> list[CaseModel]:
        """Open alert cases, most recently opened first."""
        query = ALERT_LINK_QUERY if link_only else ALERT_QUERY
        alerts = self.search_cases(query)
        return sorted(alerts, key=lambda c: c.date_opened, reverse=True)

    # ------------------ Transport ------------------
    def send_request(self, command: str, params: Mapping[str, Any]) -> ET.Element | None:
        """POST a command and parse the XML reply.

        Returns None for unknown commands, missing token, transport errors,
        malformed XML, and FogBugz ``<error>`` replies. Failures are logged,
        never raised.
        """
        if command not in COMMANDS:
            self.log.warning("Refusing unknown FogBugz command %r", command)
            return None
        if command != "logon" and self.token is None:
            self.log.warning("FogBugz command %r requires a session token", command)
            return None

        try:
            parts = map_params(params)
        except OSError as exc:
            self.log.warning("Failed to open attachment for %r: %s", command, exc)
            return None
        if command != "logon":
            parts.append(FormPart("token", self.token))

        try:
            body = self._post(command, parts)
        except TransportFailure as exc:
            self.log.warning("Failed Request: %s", exc)
            return None
        finally:
            close_parts(parts)

        try:
            return self._parse(body)
        except ParseFailure as exc:
            self.log.warning("Failed to Parse XML: %s", exc)
            return None

    def _post(self, command: str, parts: list[FormPart]) -> bytes:
        files = [
            (p.name, (p.filename, p.contents) if p.is_file else (None, form_value(p.contents))) for p in parts
        ]
        try:
            resp = self.session.post(self.url, params={"cmd": command}, files=files)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportFailure(f"{command}: {exc}") from exc
        return resp.content

    @staticmethod
    def _parse(body: bytes) -> ET.Element:
        try:
            root = ET.fromstring(body)
        except ET.ParseError as exc:
            raise ParseFailure(str(exc)) from exc
        error = root.find("error")
        if error is not None:
            raise ParseFailure(f"FogBugz error {error.get('code', '?')}: {(error.text or '').strip()}")
        return root
