"""Test configuration ensuring local package import when editable install not active.

Also provides a fake ``requests.Session`` that answers FogBugz commands from
canned XML so no test touches the network.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fogbugz_app.core.config import Credentials  # noqa: E402

LOGON_OK = b"<?xml version='1.0' encoding='UTF-8'?><response><token>24dsg34lok43un23</token></response>"
EMPTY_OK = b"<response></response>"


def case_xml(case_id=7, opened="2024-03-01T10:00:00Z", title="Printer down", extra=""):
    return (
        f'<case ixBug="{case_id}" operations="edit,assign">'
        f"<sTitle>{title}</sTitle><fOpen>true</fOpen>"
        f"<sCustomerEmail>ops@example.org</sCustomerEmail>"
        f"<dtOpened>{opened}</dtOpened><sStatus>Active</sStatus>{extra}</case>"
    )


def search_xml(*cases: str) -> bytes:
    return f'<response><cases count="{len(cases)}">{"".join(cases)}</cases></response>'.encode()


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Records posted commands; replies from ``responses`` keyed by cmd.

    A reply may be bytes, a FakeResponse, or an exception instance to raise.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = {"logon": LOGON_OK, "logoff": EMPTY_OK}
        self.responses.update(responses or {})
        self.calls: list[dict] = []

    def post(self, url, params=None, files=None, **kwargs):
        fields = {}
        uploads = {}
        for name, (filename, contents) in files or []:
            if filename is None:
                fields[name] = contents
            else:
                uploads[name] = (filename, contents.read(), contents)
        cmd = (params or {}).get("cmd")
        self.calls.append({"url": url, "cmd": cmd, "fields": fields, "uploads": uploads})
        reply = self.responses.get(cmd, EMPTY_OK)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return FakeResponse(reply)

    def commands(self) -> list[str]:
        return [c["cmd"] for c in self.calls]


@pytest.fixture
def creds():
    return lambda: Credentials("alice@example.org", "s3cret")


@pytest.fixture
def fake_session():
    return FakeSession()
