"""Error taxonomy for the FogBugz adapter.

Only ``ConfigurationError`` is raised across the public API. The others are
built and logged where a request or decode fails, then turned into
``None``/``False``/empty results.
"""

from __future__ import annotations


class FogBugzError(Exception):
    """Base class for adapter errors."""


class ConfigurationError(FogBugzError):
    """Missing base URL, missing credentials, or failed logon."""


class TransportFailure(FogBugzError):
    """Network or HTTP-level failure while sending a command."""


class ParseFailure(FogBugzError):
    """Response body is not well-formed XML or reports an API error."""


class CaseDecodeError(FogBugzError):
    """A <case> fragment lacks a usable identifier or opened date."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field
