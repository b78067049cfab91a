"""Domain data models for FogBugz cases and their events."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from .config import (
    ALERT_CLASSES,
    CORRESPONDENT_CHANGE_PATTERN,
    DEFAULT_ALERT_CLASS,
    DEFAULT_EVENT_ACTIONS,
    OPENED_ACTION,
)

_CORRESPONDENT_CHANGE = re.compile(CORRESPONDENT_CHANGE_PATTERN)


@dataclass(frozen=True, slots=True)
class EventModel:
    date: datetime | None
    action: str
    summary: str
    changes: str


@dataclass(frozen=True, slots=True)
class CaseModel:
    """One FogBugz case, as decoded from a ``<case>`` fragment.

    Optional groups (category, project, priority, mailbox) are ``None`` when
    the fragment did not carry their ``ix*`` element.
    """

    case_id: int
    title: str
    is_open: bool
    customer_email: str
    date_opened: datetime
    status: str
    date_closed: datetime | None = None
    mailbox_id: int | None = None
    priority_id: int | None = None
    priority: str | None = None
    category_id: int | None = None
    category: str | None = None
    project_id: int | None = None
    project: str | None = None
    events: tuple[EventModel, ...] = ()
    tags: tuple[str, ...] = ()
    custom_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "custom_fields", MappingProxyType(dict(self.custom_fields)))

    @property
    def alert_status(self) -> str | None:
        return self.custom_fields.get("alert_status")

    @property
    def alert_header(self) -> str:
        return self.custom_fields.get("alert_header", "")

    @property
    def nature(self) -> str:
        return self.custom_fields.get("nature", "")

    def case_summary(self) -> str | None:
        """Summary text of the first non-empty ``Opened`` event."""
        for event in self.events:
            if event.action == OPENED_ACTION and event.summary:
                return event.summary
        return None

    def filtered_events(self, actions: Iterable[str] | None = None) -> list[EventModel]:
        """Events worth showing on a case page.

        Parameters
        ----------
        actions : iterable of str, optional
            Allowed event actions. Defaults to Edited, Resolved, Reactivated,
            Closed and Reopened.

        Returns
        -------
        list of EventModel
            Matching events in server order, without correspondent-change
            audit entries.
        """
        allowed = DEFAULT_EVENT_ACTIONS if actions is None else frozenset(actions)
        return [
            event
            for event in self.events
            if event.action in allowed and not _CORRESPONDENT_CHANGE.search(event.changes)
        ]

    def alert_class(self) -> str:
        """Severity label for the ``alert_status`` custom field."""
        return ALERT_CLASSES.get(self.alert_status or "", DEFAULT_ALERT_CLASS)
