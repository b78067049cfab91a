"""Map semantic parameter names onto FogBugz wire field names."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, BinaryIO

# Incomplete list of fields and their prefixes. Keys ending in "Id" get the
# "ix" prefix automatically, so only string equivalents are listed for those.
FIELD_PREFIXES: dict[str, tuple[str, ...]] = {
    "ix": ("bug", "mailbox", "priority"),
    "s": (
        "project",
        "category",
        "title",
        "customerEmail",
        "from",
        "to",
        "CC",
        "BCC",
        "subject",
        "event",
        "tags",
        "personAssignedTo",
    ),
    "n": ("filesCount",),
    "f": ("open",),
    "dt": ("opened", "closed"),
}

_PREFIX_BY_KEY: dict[str, str] = {key: prefix for prefix, keys in FIELD_PREFIXES.items() for key in keys}


@dataclass(slots=True)
class FormPart:
    """One multipart/form-data field. ``filename`` is set only for file uploads."""

    name: str
    contents: Any
    filename: str | None = None

    @property
    def is_file(self) -> bool:
        return self.filename is not None


def _ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


def wire_name(key: str) -> str:
    """Wire field name for a semantic key (``projectId`` -> ``ixProject``)."""
    if key.endswith("Id"):
        return "ix" + _ucfirst(key[:-2])
    prefix = _PREFIX_BY_KEY.get(key)
    if prefix is None:
        return key
    return prefix + _ucfirst(key)


def _add_file_parts(parts: list[FormPart], paths: Iterable[str | os.PathLike]) -> None:
    paths = list(paths)
    parts.append(FormPart("nFilesCount", len(paths)))
    for i, path in enumerate(paths):
        handle: BinaryIO = open(path, "rb")  # noqa: SIM115 - closed via close_parts
        parts.append(FormPart(f"File{i}", handle, filename=os.path.basename(os.fspath(path))))


def map_params(params: Mapping[str, Any]) -> list[FormPart]:
    """Translate caller parameters into ordered multipart form parts.

    ``files`` expands into ``nFilesCount`` plus one ``FileN`` part per path,
    each holding an open read handle. Callers own those handles and must
    close them (see ``close_parts``).
    """
    parts: list[FormPart] = []
    for key, value in params.items():
        if key == "files":
            try:
                _add_file_parts(parts, value)
            except OSError:
                close_parts(parts)
                raise
            continue
        parts.append(FormPart(wire_name(key), value))
    return parts


def close_parts(parts: Iterable[FormPart]) -> None:
    for part in parts:
        if part.is_file and hasattr(part.contents, "close"):
            part.contents.close()


def form_value(value: Any) -> str:
    """Stringify a form value the way FogBugz expects it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(str(v) for v in value)
    return str(value)
