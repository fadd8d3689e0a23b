"""Timestamps carried by groups and entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Times:
    """Timestamps and usage counters for a group or entry.

    Retained for fidelity only; nothing in the export depends on them.
    A timestamp is None when the source element was empty.

    Attributes:
        creation_time: When the item was created
        last_modification_time: When the item was last modified
        last_access_time: When the item was last accessed
        expiry_time: When the item expires (meaningful only if expires)
        expires: Whether the item expires
        usage_count: Number of times the item was used
        location_changed: When the item was last moved to another group
    """

    creation_time: datetime | None = None
    last_modification_time: datetime | None = None
    last_access_time: datetime | None = None
    expiry_time: datetime | None = None
    expires: bool = False
    usage_count: int = 0
    location_changed: datetime | None = None
