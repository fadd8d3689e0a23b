"""Projection of a decoded Database onto a secret store.

The exporter walks the group tree depth-first in source order (a group's
own entries before its subgroups) and produces one write request per
exportable entry, followed by one per attachment of that entry:

    <group>/<group>/<title>          password + "key: value" lines
    <group>/<group>/<title>/<name>   raw attachment bytes

Entries without a title are skipped. Writes are issued serially; the
first failure aborts the export and already-written secrets stay put.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from .database import Database
from .exceptions import DanglingReferenceError, KdbxPassError, StoreWriteError
from .models import Entry, Group
from .store import SecretStore

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


@dataclass(frozen=True, slots=True)
class ExportConfig:
    """Path naming and payload formatting options.

    Attributes:
        top_level: Use each top-level group's own name as the first path
            segment. When False, paths start at the top-level groups'
            entries and subgroups.
        sort_attributes: Emit "key: value" lines in sorted key order. When
            False, lines follow the order fields appear in the source.
    """

    top_level: bool = False
    sort_attributes: bool = True


@dataclass(frozen=True, slots=True)
class WriteRequest:
    """A (path, payload) pair destined for the secret store.

    Attributes:
        path: "/"-separated store path
        payload: Bytes to store
        kind: "entry" for an entry's text, "attachment" for a binary
        key: Attachment name (None for entry writes)
    """

    path: str
    payload: bytes
    kind: Literal["entry", "attachment"] = "entry"
    key: str | None = None

    def __repr__(self) -> str:
        return f"WriteRequest({self.kind} {self.path!r}, <{len(self.payload)} bytes>)"


@dataclass(frozen=True, slots=True)
class ExportSummary:
    """Counts for a completed export."""

    entries: int = 0
    attachments: int = 0
    skipped: int = 0

    @property
    def writes(self) -> int:
        """Total number of store writes issued."""
        return self.entries + self.attachments


def join_path(*segments: str) -> str:
    """Join path segments with "/", dropping empty ones."""
    return PATH_SEPARATOR.join(s for s in segments if s)


def entry_payload(entry: Entry, sort_keys: bool = True) -> bytes:
    """Build the text stored for an entry.

    The first line is the password (empty if absent). Every other
    non-empty attribute except Title follows as a "key: value" line.

    Args:
        entry: Entry to format
        sort_keys: Order attribute lines by key instead of source order

    Returns:
        UTF-8 encoded payload, each line terminated by a newline
    """
    lines = [entry.password or ""]
    items = list(entry.custom_properties.items())
    if sort_keys:
        items.sort()
    for key, value in items:
        if not value:
            continue
        lines.append(f"{key}: {value}")
    return "".join(f"{line}\n" for line in lines).encode("utf-8")


def _resolve_attachments(
    db: Database, entry: Entry, entry_path: str
) -> list[tuple[str, bytes]]:
    attachments = []
    for key, ref in entry.references.items():
        data = db.get_binary(ref)
        if data is None:
            raise DanglingReferenceError(entry_path, key, ref)
        attachments.append((key, data))
    return attachments


def _walk_group(
    db: Database, group: Group, prefix: tuple[str, ...], config: ExportConfig
) -> Iterator[WriteRequest]:
    for entry in group.entries:
        if not entry.is_complete:
            logger.debug("Skipping entry %s without title", entry.uuid)
            continue

        entry_path = join_path(*prefix, entry.title or "")
        # Resolve before writing so a dangling reference leaves no partial entry
        attachments = _resolve_attachments(db, entry, entry_path)

        yield WriteRequest(entry_path, entry_payload(entry, config.sort_attributes))
        for key, data in attachments:
            yield WriteRequest(
                join_path(entry_path, key), data, kind="attachment", key=key
            )

    for subgroup in group.subgroups:
        yield from _walk_group(db, subgroup, (*prefix, subgroup.name), config)


def iter_write_requests(
    db: Database, config: ExportConfig | None = None
) -> Iterator[WriteRequest]:
    """Generate the write requests for a database, in write order.

    Requests are produced lazily, so a consumer that stops early never
    triggers reference resolution for later entries.

    Args:
        db: Decoded database
        config: Path naming and formatting options

    Yields:
        WriteRequest objects

    Raises:
        DanglingReferenceError: If an attachment references a blob ID that
            is not in the pool
    """
    config = config or ExportConfig()
    for group in db.groups:
        prefix = (group.name,) if config.top_level else ()
        yield from _walk_group(db, group, prefix, config)


def export_database(
    db: Database, store: SecretStore, config: ExportConfig | None = None
) -> ExportSummary:
    """Write every exportable entry and attachment to a store.

    Each write blocks until the store returns. Nothing is retried and
    nothing already written is rolled back on failure.

    Args:
        db: Decoded database
        store: Destination sink
        config: Path naming and formatting options

    Returns:
        ExportSummary with write and skip counts

    Raises:
        DanglingReferenceError: If an attachment reference can't be resolved
        StoreWriteError: If the store rejects a write
    """
    entries = 0
    attachments = 0
    for request in iter_write_requests(db, config):
        logger.info("Save: %s", request.path)
        try:
            store.write(request.path, request.payload)
        except KdbxPassError:
            raise
        except Exception as e:
            # Foreign sinks may raise anything; attach the path
            raise StoreWriteError(request.path, f"{type(e).__name__}: {e}") from e
        if request.kind == "entry":
            entries += 1
        else:
            attachments += 1

    skipped = sum(1 for entry in db.iter_entries() if not entry.is_complete)
    return ExportSummary(entries=entries, attachments=attachments, skipped=skipped)
