"""High-level Database API for XML export documents.

This module provides the main interface to a decoded export:
- Reading and decoding an export file or byte string
- Iterating over groups and entries
- Resolving attachment references against the blob pool
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from .exceptions import InputReadError
from .models import BinaryBlob, DatabaseSettings, Entry, Group
from .parsing import parse_xml

logger = logging.getLogger(__name__)


class Database:
    """A decoded export document.

    The Database owns the top-level groups (the children of ``<Root>``)
    and the blob pool. Entries refer into the pool by integer ID only.
    A Database is built once and is read-only thereafter.

    Example usage:
        db = Database.open("export.xml")
        for entry in db.iter_entries():
            print(entry.title)
    """

    def __init__(
        self,
        groups: list[Group] | None = None,
        settings: DatabaseSettings | None = None,
        binaries: dict[int, BinaryBlob] | None = None,
    ) -> None:
        """Initialize database.

        Usually you should use Database.open() or Database.open_bytes().

        Args:
            groups: Top-level groups, in source order
            settings: Settings from the Meta block
            binaries: Blob pool keyed by blob ID
        """
        self._groups = groups or []
        self._settings = settings or DatabaseSettings()
        self._binaries = binaries or {}
        self._filepath: Path | None = None

    @property
    def groups(self) -> list[Group]:
        """Get the top-level groups."""
        return self._groups

    @property
    def settings(self) -> DatabaseSettings:
        """Get database settings."""
        return self._settings

    @property
    def binaries(self) -> dict[int, BinaryBlob]:
        """Get the blob pool."""
        return self._binaries

    @property
    def filepath(self) -> Path | None:
        """Get the file path (if opened from file)."""
        return self._filepath

    # --- Opening databases ---

    @classmethod
    def open(cls, filepath: str | Path) -> Database:
        """Read and decode an XML export file.

        The whole file is read into memory before decoding starts.

        Args:
            filepath: Path to the .xml export

        Returns:
            Database instance

        Raises:
            InputReadError: If the file can't be read
            FormatError: If the document fails to decode
        """
        filepath = Path(filepath)
        try:
            data = filepath.read_bytes()
        except OSError as e:
            raise InputReadError(filepath, e.strerror or str(e)) from e

        logger.debug("Read %d bytes from %s", len(data), filepath)
        return cls.open_bytes(data, filepath=filepath)

    @classmethod
    def open_bytes(cls, data: bytes, filepath: Path | None = None) -> Database:
        """Decode an XML export from bytes.

        Args:
            data: Export file contents
            filepath: Original file path (informational)

        Returns:
            Database instance

        Raises:
            FormatError: If the document fails to decode
        """
        groups, settings, binaries = parse_xml(data)
        db = cls(groups=groups, settings=settings, binaries=binaries)
        db._filepath = filepath
        return db

    # --- Iteration ---

    def iter_entries(self, recursive: bool = True) -> Iterator[Entry]:
        """Iterate over entries in depth-first, source order.

        Args:
            recursive: If False, only entries directly in top-level groups

        Yields:
            Entry objects
        """
        for group in self._groups:
            yield from group.iter_entries(recursive=recursive)

    def iter_groups(self, recursive: bool = True) -> Iterator[Group]:
        """Iterate over all groups, top-level groups included.

        Args:
            recursive: If False, only the top-level groups

        Yields:
            Group objects
        """
        for group in self._groups:
            yield group
            if recursive:
                yield from group.iter_groups(recursive=True)

    # --- Binary attachments ---

    def get_binary(self, ref: int) -> bytes | None:
        """Get binary attachment data by reference ID.

        Args:
            ref: Binary reference ID

        Returns:
            Binary data or None if not in the pool
        """
        blob = self._binaries.get(ref)
        return blob.data if blob is not None else None

    def get_attachment(self, entry: Entry, name: str) -> bytes | None:
        """Get an attachment from an entry by name.

        Args:
            entry: Entry to get attachment from
            name: Name (key) of the attachment

        Returns:
            Attachment data or None if the entry has no such attachment or
            its reference is dangling
        """
        ref = entry.references.get(name)
        if ref is None:
            return None
        return self.get_binary(ref)

    def __str__(self) -> str:
        entry_count = sum(1 for _ in self.iter_entries())
        group_count = sum(1 for _ in self.iter_groups())
        name = self._settings.database_name or "(unnamed)"
        return f'Database: "{name}" ({entry_count} entries, {group_count} groups)'
