"""Test utilities for kdbxpass.

MockStore is an in-memory SecretStore. It records every write in order,
which makes the exact write sequence of an export easy to assert, and it
can be told to reject a given path to exercise failure handling. The CLI
also uses it for ``--dry-run``.
"""

from __future__ import annotations

from kdbxpass.exceptions import StoreWriteError


class MockStore:
    """In-memory secret store that records writes.

    Example:
        >>> store = MockStore()
        >>> store.write("Personal/Bank", b"secret123\\n")
        >>> store.paths
        ['Personal/Bank']
        >>> store["Personal/Bank"]
        b'secret123\\n'
    """

    def __init__(self, fail_on: str | None = None) -> None:
        """Initialize the store.

        Args:
            fail_on: Path whose write is rejected with StoreWriteError
        """
        self.fail_on = fail_on
        self.writes: list[tuple[str, bytes]] = []

    def write(self, path: str, payload: bytes) -> None:
        """Record a write, or reject it if path matches fail_on."""
        if path == self.fail_on:
            raise StoreWriteError(path, "rejected by MockStore")
        self.writes.append((path, payload))

    @property
    def paths(self) -> list[str]:
        """Paths written, in write order."""
        return [path for path, _ in self.writes]

    def __getitem__(self, path: str) -> bytes:
        """Get the last payload written under path."""
        for written_path, payload in reversed(self.writes):
            if written_path == path:
                return payload
        raise KeyError(path)

    def __contains__(self, path: object) -> bool:
        return any(written_path == path for written_path, _ in self.writes)

    def __len__(self) -> int:
        return len(self.writes)

    def __repr__(self) -> str:
        return f"MockStore(<{len(self.writes)} writes>)"


__all__ = [
    "MockStore",
]
