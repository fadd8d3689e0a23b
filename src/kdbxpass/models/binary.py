"""Binary blob model for the document-wide attachment pool."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BinaryBlob:
    """A decoded attachment from the Meta/Binaries pool.

    Blobs are owned by the Database and never copied into entries;
    entries refer to them by ``id`` only.

    Attributes:
        id: Pool-unique integer ID (not necessarily contiguous or sorted)
        data: Decoded (and, if it was compressed, decompressed) bytes
    """

    id: int
    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"BinaryBlob(id={self.id}, <{len(self.data)} bytes>)"
