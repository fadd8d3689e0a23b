"""Custom exception hierarchy for kdbxpass.

Every failure is terminal for an import run: nothing here is retried or
recovered locally. All exceptions inherit from KdbxPassError.

Exception Hierarchy:
    KdbxPassError (base)
    ├── InputReadError
    ├── FormatError
    │   ├── InvalidXmlError
    │   ├── SchemaViolationError
    │   ├── MalformedIdentifierError
    │   └── MalformedBlobError
    └── ExportError
        ├── DanglingReferenceError
        └── StoreWriteError

Security Note:
    Messages name paths, element tags and sizes. They never include
    attribute values or attachment contents.
"""

from __future__ import annotations

from pathlib import Path


class KdbxPassError(Exception):
    """Base exception for all kdbxpass errors."""


class InputReadError(KdbxPassError):
    """The XML export file could not be read.

    Raised before any decoding takes place.
    """

    def __init__(self, path: str | Path, reason: str = "unreadable") -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


# --- Decode Errors ---


class FormatError(KdbxPassError):
    """The export document could not be decoded.

    No partial database is ever produced when this is raised.
    """


class InvalidXmlError(FormatError):
    """The document is not well-formed XML or uses forbidden constructs."""

    def __init__(self, message: str = "Invalid XML document") -> None:
        super().__init__(message)


class SchemaViolationError(FormatError):
    """A structural element required by the export schema is missing.

    Attributes:
        element: Tag (or tag/attribute) that was expected
        context: Where it was expected, e.g. "Entry" or "Meta/Binaries"
    """

    def __init__(self, element: str, context: str | None = None) -> None:
        self.element = element
        self.context = context
        where = f" in {context}" if context else ""
        super().__init__(f"Missing or invalid required element {element!r}{where}")


class MalformedIdentifierError(FormatError):
    """An identifier did not decode to at least 16 bytes of base64."""

    def __init__(self, message: str = "Malformed identifier", length: int | None = None) -> None:
        self.length = length
        super().__init__(message)


class MalformedBlobError(FormatError):
    """A binary blob failed base64 decoding or decompression."""

    def __init__(self, message: str = "Malformed binary blob", blob_id: int | None = None) -> None:
        self.blob_id = blob_id
        if blob_id is not None:
            message = f"{message} (blob {blob_id})"
        super().__init__(message)


# --- Export Errors ---


class ExportError(KdbxPassError):
    """Export was aborted part-way through the traversal.

    Writes issued before the failure are left in place.

    Attributes:
        path: Store path of the entry (or attachment) being exported
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class DanglingReferenceError(ExportError):
    """An attachment references a blob ID missing from the blob pool."""

    def __init__(self, path: str, key: str, ref: int) -> None:
        self.key = key
        self.ref = ref
        super().__init__(path, f"attachment {key!r} references missing blob {ref}")


class StoreWriteError(ExportError):
    """The secret store rejected a write."""

    def __init__(self, path: str, detail: str = "write rejected by store") -> None:
        self.detail = detail
        super().__init__(path, detail)
