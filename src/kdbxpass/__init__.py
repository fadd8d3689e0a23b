"""kdbxpass - Import KeePass XML exports into the pass password store.

The XML export of a KeePass database is decoded into typed models
(groups, entries, pooled attachments) and then projected onto a secret
store as one write per entry and one per attachment, with paths built
from the group hierarchy.

Example:
    from kdbxpass import Database, PassStore, export_database

    db = Database.open("export.xml")
    summary = export_database(db, PassStore())
    print(summary.entries, "entries written")
"""

__version__ = "0.1.0"

from .database import Database
from .exceptions import (
    DanglingReferenceError,
    ExportError,
    FormatError,
    InputReadError,
    InvalidXmlError,
    KdbxPassError,
    MalformedBlobError,
    MalformedIdentifierError,
    SchemaViolationError,
    StoreWriteError,
)
from .export import (
    ExportConfig,
    ExportSummary,
    WriteRequest,
    entry_payload,
    export_database,
    iter_write_requests,
)
from .models import AutoType, BinaryBlob, DatabaseSettings, Entry, Group, Times
from .store import PassStore, PassStoreConfig, SecretStore

__all__ = [
    # Core classes
    "AutoType",
    "BinaryBlob",
    "Database",
    "DatabaseSettings",
    "Entry",
    "Group",
    "Times",
    # Export
    "ExportConfig",
    "ExportSummary",
    "WriteRequest",
    "entry_payload",
    "export_database",
    "iter_write_requests",
    # Stores
    "PassStore",
    "PassStoreConfig",
    "SecretStore",
    # Exceptions
    "KdbxPassError",
    "InputReadError",
    "FormatError",
    "InvalidXmlError",
    "SchemaViolationError",
    "MalformedIdentifierError",
    "MalformedBlobError",
    "ExportError",
    "DanglingReferenceError",
    "StoreWriteError",
]
