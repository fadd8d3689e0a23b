"""Data models for decoded export documents.

This module provides typed Python classes for the contents of an XML
export: entries, groups, timestamps and pooled binary attachments.
"""

from .binary import BinaryBlob
from .entry import AutoType, Entry
from .group import Group
from .settings import DatabaseSettings
from .times import Times

__all__ = [
    "AutoType",
    "BinaryBlob",
    "DatabaseSettings",
    "Entry",
    "Group",
    "Times",
]
