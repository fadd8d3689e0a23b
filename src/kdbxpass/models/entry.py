"""Entry model for exported credential records."""

from __future__ import annotations

import uuid as uuid_module
from dataclasses import dataclass, field
from typing import Optional

from .times import Times


# Attributes that the export writes specially rather than as "key: value" lines
RESERVED_KEYS = frozenset({
    "Title",
    "Password",
})


@dataclass
class AutoType:
    """AutoType settings for an entry.

    Attributes:
        enabled: Whether AutoType is enabled for this entry
        sequence: Default keystroke sequence
        obfuscation: Data transfer obfuscation level (0 = none)
    """

    enabled: bool = True
    sequence: Optional[str] = None
    obfuscation: int = 0


@dataclass
class Entry:
    """A credential record decoded from the export.

    Entries hold their free-form string fields in ``attributes`` and their
    attachments as blob IDs in ``references``. The blob bytes themselves
    live in the Database's pool and are looked up at export time.

    Attributes:
        uuid: Identifier (first 16 decoded bytes of the UUID element)
        attributes: Field name -> value ("" is distinct from absent)
        references: Attachment name -> blob ID in the Database pool
        times: Timestamps and usage counter
        icon_id: Icon ID for display
        tags: List of tags for categorization
        autotype: AutoType settings
        history: Previous versions of this entry, oldest first
        foreground_color: Custom foreground color (hex)
        background_color: Custom background color (hex)
        override_url: URL override for AutoType
    """

    uuid: uuid_module.UUID = field(default_factory=uuid_module.uuid4)
    attributes: dict[str, str] = field(default_factory=dict)
    references: dict[str, int] = field(default_factory=dict)
    times: Times = field(default_factory=Times)
    icon_id: str = "0"
    tags: list[str] = field(default_factory=list)
    autotype: AutoType = field(default_factory=AutoType)
    history: list[Entry] = field(default_factory=list)
    foreground_color: Optional[str] = None
    background_color: Optional[str] = None
    override_url: Optional[str] = None

    # --- Standard field properties ---

    @property
    def title(self) -> Optional[str]:
        """Get entry title."""
        return self.attributes.get("Title")

    @property
    def username(self) -> Optional[str]:
        """Get entry username."""
        return self.attributes.get("UserName")

    @property
    def password(self) -> Optional[str]:
        """Get entry password."""
        return self.attributes.get("Password")

    @property
    def url(self) -> Optional[str]:
        """Get entry URL."""
        return self.attributes.get("URL")

    @property
    def notes(self) -> Optional[str]:
        """Get entry notes."""
        return self.attributes.get("Notes")

    @property
    def is_complete(self) -> bool:
        """Whether the entry has a non-empty title and can be exported."""
        return bool(self.title)

    @property
    def custom_properties(self) -> dict[str, str]:
        """Get every attribute except Title and Password."""
        return {k: v for k, v in self.attributes.items() if k not in RESERVED_KEYS}

    def __str__(self) -> str:
        return f'Entry: "{self.title}" ({self.username})'

    def __hash__(self) -> int:
        return hash(self.uuid)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Entry):
            return self.uuid == other.uuid
        return NotImplemented
