"""Group model for the exported folder hierarchy."""

from __future__ import annotations

import uuid as uuid_module
from collections.abc import Iterator
from dataclasses import dataclass, field

from .entry import Entry
from .times import Times


@dataclass
class Group:
    """A group (folder) decoded from the export.

    Groups own their entries and subgroups as ordered lists; source order
    is preserved and drives both path construction and write order.

    Attributes:
        uuid: Identifier (first 16 decoded bytes of the UUID element)
        name: Display name of the group
        notes: Notes/description ("" when empty)
        times: Timestamps and usage counter
        icon_id: Icon ID for display
        is_expanded: Whether group is expanded in UI
        default_autotype_sequence: Default AutoType sequence for entries
        enable_autotype: Whether AutoType is enabled (None = inherit)
        enable_searching: Whether entries are searchable (None = inherit)
        last_top_visible_entry: Identifier of last visible entry (UI state)
        entries: Entries in this group, in source order
        subgroups: Child groups, in source order
    """

    uuid: uuid_module.UUID = field(default_factory=uuid_module.uuid4)
    name: str = ""
    notes: str = ""
    times: Times = field(default_factory=Times)
    icon_id: str = "48"  # Default folder icon
    is_expanded: bool = True
    default_autotype_sequence: str | None = None
    enable_autotype: bool | None = None
    enable_searching: bool | None = None
    last_top_visible_entry: uuid_module.UUID | None = None
    entries: list[Entry] = field(default_factory=list)
    subgroups: list[Group] = field(default_factory=list)

    def iter_entries(self, recursive: bool = True) -> Iterator[Entry]:
        """Iterate over entries in this group.

        Own entries come before those of subgroups, matching export order.

        Args:
            recursive: If True, include entries from all subgroups

        Yields:
            Entry objects
        """
        yield from self.entries
        if recursive:
            for subgroup in self.subgroups:
                yield from subgroup.iter_entries(recursive=True)

    def iter_groups(self, recursive: bool = True) -> Iterator[Group]:
        """Iterate over subgroups, depth-first.

        Args:
            recursive: If True, include nested subgroups

        Yields:
            Group objects
        """
        for subgroup in self.subgroups:
            yield subgroup
            if recursive:
                yield from subgroup.iter_groups(recursive=True)

    def __str__(self) -> str:
        return f'Group: "{self.name}"'

    def __hash__(self) -> int:
        return hash(self.uuid)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Group):
            return self.uuid == other.uuid
        return NotImplemented
