"""Database-wide settings decoded from the Meta block."""

from __future__ import annotations

import uuid as uuid_module
from dataclasses import dataclass, field


@dataclass
class DatabaseSettings:
    """Settings for an exported database.

    Attributes:
        generator: Generator application name
        database_name: Name of the database
        database_description: Description of the database
        default_username: Default username for new entries
        maintenance_history_days: Days to keep deleted items
        color: Database color (hex)
        master_key_change_rec: Days until master key change recommended
        master_key_change_force: Days until master key change forced
        memory_protection: Which fields are protected in memory
        recycle_bin_enabled: Whether recycle bin is enabled
        recycle_bin_uuid: Identifier of recycle bin group
        entry_templates_group: Identifier of the entry templates group
        last_selected_group: Identifier of the last selected group (UI state)
        last_top_visible_group: Identifier of the last visible group (UI state)
        history_max_items: Max history entries per entry
        history_max_size: Max history size in bytes
    """

    generator: str = ""
    database_name: str = ""
    database_description: str = ""
    default_username: str = ""
    maintenance_history_days: int = 365
    color: str | None = None
    master_key_change_rec: int = -1
    master_key_change_force: int = -1
    memory_protection: dict[str, bool] = field(
        default_factory=lambda: {
            "Title": False,
            "UserName": False,
            "Password": True,
            "URL": False,
            "Notes": False,
        }
    )
    recycle_bin_enabled: bool = True
    recycle_bin_uuid: uuid_module.UUID | None = None
    entry_templates_group: uuid_module.UUID | None = None
    last_selected_group: uuid_module.UUID | None = None
    last_top_visible_group: uuid_module.UUID | None = None
    history_max_items: int = 10
    history_max_size: int = 6 * 1024 * 1024  # 6 MiB
