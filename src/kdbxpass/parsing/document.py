"""Tree decoder for XML export documents.

Walks the fixed export schema in a single pass::

    KeePassFile
    ├── Meta            settings + Binaries pool
    └── Root
        └── Group*      UUID, Name, Times, Entry*, Group*

and applies the scalar and map decoders at each leaf. Unknown elements
are ignored. Attachment references are left as integer IDs.
"""

from __future__ import annotations

import base64
import binascii
import logging
import struct
import uuid as uuid_module
from datetime import UTC, datetime, timedelta
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

from kdbxpass.exceptions import InvalidXmlError, SchemaViolationError
from kdbxpass.models import AutoType, BinaryBlob, DatabaseSettings, Entry, Group, Times

from .maps import decode_attribute_map, decode_reference_map
from .scalars import decode_blob_element, decode_identifier, parse_bool

logger = logging.getLogger(__name__)

# ISO 8601 as written by KeePass XML exports
XML_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Binary timestamps count seconds from 0001-01-01
_TIME_EPOCH = datetime(1, 1, 1, tzinfo=UTC)


def parse_xml(
    data: bytes,
) -> tuple[list[Group], DatabaseSettings, dict[int, BinaryBlob]]:
    """Decode an XML export into models.

    Args:
        data: Raw document bytes

    Returns:
        Tuple of (top-level groups, settings, blob pool keyed by ID)

    Raises:
        InvalidXmlError: If the document is not well-formed or unsafe
        SchemaViolationError: If a required element is missing
        MalformedIdentifierError: If an identifier fails to decode
        MalformedBlobError: If a pooled attachment fails to decode
    """
    try:
        root = DefusedET.fromstring(data)
    except ParseError as e:
        raise InvalidXmlError(f"Invalid XML document: {e}") from e
    except DefusedXmlException as e:
        raise InvalidXmlError(f"Forbidden XML construct: {e}") from e

    if root.tag != "KeePassFile":
        raise SchemaViolationError("KeePassFile", "document root")

    meta_elem = root.find("Meta")
    if meta_elem is None:
        raise SchemaViolationError("Meta", "KeePassFile")
    root_elem = root.find("Root")
    if root_elem is None:
        raise SchemaViolationError("Root", "KeePassFile")

    settings = _parse_meta(meta_elem)
    binaries = _parse_binaries(meta_elem.find("Binaries"))
    groups = [_parse_group(elem) for elem in root_elem.findall("Group")]

    logger.debug(
        "Decoded %d top-level groups and %d binaries", len(groups), len(binaries)
    )
    return groups, settings, binaries


def _text(parent: Element, tag: str) -> str | None:
    elem = parent.find(tag)
    return elem.text if elem is not None else None


def _require(parent: Element, tag: str, context: str) -> Element:
    elem = parent.find(tag)
    if elem is None:
        raise SchemaViolationError(tag, context)
    return elem


def _int(parent: Element, tag: str, default: int, context: str) -> int:
    text = _text(parent, tag)
    if not text:
        return default
    try:
        return int(text)
    except ValueError as e:
        raise SchemaViolationError(tag, context) from e


def _bool(parent: Element, tag: str, default: bool, context: str) -> bool:
    try:
        return parse_bool(_text(parent, tag), default)
    except ValueError as e:
        raise SchemaViolationError(tag, context) from e


def _optional_bool(parent: Element, tag: str, context: str) -> bool | None:
    """Parse a tri-state boolean where "null" (or absent) means inherit."""
    text = _text(parent, tag)
    if text is None or not text.strip() or text.strip().lower() == "null":
        return None
    return _bool(parent, tag, False, context)


def _optional_identifier(parent: Element, tag: str) -> uuid_module.UUID | None:
    text = _text(parent, tag)
    if not text or not text.strip():
        return None
    return decode_identifier(text)


def _parse_meta(meta_elem: Element) -> DatabaseSettings:
    """Parse Meta element into DatabaseSettings."""
    settings = DatabaseSettings()

    if gen := _text(meta_elem, "Generator"):
        settings.generator = gen
    if name := _text(meta_elem, "DatabaseName"):
        settings.database_name = name
    if desc := _text(meta_elem, "DatabaseDescription"):
        settings.database_description = desc
    if username := _text(meta_elem, "DefaultUserName"):
        settings.default_username = username
    if color := _text(meta_elem, "Color"):
        settings.color = color

    settings.maintenance_history_days = _int(
        meta_elem, "MaintenanceHistoryDays", settings.maintenance_history_days, "Meta"
    )
    settings.master_key_change_rec = _int(
        meta_elem, "MasterKeyChangeRec", settings.master_key_change_rec, "Meta"
    )
    settings.master_key_change_force = _int(
        meta_elem, "MasterKeyChangeForce", settings.master_key_change_force, "Meta"
    )
    settings.history_max_items = _int(
        meta_elem, "HistoryMaxItems", settings.history_max_items, "Meta"
    )
    settings.history_max_size = _int(
        meta_elem, "HistoryMaxSize", settings.history_max_size, "Meta"
    )

    mp_elem = meta_elem.find("MemoryProtection")
    if mp_elem is not None:
        for field in ("Title", "UserName", "Password", "URL", "Notes"):
            settings.memory_protection[field] = _bool(
                mp_elem,
                f"Protect{field}",
                settings.memory_protection[field],
                "Meta/MemoryProtection",
            )

    # Both spellings occur in the wild
    for tag in ("RecycleBinEnabled", "RecyleBinEnabled"):
        if meta_elem.find(tag) is not None:
            settings.recycle_bin_enabled = _bool(
                meta_elem, tag, settings.recycle_bin_enabled, "Meta"
            )

    settings.recycle_bin_uuid = _optional_identifier(meta_elem, "RecycleBinUUID")
    settings.entry_templates_group = _optional_identifier(meta_elem, "EntryTemplatesGroup")
    settings.last_selected_group = _optional_identifier(meta_elem, "LastSelectedGroup")
    settings.last_top_visible_group = _optional_identifier(meta_elem, "LastTopVisibleGroup")

    return settings


def _parse_binaries(binaries_elem: Element | None) -> dict[int, BinaryBlob]:
    """Parse the Meta/Binaries pool into an ID -> blob mapping."""
    binaries: dict[int, BinaryBlob] = {}
    if binaries_elem is None:
        return binaries

    for elem in binaries_elem.findall("Binary"):
        blob = decode_blob_element(elem)
        if blob.id in binaries:
            raise SchemaViolationError(f"Binary/@ID={blob.id} (duplicate)", "Meta/Binaries")
        binaries[blob.id] = blob
        logger.debug("Decoded binary %d (%d bytes)", blob.id, len(blob.data))

    return binaries


def _parse_group(elem: Element) -> Group:
    """Parse a Group element into a Group model, recursively."""
    group = Group(
        uuid=decode_identifier(_require(elem, "UUID", "Group").text),
        name=_require(elem, "Name", "Group").text or "",
    )
    context = f"Group {group.name!r}"

    group.notes = _text(elem, "Notes") or ""
    if icon := _text(elem, "IconID"):
        group.icon_id = icon
    group.times = _parse_times(_require(elem, "Times", context), context)
    group.is_expanded = _bool(elem, "IsExpanded", True, context)
    group.default_autotype_sequence = _text(elem, "DefaultAutoTypeSequence") or None
    group.enable_autotype = _optional_bool(elem, "EnableAutoType", context)
    group.enable_searching = _optional_bool(elem, "EnableSearching", context)
    group.last_top_visible_entry = _optional_identifier(elem, "LastTopVisibleEntry")

    for entry_elem in elem.findall("Entry"):
        group.entries.append(_parse_entry(entry_elem))

    for subgroup_elem in elem.findall("Group"):
        group.subgroups.append(_parse_group(subgroup_elem))

    return group


def _parse_entry(elem: Element) -> Entry:
    """Parse an Entry element into an Entry model."""
    entry = Entry(
        uuid=decode_identifier(_require(elem, "UUID", "Entry").text),
        attributes=decode_attribute_map(elem.findall("String")),
        references=decode_reference_map(elem.findall("Binary")),
    )
    context = f"Entry {entry.title!r}"

    if icon := _text(elem, "IconID"):
        entry.icon_id = icon
    entry.times = _parse_times(_require(elem, "Times", context), context)

    if tag_text := _text(elem, "Tags"):
        tag_text = tag_text.replace(",", ";")
        entry.tags = [t.strip() for t in tag_text.split(";") if t.strip()]

    entry.foreground_color = _text(elem, "ForegroundColor") or None
    entry.background_color = _text(elem, "BackgroundColor") or None
    entry.override_url = _text(elem, "OverrideURL") or None

    # Plain exports never stream-encrypt values; decryption is out of scope
    for value_elem in elem.iterfind("String/Value"):
        if value_elem.get("Protected") == "True":
            logger.warning("%s has a stream-protected field; its value is kept as-is", context)
            break

    at_elem = elem.find("AutoType")
    if at_elem is not None:
        entry.autotype = AutoType(
            enabled=_bool(at_elem, "Enabled", True, context),
            sequence=_text(at_elem, "DefaultSequence") or None,
            obfuscation=_int(at_elem, "DataTransferObfuscation", 0, context),
        )

    history_elem = elem.find("History")
    if history_elem is not None:
        for hist_entry_elem in history_elem.findall("Entry"):
            entry.history.append(_parse_entry(hist_entry_elem))

    return entry


def _parse_times(times_elem: Element, context: str) -> Times:
    """Parse Times element into Times model."""

    def parse_time(tag: str) -> datetime | None:
        text = _text(times_elem, tag)
        if not text or not text.strip():
            return None
        try:
            return decode_time(text.strip())
        except ValueError as e:
            raise SchemaViolationError(f"Times/{tag}", context) from e

    return Times(
        creation_time=parse_time("CreationTime"),
        last_modification_time=parse_time("LastModificationTime"),
        last_access_time=parse_time("LastAccessTime"),
        expiry_time=parse_time("ExpiryTime"),
        expires=_bool(times_elem, "Expires", False, context),
        usage_count=_int(times_elem, "UsageCount", 0, context),
        location_changed=parse_time("LocationChanged"),
    )


def decode_time(time_str: str) -> datetime:
    """Decode an export timestamp to an aware UTC datetime.

    Exports carry either ISO 8601 text or base64 of a little-endian
    int64 counting seconds since 0001-01-01.

    Raises:
        ValueError: If the text matches neither form
    """
    # Base64 strings don't contain - or : which are present in ISO dates
    if "-" not in time_str and ":" not in time_str:
        try:
            binary = base64.b64decode(time_str, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid timestamp: {time_str!r}") from e
        if len(binary) != 8:
            raise ValueError(f"Invalid binary timestamp length: {len(binary)}")
        (seconds,) = struct.unpack("<q", binary)
        try:
            return _TIME_EPOCH + timedelta(seconds=seconds)
        except OverflowError as e:
            raise ValueError(f"Timestamp out of range: {seconds}") from e

    try:
        return datetime.strptime(time_str, XML_TIME_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        pass

    dt = datetime.fromisoformat(time_str.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt
