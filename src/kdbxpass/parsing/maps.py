"""Decoders for key/value element lists.

Entries store their fields as repeated ``<String>`` elements and their
attachment references as repeated ``<Binary>`` elements, each holding a
``<Key>`` and a ``<Value>``. A key that appears more than once keeps the
value of its last occurrence.
"""

from __future__ import annotations

from collections.abc import Iterable
from xml.etree.ElementTree import Element

from kdbxpass.exceptions import SchemaViolationError


def _key(elem: Element, context: str) -> str:
    key_elem = elem.find("Key")
    if key_elem is None:
        raise SchemaViolationError("Key", context)
    # An empty <Key/> is still a key
    return key_elem.text or ""


def decode_attribute_map(elems: Iterable[Element]) -> dict[str, str]:
    """Decode ``<String>`` elements into a field name -> value mapping.

    An absent or empty ``<Value>`` decodes to the empty string, which is
    kept: it is distinct from the key being absent.

    Args:
        elems: String elements in source order

    Returns:
        Mapping of key to text value

    Raises:
        SchemaViolationError: If an element has no Key
    """
    attributes: dict[str, str] = {}
    for elem in elems:
        key = _key(elem, "String")
        value_elem = elem.find("Value")
        value = value_elem.text if value_elem is not None else None
        attributes[key] = value or ""
    return attributes


def decode_reference_map(elems: Iterable[Element]) -> dict[str, int]:
    """Decode ``<Binary>`` elements into an attachment name -> blob ID mapping.

    References are not resolved here; the IDs are foreign keys into the
    Database blob pool.

    Args:
        elems: Binary reference elements in source order

    Returns:
        Mapping of attachment name to blob ID

    Raises:
        SchemaViolationError: If an element has no Key, no Value, or a
            Value without an integer Ref attribute
    """
    references: dict[str, int] = {}
    for elem in elems:
        key = _key(elem, "Binary")
        value_elem = elem.find("Value")
        if value_elem is None:
            raise SchemaViolationError("Value", f"Binary {key!r}")
        ref = value_elem.get("Ref")
        if ref is None:
            raise SchemaViolationError("Value/@Ref", f"Binary {key!r}")
        try:
            references[key] = int(ref)
        except ValueError as e:
            raise SchemaViolationError("Value/@Ref", f"Binary {key!r}") from e
    return references
