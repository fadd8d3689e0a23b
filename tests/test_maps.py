"""Tests for attribute and attachment reference map decoding."""

from xml.etree.ElementTree import Element, SubElement

import pytest

from kdbxpass.exceptions import SchemaViolationError
from kdbxpass.parsing import decode_attribute_map, decode_reference_map


def string_elem(key: str | None, value: str | None, with_value: bool = True) -> Element:
    elem = Element("String")
    if key is not None:
        SubElement(elem, "Key").text = key
    if with_value:
        SubElement(elem, "Value").text = value
    return elem


def binary_elem(key: str | None, ref: str | None, with_value: bool = True) -> Element:
    elem = Element("Binary")
    if key is not None:
        SubElement(elem, "Key").text = key
    if with_value:
        value = SubElement(elem, "Value")
        if ref is not None:
            value.set("Ref", ref)
    return elem


class TestDecodeAttributeMap:
    """Tests for decode_attribute_map."""

    def test_basic(self) -> None:
        """Test decoding a list of String elements."""
        result = decode_attribute_map([
            string_elem("Title", "Bank"),
            string_elem("Password", "secret123"),
            string_elem("URL", "bank.example.com"),
        ])
        assert result == {
            "Title": "Bank",
            "Password": "secret123",
            "URL": "bank.example.com",
        }

    def test_empty_value_kept(self) -> None:
        """Test that an empty Value is kept as an empty string."""
        result = decode_attribute_map([string_elem("Notes", None)])
        assert result == {"Notes": ""}
        assert "UserName" not in result

    def test_missing_value_is_empty(self) -> None:
        """Test that a String without Value decodes to an empty string."""
        result = decode_attribute_map([string_elem("Notes", None, with_value=False)])
        assert result == {"Notes": ""}

    def test_last_write_wins(self) -> None:
        """Test that a repeated key keeps its last value."""
        result = decode_attribute_map([
            string_elem("Title", "first"),
            string_elem("URL", "u"),
            string_elem("Title", "second"),
        ])
        assert result["Title"] == "second"
        assert len(result) == 2

    def test_multiline_value_preserved(self) -> None:
        """Test that values are not stripped or altered."""
        result = decode_attribute_map([string_elem("Notes", "  line1\nline2  ")])
        assert result["Notes"] == "  line1\nline2  "

    def test_missing_key_raises(self) -> None:
        """Test that a String without Key is a schema violation."""
        with pytest.raises(SchemaViolationError, match="Key"):
            decode_attribute_map([string_elem(None, "value")])

    def test_empty_key_kept(self) -> None:
        """Test that a present but empty Key decodes to the empty string."""
        result = decode_attribute_map([string_elem("", "value")])
        assert result == {"": "value"}

    def test_empty(self) -> None:
        """Test that no elements decode to an empty mapping."""
        assert decode_attribute_map([]) == {}


class TestDecodeReferenceMap:
    """Tests for decode_reference_map."""

    def test_basic(self) -> None:
        """Test decoding Binary reference elements."""
        result = decode_reference_map([
            binary_elem("scan.pdf", "0"),
            binary_elem("key.asc", "12"),
        ])
        assert result == {"scan.pdf": 0, "key.asc": 12}

    def test_source_order_preserved(self) -> None:
        """Test that keys iterate in source order."""
        result = decode_reference_map([
            binary_elem("z", "1"),
            binary_elem("a", "2"),
        ])
        assert list(result) == ["z", "a"]

    def test_last_write_wins(self) -> None:
        """Test that a repeated key keeps its last reference."""
        result = decode_reference_map([
            binary_elem("file", "1"),
            binary_elem("file", "4"),
        ])
        assert result == {"file": 4}

    def test_missing_key_raises(self) -> None:
        """Test that a Binary without Key is a schema violation."""
        with pytest.raises(SchemaViolationError, match="Key"):
            decode_reference_map([binary_elem(None, "1")])

    def test_empty_key_kept(self) -> None:
        """Test that a present but empty Key is accepted as a reference name."""
        assert decode_reference_map([binary_elem("", "3")]) == {"": 3}

    def test_missing_value_raises(self) -> None:
        """Test that a Binary without Value is a schema violation."""
        with pytest.raises(SchemaViolationError, match="Value"):
            decode_reference_map([binary_elem("file", None, with_value=False)])

    def test_missing_ref_raises(self) -> None:
        """Test that a Value without Ref is a schema violation."""
        with pytest.raises(SchemaViolationError, match="Ref"):
            decode_reference_map([binary_elem("file", None)])

    def test_non_integer_ref_raises(self) -> None:
        """Test that a non-integer Ref is a schema violation."""
        with pytest.raises(SchemaViolationError, match="Ref"):
            decode_reference_map([binary_elem("file", "one")])
