"""Decoders for the custom scalar encodings used in XML exports.

Identifiers and binary attachments are stored as base64 text nodes.
Attachments may additionally be gzip-compressed, signalled by the
``Compressed`` attribute on their element.
"""

from __future__ import annotations

import base64
import binascii
import uuid as uuid_module
import zlib
from xml.etree.ElementTree import Element

from kdbxpass.exceptions import (
    MalformedBlobError,
    MalformedIdentifierError,
    SchemaViolationError,
)
from kdbxpass.models import BinaryBlob

# Identifiers are 128-bit; longer payloads are truncated to this size
IDENTIFIER_SIZE = 16

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


def _b64decode(text: str | None) -> bytes:
    """Strictly decode base64, ignoring only whitespace.

    Raises:
        binascii.Error: If the text contains non-alphabet characters or
            has incorrect padding
    """
    if not text:
        return b""
    return base64.b64decode("".join(text.split()), validate=True)


def parse_bool(text: str | None, default: bool = False) -> bool:
    """Parse an XML boolean ("True"/"False", case-insensitive, or 1/0).

    Args:
        text: Element text or attribute value
        default: Value for an absent or empty text

    Raises:
        ValueError: If the text is not a recognised boolean
    """
    if text is None or not text.strip():
        return default
    value = text.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean: {text!r}")


def decode_identifier(text: str | None) -> uuid_module.UUID:
    """Decode a base64 identifier into a UUID.

    Only the first 16 decoded bytes are kept; trailing bytes are dropped.

    Args:
        text: Base64 text of the identifier element

    Returns:
        UUID built from the first 16 bytes

    Raises:
        MalformedIdentifierError: If the text is not valid base64 or
            decodes to fewer than 16 bytes
    """
    try:
        data = _b64decode(text)
    except binascii.Error as e:
        raise MalformedIdentifierError(f"Identifier is not valid base64: {e}") from e
    if len(data) < IDENTIFIER_SIZE:
        raise MalformedIdentifierError(
            f"Identifier too short: {len(data)} bytes, expected {IDENTIFIER_SIZE}",
            length=len(data),
        )
    return uuid_module.UUID(bytes=data[:IDENTIFIER_SIZE])


def _gunzip(data: bytes) -> bytes:
    """Decompress one or more concatenated gzip members.

    Every member must be complete, and anything after a member must be
    another gzip header, so trailing padding is rejected.

    Raises:
        EOFError: If the stream is empty or a member is truncated
        zlib.error: If a header, the deflate data or a checksum is invalid
    """
    if not data:
        raise EOFError("empty gzip stream")
    chunks = []
    while data:
        # MAX_WBITS | 16 selects the gzip wrapper
        decompressor = zlib.decompressobj(wbits=zlib.MAX_WBITS | 16)
        chunks.append(decompressor.decompress(data))
        if not decompressor.eof:
            raise EOFError("gzip stream ended before the end-of-stream marker")
        data = decompressor.unused_data
    return b"".join(chunks)


def decode_blob(text: str | None, blob_id: int, compressed: bool) -> BinaryBlob:
    """Decode a base64, optionally gzip-compressed, attachment payload.

    No size cap is applied; the whole payload is held in memory.

    Args:
        text: Base64 text of the Binary element
        blob_id: Value of the element's ID attribute
        compressed: Value of the element's Compressed attribute

    Returns:
        BinaryBlob with the decoded bytes

    Raises:
        MalformedBlobError: If base64 decoding or decompression fails
    """
    try:
        data = _b64decode(text)
    except binascii.Error as e:
        raise MalformedBlobError(f"Binary is not valid base64: {e}", blob_id=blob_id) from e

    if compressed:
        try:
            data = _gunzip(data)
        except (EOFError, zlib.error) as e:
            raise MalformedBlobError(f"Binary decompression failed: {e}", blob_id=blob_id) from e

    return BinaryBlob(id=blob_id, data=data)


def decode_blob_element(elem: Element) -> BinaryBlob:
    """Decode a ``<Binary ID="n" Compressed="True">`` pool element.

    Raises:
        SchemaViolationError: If the ID attribute is missing
        MalformedBlobError: If the ID or Compressed attribute is invalid,
            or the payload fails to decode
    """
    raw_id = elem.get("ID")
    if raw_id is None:
        raise SchemaViolationError("Binary/@ID", "Meta/Binaries")
    try:
        blob_id = int(raw_id)
    except ValueError as e:
        raise MalformedBlobError(f"Binary ID is not an integer: {raw_id!r}") from e

    try:
        compressed = parse_bool(elem.get("Compressed"))
    except ValueError as e:
        raise MalformedBlobError(str(e), blob_id=blob_id) from e

    return decode_blob(elem.text, blob_id, compressed)
