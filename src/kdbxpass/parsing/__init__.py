"""XML export document decoding.

This module turns export documents into models:
- Scalar decoders for base64 identifiers and (compressed) attachments
- Map decoders for entry fields and attachment references
- The tree decoder for the whole document

All parsing goes through defusedxml.
"""

from .document import decode_time, parse_xml
from .maps import decode_attribute_map, decode_reference_map
from .scalars import (
    IDENTIFIER_SIZE,
    decode_blob,
    decode_blob_element,
    decode_identifier,
    parse_bool,
)

__all__ = [
    # Scalars
    "IDENTIFIER_SIZE",
    "decode_blob",
    "decode_blob_element",
    "decode_identifier",
    "parse_bool",
    # Maps
    "decode_attribute_map",
    "decode_reference_map",
    # Document
    "decode_time",
    "parse_xml",
]
