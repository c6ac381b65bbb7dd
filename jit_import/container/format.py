"""
Container layout constants.

    header   magic (8 bytes) | version (uint64 LE) | padding to FIELD_ALIGNMENT
    record   key (uint64 LE) | size (uint64 LE) | padding to FIELD_ALIGNMENT
             | payload | padding to FIELD_ALIGNMENT
    footer   key of the last record (uint64 LE)

All integers are little-endian. Record keys are unique within a container.
"""

from __future__ import annotations

import struct

__all__ = [
    "FIELD_ALIGNMENT",
    "FILE_MAGIC",
    "FOOTER_STRUCT",
    "HEADER_STRUCT",
    "RECORD_HEADER_STRUCT",
    "align",
]

FILE_MAGIC = b"PYTORCH1"
FIELD_ALIGNMENT = 64

HEADER_STRUCT = struct.Struct("<8sQ")
RECORD_HEADER_STRUCT = struct.Struct("<QQ")
FOOTER_STRUCT = struct.Struct("<Q")


def align(offset: int, alignment: int = FIELD_ALIGNMENT) -> int:
    """Round ``offset`` up to the next multiple of ``alignment``."""
    return (offset + alignment - 1) // alignment * alignment
