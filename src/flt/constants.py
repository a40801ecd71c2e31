"""Format constants, discriminant enums and the Dublin Core vocabulary."""

from __future__ import annotations

from enum import IntEnum

# general info
MEDIA_TYPE = "text/vnd.ficlab.flt"
MIN_VERSION = 1
MAX_VERSION = 1
DEFAULT_VERSION = 1
DEFAULT_FEATURES = 0x0001
DEFAULT_GENERATOR = "https://github.com/ficlabapp/flt"

# max characters per physical line, excluding the newline
MAX_LINE_LENGTH = 78
FLAG_WIDTH = 4  # hex digits of the rendered flag prefix
CONTINUATION_PREFIX = "0" * FLAG_WIDTH

# masks
MASK_LINE_TYPE = 0x0003
MASK_LINE_FORMAT = 0x0FF0
MASK_ALIGN = 0x0030
MASK_DESTINATION = 0x00F0

# line flags
L_RESET = 0x0004
#         0x0008  reserved
L_ITALIC = 0x0010
L_BOLD = 0x0020
L_UNDERLINE = 0x0040
L_STRIKEOUT = 0x0080
L_SUPERTEXT = 0x0100
L_SUBTEXT = 0x0200
L_MONO = 0x0400
#         0x0800  reserved, 0x1000-0x8000 unassigned

# section / destination flags
VISUAL_BREAK = 0x0040
D_HEADER = 0x0100

# feature flags
F_DCMETA = 0x0001


class LineKind(IntEnum):
    """Two-bit ``type`` discriminant carried by every line."""

    TEXT = 1
    TYPED = 2
    META = 3


class LineType(IntEnum):
    """Sub-type of a typed line (hex prefix of its payload)."""

    NOOP = 0
    SECTION = 1
    PARAGRAPH = 2
    HINT = 3
    LINK = 4
    ANCHOR = 5
    BLOB = 6
    IMAGE = 7
    TABLE = 8
    DESTINATION = 9


class MetaType(IntEnum):
    """Sub-type of a metadata line (hex prefix of its payload)."""

    DOCTYPE = 0
    VERSION = 1
    FEATURES = 2
    DCTERM = 3
    GENERATOR = 4


class Destination(IntEnum):
    BODY = 0
    NOTE = 1
    CELL = 2
    HEAD = 3


class Align(IntEnum):
    DEFAULT = 0
    LEFT = 1
    CENTER = 2
    RIGHT = 3


DC_TERMS = frozenset(
    {
        "abstract",
        "accessRights",
        "accrualMethod",
        "accrualPeriodicity",
        "accrualPolicy",
        "alternative",
        "audience",
        "available",
        "bibliographicCitation",
        "conformsTo",
        "contributor",
        "coverage",
        "created",
        "creator",
        "date",
        "dateAccepted",
        "dateCopyrighted",
        "dateSubmitted",
        "description",
        "educationLevel",
        "extent",
        "format",
        "hasFormat",
        "hasPart",
        "hasVersion",
        "identifier",
        "instructionalMethod",
        "isFormatOf",
        "isPartOf",
        "isReferencedBy",
        "isReplacedBy",
        "isRequiredBy",
        "issued",
        "isVersionOf",
        "language",
        "license",
        "mediator",
        "medium",
        "modified",
        "provenance",
        "publisher",
        "references",
        "relation",
        "replaces",
        "requires",
        "rights",
        "rightsHolder",
        "source",
        "spatial",
        "subject",
        "tableOfContents",
        "temporal",
        "title",
        "type",
        "valid",
    }
)


def bit_offset(mask: int) -> int:
    """Offset of the lowest set bit in ``mask``."""

    if mask <= 0:
        raise ValueError("mask must be positive")
    return (mask & -mask).bit_length() - 1


__all__ = [
    "MEDIA_TYPE",
    "MIN_VERSION",
    "MAX_VERSION",
    "DEFAULT_VERSION",
    "DEFAULT_FEATURES",
    "DEFAULT_GENERATOR",
    "MAX_LINE_LENGTH",
    "FLAG_WIDTH",
    "CONTINUATION_PREFIX",
    "MASK_LINE_TYPE",
    "MASK_LINE_FORMAT",
    "MASK_ALIGN",
    "MASK_DESTINATION",
    "L_RESET",
    "L_ITALIC",
    "L_BOLD",
    "L_UNDERLINE",
    "L_STRIKEOUT",
    "L_SUPERTEXT",
    "L_SUBTEXT",
    "L_MONO",
    "VISUAL_BREAK",
    "D_HEADER",
    "F_DCMETA",
    "LineKind",
    "LineType",
    "MetaType",
    "Destination",
    "Align",
    "DC_TERMS",
    "bit_offset",
]
